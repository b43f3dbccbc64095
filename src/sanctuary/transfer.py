"""Value transfer: the one external side effect of the registry.

Renewal asks a ValueTransfer to move the renewal fee from the caller to
the authority. The call is synchronous; a False return fails the
renewal before any registry state changes. A renewal rolled back after
the fee moved is refunded with a transfer in the opposite direction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class ValueTransfer(Protocol):
    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        ...


@dataclass(frozen=True)
class TransferRecord:
    """A transfer the ledger accepted."""
    amount: int
    sender: str
    recipient: str


class LedgerTransfer:
    """In-process transfer service that records every accepted transfer.

    Without balances every transfer succeeds. With a balance map, a
    sender without enough funds is refused and balances move on success.
    fail=True refuses everything.
    """

    def __init__(
        self,
        balances: Optional[dict[str, int]] = None,
        fail: bool = False,
    ) -> None:
        self._balances = dict(balances) if balances is not None else None
        self._fail = fail
        self.transfers: list[TransferRecord] = []

    def balance(self, principal: str) -> Optional[int]:
        if self._balances is None:
            return None
        return self._balances.get(principal, 0)

    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        if self._fail:
            logger.warning("Transfer of %d from %s refused", amount, sender)
            return False
        if self._balances is not None:
            available = self._balances.get(sender, 0)
            if available < amount:
                logger.warning(
                    "Transfer of %d from %s refused: balance %d",
                    amount, sender, available,
                )
                return False
            self._balances[sender] = available - amount
            self._balances[recipient] = self._balances.get(recipient, 0) + amount
        self.transfers.append(TransferRecord(amount, sender, recipient))
        return True
