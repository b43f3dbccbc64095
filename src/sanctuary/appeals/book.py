"""Appeal book: one appeal slot per status id.

Anyone may file against an existing status and becomes the appeal's
resolver. Filing replaces the slot's previous appeal, resolved or not.
A pending appeal resolves once; resolution is irreversible.
"""

from __future__ import annotations

from typing import Optional

from sanctuary.models.appeal import AppealRecord, AppealState
from sanctuary.models.errors import ErrorKind


class AppealBook:
    """Mapping of status id to its current AppealRecord."""

    def __init__(self) -> None:
        self._appeals: dict[int, AppealRecord] = {}

    def get(self, status_id: int) -> Optional[AppealRecord]:
        return self._appeals.get(status_id)

    def state(self, status_id: int) -> AppealState:
        record = self._appeals.get(status_id)
        return record.state if record is not None else AppealState.NONE

    def file(
        self,
        status_id: int,
        reason: str,
        filer: str,
        height: int,
    ) -> Optional[AppealRecord]:
        """Open a pending appeal and return the one it replaced, if any."""
        previous = self._appeals.get(status_id)
        self._appeals[status_id] = AppealRecord(
            status_id=status_id,
            appeal_reason=reason,
            filed_at=height,
            resolver=filer,
        )
        return previous

    def check_resolution(self, status_id: int, caller: str) -> Optional[ErrorKind]:
        """Return why caller cannot resolve this appeal, or None."""
        record = self._appeals.get(status_id)
        if record is None:
            return ErrorKind.STATUS_NOT_FOUND
        if record.resolver != caller:
            return ErrorKind.NOT_AUTHORIZED
        if record.resolved:
            return ErrorKind.APPEAL_ALREADY_RESOLVED
        return None

    def resolve(self, status_id: int, outcome: bool) -> AppealRecord:
        """Mark the pending appeal resolved with the given outcome.

        Raises ValueError if there is no pending appeal.
        """
        record = self._appeals.get(status_id)
        if record is None or record.resolved:
            raise ValueError(f"No pending appeal for status {status_id}")
        record.state = AppealState.RESOLVED
        record.outcome = outcome
        return record

    def put(self, record: AppealRecord) -> None:
        self._appeals[record.status_id] = record

    def discard(self, status_id: int) -> None:
        self._appeals.pop(status_id, None)

    def all_appeals(self) -> list[AppealRecord]:
        return [self._appeals[sid] for sid in sorted(self._appeals)]
