"""Authority configuration: the single administrative slot.

The authority principal is set once and never reassigned. Fee, grace
period and history limit are overwritten by the admin setters once an
authority exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class AuthorityConfig:
    """Controlling principal and the parameters it governs."""
    renewal_fee: int
    grace_period: int
    history_limit: int
    max_statuses: int
    authority: Optional[str] = None

    @property
    def is_set(self) -> bool:
        return self.authority is not None
