"""Appeal data models: challenges against a status outcome.

One appeal slot exists per status id. Filing replaces whatever the slot
held. A pending appeal is resolved exactly once, by its filer; an upheld
appeal (outcome=True) deactivates the status.

    NONE → PENDING (file)
    PENDING → RESOLVED (resolve, irreversible)
    PENDING/RESOLVED → PENDING (re-file overwrites)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class AppealState(str, enum.Enum):
    """State of the appeal slot for a status id."""
    NONE = "none"
    PENDING = "pending"
    RESOLVED = "resolved"


@dataclass
class AppealRecord:
    """An appeal filed against a status.

    resolver is the filer: only they may resolve the appeal.
    outcome is meaningful only once state is RESOLVED.
    """
    status_id: int
    appeal_reason: str
    filed_at: int
    resolver: str
    state: AppealState = AppealState.PENDING
    outcome: bool = False

    @property
    def resolved(self) -> bool:
        return self.state == AppealState.RESOLVED
