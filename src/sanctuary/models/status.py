"""Status data models: the record a verifier assigns to a subject.

A status record is created once per subject and never re-created: the
subject index is not cleared on deactivation. Location, country and
document hash are fixed at creation. Type, expiration, reason, score and
rating change through updates; expiration also moves on renewal.

Lifecycle (per status id):
    ACTIVE → ACTIVE (update, history grows)
    ACTIVE → ACTIVE with later expiration (renewal)
    ACTIVE → DEACTIVATED (explicit deactivation or appeal upheld)

Expiry is not stored: a record is expired when height >= expiration.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


class StatusType(str, enum.Enum):
    """Standing a subject can be assigned."""
    REGISTERED = "registered"
    ASYLUM_GRANTED = "asylum-granted"
    PENDING = "pending"
    DENIED = "denied"

    @classmethod
    def parse(cls, value: Union[StatusType, str]) -> Optional[StatusType]:
        """Return the matching member, or None for anything outside the set."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class StatusRecord:
    """A subject's current standing, owned by the status store."""
    subject_id: int
    status_type: StatusType
    created_at: int
    updated_at: int
    expiration: int
    assigner: str
    location: str
    country: str
    document_hash: bytes
    reason: str
    score: int
    rating: int
    active: bool = True

    def is_valid_at(self, height: int) -> bool:
        """Active and not yet expired at the given height."""
        return self.active and height < self.expiration

    def is_expired_at(self, height: int) -> bool:
        return height >= self.expiration
