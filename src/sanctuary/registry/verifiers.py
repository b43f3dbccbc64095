"""Verifier registry: principals allowed to assign statuses.

Registration is self-service: a principal registers itself and is
immediately verified with zeroed totals. Re-registering resets the
totals. There is no public removal path.

Thread-safety: this class is not thread-safe. The caller must
serialise access; the service processes one operation at a time.
"""

from __future__ import annotations

from typing import Optional

from sanctuary.models.verifier import VerifierRecord


class VerifierRegistry:
    """Mapping of principal to VerifierRecord."""

    def __init__(self) -> None:
        self._verifiers: dict[str, VerifierRecord] = {}

    def register(self, principal: str) -> VerifierRecord:
        """Insert or overwrite a verified record for principal.

        Raises ValueError if principal is blank.
        """
        if not principal or not principal.strip():
            raise ValueError("Cannot register verifier with blank principal")
        record = VerifierRecord(principal=principal)
        self._verifiers[principal] = record
        return record

    def get(self, principal: str) -> Optional[VerifierRecord]:
        return self._verifiers.get(principal)

    def is_verified(self, principal: str) -> bool:
        record = self._verifiers.get(principal)
        return record is not None and record.verified

    def record_assignment(self, principal: str, score: int) -> VerifierRecord:
        """Add one assignment of the given score to a verifier's totals."""
        record = self._verifiers.get(principal)
        if record is None:
            raise ValueError(f"Unknown verifier: {principal}")
        record.score += score
        record.assignments += 1
        return record

    def put(self, record: VerifierRecord) -> None:
        """Store a record as-is (state recovery and rollback)."""
        self._verifiers[record.principal] = record

    def discard(self, principal: str) -> None:
        """Drop a record (rollback of a first registration only)."""
        self._verifiers.pop(principal, None)

    def all_verifiers(self) -> list[VerifierRecord]:
        return list(self._verifiers.values())

    @property
    def count(self) -> int:
        return len(self._verifiers)
