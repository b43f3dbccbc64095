"""Status store: status records keyed by monotonically increasing id.

Ids are allocated as 0, 1, 2, ... in creation order. A subject index
maps each subject to the id it received; the index is never cleared,
so a subject can hold at most one status over the registry's lifetime.

The counter counts statuses ever created, not active ones.
"""

from __future__ import annotations

from typing import Optional

from sanctuary.models.status import StatusRecord


class StatusStore:
    """Owns every StatusRecord and the subject uniqueness index."""

    def __init__(self) -> None:
        self._statuses: dict[int, StatusRecord] = {}
        self._by_subject: dict[int, int] = {}
        self._next_id = 0

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def count(self) -> int:
        """Number of statuses ever created."""
        return self._next_id

    def is_full(self, max_statuses: int) -> bool:
        return self._next_id >= max_statuses

    def has_subject(self, subject_id: int) -> bool:
        return subject_id in self._by_subject

    def id_for_subject(self, subject_id: int) -> Optional[int]:
        return self._by_subject.get(subject_id)

    def get(self, status_id: int) -> Optional[StatusRecord]:
        return self._statuses.get(status_id)

    def create(self, record: StatusRecord) -> int:
        """Store a new record under the next id and index its subject.

        Raises ValueError if the subject already holds a status.
        """
        if record.subject_id in self._by_subject:
            raise ValueError(f"Subject {record.subject_id} already has a status")
        status_id = self._next_id
        self._statuses[status_id] = record
        self._by_subject[record.subject_id] = status_id
        self._next_id += 1
        return status_id

    def undo_create(self, status_id: int) -> None:
        """Reverse the most recent create (rollback only)."""
        if status_id != self._next_id - 1:
            raise ValueError(f"Can only undo the latest status, not {status_id}")
        record = self._statuses.pop(status_id)
        self._by_subject.pop(record.subject_id, None)
        self._next_id -= 1

    def items(self) -> list[tuple[int, StatusRecord]]:
        return sorted(self._statuses.items())

    def restore(
        self,
        statuses: dict[int, StatusRecord],
        by_subject: dict[int, int],
        next_id: int,
    ) -> None:
        """Replace the whole store with recovered state."""
        if any(sid >= next_id for sid in statuses):
            raise ValueError("Recovered status id at or beyond next_id")
        for subject_id, status_id in by_subject.items():
            record = statuses.get(status_id)
            if record is None or record.subject_id != subject_id:
                raise ValueError(
                    f"Subject index entry {subject_id} -> {status_id} is inconsistent"
                )
        self._statuses = dict(statuses)
        self._by_subject = dict(by_subject)
        self._next_id = next_id

    def subject_index(self) -> dict[int, int]:
        return dict(self._by_subject)
