"""History log: bounded, append-only trail per status.

Each status starts with a one-entry history at creation; every
successful update appends one more. Entries are never removed, so once
a trail reaches the configured limit further updates are refused.
"""

from __future__ import annotations


class HistoryLog:
    """Ordered status-id references per status id."""

    def __init__(self) -> None:
        self._trails: dict[int, list[int]] = {}

    def seed(self, status_id: int) -> None:
        self._trails[status_id] = [status_id]

    def entries(self, status_id: int) -> list[int]:
        return list(self._trails.get(status_id, []))

    def length(self, status_id: int) -> int:
        return len(self._trails.get(status_id, []))

    def has_capacity(self, status_id: int, limit: int) -> bool:
        return self.length(status_id) < limit

    def append(self, status_id: int, limit: int) -> int:
        """Append one entry and return the new length.

        Raises ValueError if the trail is already at limit; callers check
        has_capacity() before mutating anything.
        """
        trail = self._trails.setdefault(status_id, [])
        if len(trail) >= limit:
            raise ValueError(
                f"History for status {status_id} is full ({len(trail)}/{limit})"
            )
        trail.append(status_id)
        return len(trail)

    def pop(self, status_id: int) -> None:
        """Drop the newest entry (rollback only)."""
        trail = self._trails.get(status_id)
        if trail:
            trail.pop()

    def drop(self, status_id: int) -> None:
        """Forget a whole trail (rollback of a creation only)."""
        self._trails.pop(status_id, None)

    def restore(self, trails: dict[int, list[int]]) -> None:
        self._trails = {sid: list(t) for sid, t in trails.items()}

    def all_trails(self) -> dict[int, list[int]]:
        return {sid: list(t) for sid, t in self._trails.items()}
