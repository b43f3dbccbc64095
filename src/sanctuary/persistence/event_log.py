"""Append-only audit log: one record per successful registry mutation.

Events are immutable once written. Each record carries the caller, the
height the operation ran at, and a SHA-256 hash over its canonical JSON
form. The log can be persisted to a JSONL file and is verified record by
record when loaded back: a tampered or replayed record fails the load.
"""

from __future__ import annotations

import enum
import hashlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional


class EventKind(str, enum.Enum):
    """Classification of registry events."""
    AUTHORITY_SET = "authority_set"
    CONFIG_CHANGED = "config_changed"
    VERIFIER_REGISTERED = "verifier_registered"
    STATUS_ASSIGNED = "status_assigned"
    STATUS_UPDATED = "status_updated"
    STATUS_RENEWED = "status_renewed"
    STATUS_DEACTIVATED = "status_deactivated"
    APPEAL_FILED = "appeal_filed"
    APPEAL_RESOLVED = "appeal_resolved"


def _event_hash(
    event_id: str,
    event_kind: str,
    caller: str,
    height: int,
    payload: dict[str, Any],
) -> str:
    canonical = json.dumps(
        {
            "event_id": event_id,
            "event_kind": event_kind,
            "caller": caller,
            "height": height,
            "payload": payload,
        },
        sort_keys=True,
        ensure_ascii=False,
    ).encode("utf-8")
    return f"sha256:{hashlib.sha256(canonical).hexdigest()}"


@dataclass(frozen=True)
class EventRecord:
    """A single immutable audit event."""
    event_id: str
    event_kind: EventKind
    caller: str
    height: int
    payload: dict[str, Any]
    event_hash: str

    @staticmethod
    def create(
        event_id: str,
        event_kind: EventKind,
        caller: str,
        height: int,
        payload: dict[str, Any],
    ) -> EventRecord:
        """Create a new event record with computed hash."""
        return EventRecord(
            event_id=event_id,
            event_kind=event_kind,
            caller=caller,
            height=height,
            payload=payload,
            event_hash=_event_hash(event_id, event_kind.value, caller, height, payload),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_kind": self.event_kind.value,
            "caller": self.caller,
            "height": self.height,
            "payload": self.payload,
            "event_hash": self.event_hash,
        }


class EventLog:
    """Append-only event log with optional JSONL persistence."""

    def __init__(self, storage_path: Optional[Path] = None) -> None:
        self._events: list[EventRecord] = []
        self._event_ids: set[str] = set()
        self._storage_path = storage_path

        if storage_path and storage_path.exists():
            self._load_from_file(storage_path)

    def append(self, event: EventRecord) -> None:
        """Append an event to the log.

        Raises ValueError if event_id is a duplicate (replay protection).
        Raises OSError if the backing file cannot be written; the event
        is then not recorded in memory either.
        """
        if event.event_id in self._event_ids:
            raise ValueError(f"Duplicate event ID: {event.event_id}")

        if self._storage_path:
            with self._storage_path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(event.to_dict(), sort_keys=True, ensure_ascii=False) + "\n")

        self._events.append(event)
        self._event_ids.add(event.event_id)

    def events(self, kind: Optional[EventKind] = None) -> list[EventRecord]:
        """Return events, optionally filtered by kind."""
        if kind is None:
            return list(self._events)
        return [e for e in self._events if e.event_kind == kind]

    def events_for_status(self, status_id: int) -> list[EventRecord]:
        return [e for e in self._events if e.payload.get("status_id") == status_id]

    @property
    def count(self) -> int:
        return len(self._events)

    @property
    def last_event(self) -> Optional[EventRecord]:
        return self._events[-1] if self._events else None

    def _load_from_file(self, path: Path) -> None:
        """Load events with integrity verification.

        Fail-closed: rejects tampered records (hash mismatch) and
        duplicate event IDs.
        """
        with path.open("r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                data = json.loads(line)
                event_id = data["event_id"]

                if event_id in self._event_ids:
                    raise ValueError(
                        f"Duplicate event ID on recovery (line {line_num}): {event_id}"
                    )

                expected = _event_hash(
                    event_id, data["event_kind"], data["caller"],
                    data["height"], data["payload"],
                )
                if data["event_hash"] != expected:
                    raise ValueError(
                        f"Integrity check failed (line {line_num}): event {event_id} "
                        f"stored hash {data['event_hash']} != computed {expected}"
                    )

                self._events.append(EventRecord(
                    event_id=event_id,
                    event_kind=EventKind(data["event_kind"]),
                    caller=data["caller"],
                    height=data["height"],
                    payload=data["payload"],
                    event_hash=data["event_hash"],
                ))
                self._event_ids.add(event_id)
