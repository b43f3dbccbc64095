"""Persistence layer: audit event log and state storage."""

from sanctuary.persistence.event_log import EventLog, EventRecord, EventKind
from sanctuary.persistence.state_store import StateStore

__all__ = ["EventLog", "EventRecord", "EventKind", "StateStore"]
