"""Registry module: verifier registry, status store and history log."""

from sanctuary.registry.history import HistoryLog
from sanctuary.registry.statuses import StatusStore
from sanctuary.registry.verifiers import VerifierRegistry

__all__ = ["HistoryLog", "StatusStore", "VerifierRegistry"]
