"""Data models: statuses, verifiers, appeals, authority and errors."""

from sanctuary.models.appeal import AppealRecord, AppealState
from sanctuary.models.authority import AuthorityConfig
from sanctuary.models.errors import ErrorKind
from sanctuary.models.status import StatusRecord, StatusType
from sanctuary.models.verifier import VerifierRecord

__all__ = [
    "AppealRecord",
    "AppealState",
    "AuthorityConfig",
    "ErrorKind",
    "StatusRecord",
    "StatusType",
    "VerifierRecord",
]
