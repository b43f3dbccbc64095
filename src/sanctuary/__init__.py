"""Sanctuary: a deterministic status registry.

Records, updates, verifies, renews and appeals subject status records
under a single configured authority and a set of self-registered
verifiers.
"""

from sanctuary.models import (
    AppealRecord,
    AppealState,
    AuthorityConfig,
    ErrorKind,
    StatusRecord,
    StatusType,
    VerifierRecord,
)
from sanctuary.policy import PolicyResolver
from sanctuary.service import ServiceResult, StatusRegistryService
from sanctuary.state import RegistryState
from sanctuary.transfer import LedgerTransfer, TransferRecord, ValueTransfer

__all__ = [
    "AppealRecord",
    "AppealState",
    "AuthorityConfig",
    "ErrorKind",
    "LedgerTransfer",
    "PolicyResolver",
    "RegistryState",
    "ServiceResult",
    "StatusRecord",
    "StatusRegistryService",
    "StatusType",
    "TransferRecord",
    "ValueTransfer",
    "VerifierRecord",
]
