"""Status lifecycle engine: authorization and precondition checks.

Pure computation: no side effects. Every check receives the registry
state and returns the ErrorKind that blocks the operation, or None.
The service applies mutations only after the relevant check passes, so
a refused operation never leaves partial changes behind.

Invariants enforced:
- Only verified verifiers create statuses.
- A subject receives at most one status, ever.
- Only a status's assigner updates, renews or deactivates it.
- A history trail never grows past the configured limit.
"""

from __future__ import annotations

from typing import Any, Optional

from sanctuary.models.errors import ErrorKind
from sanctuary.policy.resolver import PolicyResolver
from sanctuary.state import RegistryState
from sanctuary.validation import fields


class StatusLifecycleEngine:
    """Decides whether a lifecycle operation may proceed."""

    def __init__(self, resolver: PolicyResolver) -> None:
        self._resolver = resolver
        self._limits = resolver.field_limits()

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def check_authority_assignment(
        self, state: RegistryState, principal: Any,
    ) -> Optional[ErrorKind]:
        if not isinstance(principal, str) or not principal.strip():
            return ErrorKind.INVALID_AUTHORITY
        if principal == self._resolver.null_principal():
            return ErrorKind.INVALID_AUTHORITY
        if state.config.is_set:
            return ErrorKind.AUTHORITY_ALREADY_SET
        return None

    def check_admin(self, state: RegistryState, caller: str) -> Optional[ErrorKind]:
        """Gate for the fee, grace period and history limit setters.

        Compatibility mode only requires an authority to exist. Strict
        mode also requires the caller to be that authority.
        """
        if not state.config.is_set:
            return ErrorKind.AUTHORITY_NOT_SET
        if self._resolver.strict_admin_setters() and caller != state.config.authority:
            return ErrorKind.NOT_AUTHORIZED
        return None

    def check_verifier_registration(
        self, state: RegistryState, caller: Any,
    ) -> Optional[ErrorKind]:
        if not state.config.is_set:
            return ErrorKind.AUTHORITY_NOT_SET
        if not isinstance(caller, str) or not caller.strip():
            return ErrorKind.NOT_AUTHORIZED
        return None

    # ------------------------------------------------------------------
    # Status lifecycle
    # ------------------------------------------------------------------

    def check_assignment(
        self,
        state: RegistryState,
        caller: str,
        height: int,
        subject_id: Any,
        status_type: Any,
        expiration: Any,
        location: Any,
        country: Any,
        document_hash: Any,
        reason: Any,
        score: Any,
        rating: Any,
    ) -> Optional[ErrorKind]:
        """Ordered creation checks: capacity, fields, verifier, uniqueness,
        authority."""
        if state.statuses.is_full(state.config.max_statuses):
            return ErrorKind.MAX_STATUSES_EXCEEDED
        error = fields.validate_assignment(
            self._limits, height, subject_id, status_type, expiration,
            location, country, document_hash, reason, score, rating,
        )
        if error is not None:
            return error
        if not state.verifiers.is_verified(caller):
            return ErrorKind.INVALID_VERIFIER
        if state.statuses.has_subject(subject_id):
            return ErrorKind.STATUS_ALREADY_EXISTS
        if not state.config.is_set:
            return ErrorKind.AUTHORITY_NOT_SET
        return None

    def check_assigner(
        self, state: RegistryState, caller: str, status_id: int,
    ) -> Optional[ErrorKind]:
        record = state.statuses.get(status_id)
        if record is None:
            return ErrorKind.STATUS_NOT_FOUND
        if record.assigner != caller:
            return ErrorKind.NOT_AUTHORIZED
        return None

    def check_update(
        self,
        state: RegistryState,
        caller: str,
        height: int,
        status_id: int,
        status_type: Any,
        expiration: Any,
        reason: Any,
        score: Any,
        rating: Any,
    ) -> Optional[ErrorKind]:
        """All update checks, history capacity included, before any write."""
        error = self.check_assigner(state, caller, status_id)
        if error is not None:
            return error
        error = fields.validate_update(
            self._limits, height, status_type, expiration, reason, score, rating,
        )
        if error is not None:
            return error
        if not state.history.has_capacity(status_id, state.config.history_limit):
            return ErrorKind.INVALID_HISTORY_LIMIT
        return None

    def check_renewal(
        self, state: RegistryState, caller: str, status_id: int,
    ) -> Optional[ErrorKind]:
        error = self.check_assigner(state, caller, status_id)
        if error is not None:
            return error
        if not state.config.is_set:
            return ErrorKind.AUTHORITY_NOT_SET
        return None

    def renewal_extension(self, state: RegistryState) -> int:
        """Height units added to an expiration on renewal."""
        return state.config.grace_period * self._resolver.blocks_per_day()

    # ------------------------------------------------------------------
    # Appeals
    # ------------------------------------------------------------------

    def check_appeal_filing(
        self, state: RegistryState, status_id: int, reason: Any,
    ) -> Optional[ErrorKind]:
        if state.statuses.get(status_id) is None:
            return ErrorKind.STATUS_NOT_FOUND
        return fields.check_appeal_reason(reason, self._limits)

    # ------------------------------------------------------------------
    # Config setters
    # ------------------------------------------------------------------

    def check_grace_period(self, period: Any) -> Optional[ErrorKind]:
        return fields.check_grace_period(period, self._limits)

    def check_history_limit(self, limit: Any) -> Optional[ErrorKind]:
        return fields.check_history_limit(limit, self._limits)

    def check_renewal_fee(self, fee: Any) -> Optional[ErrorKind]:
        return fields.check_renewal_fee(fee)
