"""Sanctuary service: unified facade for the status registry.

This is the primary interface for programmatic access to the registry.
It orchestrates all subsystems:
- Authority configuration (one-time authority, fee, grace period, limits)
- Verifier registry (self-registration, assignment totals)
- Status lifecycle (assign, update, verify, renew, deactivate)
- History trails (bounded, append-only)
- Appeals (file, resolve once)
- Persistence (audit event log, state store)

Caller identity and height are explicit arguments of every operation;
the service never authenticates callers and never reads a clock.

All operations produce typed results: expected failures come back as a
ServiceResult carrying an ErrorKind, never as exceptions. Every check
runs before the first mutation, so a refused operation changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Union

from sanctuary.models.appeal import AppealRecord, AppealState
from sanctuary.models.errors import ErrorKind
from sanctuary.models.status import StatusRecord, StatusType
from sanctuary.models.verifier import VerifierRecord
from sanctuary.persistence.event_log import EventKind, EventLog, EventRecord
from sanctuary.persistence.state_store import StateStore
from sanctuary.policy.resolver import PolicyResolver
from sanctuary.registry.lifecycle import StatusLifecycleEngine
from sanctuary.state import RegistryState
from sanctuary.transfer import LedgerTransfer, ValueTransfer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceResult:
    """Result of a service operation.

    On failure, error holds the ErrorKind when the operation was refused
    by a registry rule. Infrastructure failures (audit log, state store)
    leave error as None and describe themselves in errors.
    """
    success: bool
    value: Any = None
    error: Optional[ErrorKind] = None
    errors: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)


class StatusRegistryService:
    """Status registry facade.

    Usage:
        resolver = PolicyResolver.from_config_dir(config_dir)
        service = StatusRegistryService(resolver)

        service.set_authority_contract("admin", "AUTH")
        service.register_verifier("V1")
        result = service.assign_status(
            "V1", subject_id=1, status_type=StatusType.PENDING,
            expiration=1000, location="Camp A", country="X",
            document_hash=bytes(32), reason="", score=50, rating=3,
            height=0,
        )
        status_id = result.value
        service.verify_status(status_id, height=999).value  # True

    Persistence (optional):
        service = StatusRegistryService(
            resolver, event_log=log, state_store=store,
        )
        # State is persisted on each mutation and loaded on construction.
    """

    def __init__(
        self,
        resolver: PolicyResolver,
        transfer: Optional[ValueTransfer] = None,
        event_log: Optional[EventLog] = None,
        state_store: Optional[StateStore] = None,
        state: Optional[RegistryState] = None,
    ) -> None:
        self._resolver = resolver
        self._engine = StatusLifecycleEngine(resolver)
        self._transfer: ValueTransfer = transfer if transfer is not None else LedgerTransfer()

        self._event_log = event_log
        self._state_store = state_store

        # Load persisted state or start fresh
        if state is not None:
            self._state = state
        elif state_store is not None and state_store.has_state:
            self._state = state_store.load()
        else:
            self._state = RegistryState.fresh(resolver)

        # Initialize counter from persisted log to avoid ID collision on restart
        self._event_counter = event_log.count if event_log is not None else 0

        # Set when a StateStore write fails after the audit event was
        # committed: in-memory state is correct, the store is stale.
        self._persistence_degraded: bool = False

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def authority(self) -> Optional[str]:
        return self._state.config.authority

    @property
    def persistence_degraded(self) -> bool:
        return self._persistence_degraded

    # ------------------------------------------------------------------
    # Authority configuration
    # ------------------------------------------------------------------

    def set_authority_contract(self, caller: str, principal: str) -> ServiceResult:
        """Configure the controlling authority. One-time and irreversible."""
        error = self._engine.check_authority_assignment(self._state, principal)
        if error:
            return self._reject("set_authority_contract", error, caller=caller)

        config = self._state.config
        config.authority = principal

        def _rollback() -> None:
            config.authority = None

        return self._commit(
            EventKind.AUTHORITY_SET, caller, 0,
            {"authority": principal}, _rollback, value=True,
        )

    def set_renewal_fee(self, caller: str, fee: int) -> ServiceResult:
        """Overwrite the renewal fee."""
        return self._set_config(
            "renewal_fee", fee, caller, self._engine.check_renewal_fee(fee),
        )

    def set_grace_period(self, caller: str, period: int) -> ServiceResult:
        """Overwrite the renewal grace period, in days."""
        return self._set_config(
            "grace_period", period, caller, self._engine.check_grace_period(period),
        )

    def set_history_limit(self, caller: str, limit: int) -> ServiceResult:
        """Overwrite the per-status history limit.

        Trails already longer than a lowered limit stay as they are; they
        simply accept no further updates.
        """
        return self._set_config(
            "history_limit", limit, caller, self._engine.check_history_limit(limit),
        )

    def _set_config(
        self,
        name: str,
        value: int,
        caller: str,
        value_error: Optional[ErrorKind],
    ) -> ServiceResult:
        # The value is checked before the authority gate.
        error = value_error or self._engine.check_admin(self._state, caller)
        if error:
            return self._reject(f"set_{name}", error, caller=caller, value=value)

        config = self._state.config
        previous = getattr(config, name)
        setattr(config, name, value)

        def _rollback() -> None:
            setattr(config, name, previous)

        return self._commit(
            EventKind.CONFIG_CHANGED, caller, 0,
            {"parameter": name, "previous": previous, "value": value},
            _rollback, value=True,
        )

    # ------------------------------------------------------------------
    # Verifier registry
    # ------------------------------------------------------------------

    def register_verifier(self, caller: str) -> ServiceResult:
        """Register the caller as a verified verifier with zeroed totals."""
        error = self._engine.check_verifier_registration(self._state, caller)
        if error:
            return self._reject("register_verifier", error, caller=caller)

        verifiers = self._state.verifiers
        previous = verifiers.get(caller)
        verifiers.register(caller)

        def _rollback() -> None:
            if previous is not None:
                verifiers.put(previous)
            else:
                verifiers.discard(caller)

        return self._commit(
            EventKind.VERIFIER_REGISTERED, caller, 0,
            {"principal": caller, "reregistered": previous is not None},
            _rollback, value=True,
        )

    def get_verifier(self, principal: str) -> Optional[VerifierRecord]:
        """Look up a verifier. Returns a copy."""
        record = self._state.verifiers.get(principal)
        return replace(record) if record is not None else None

    # ------------------------------------------------------------------
    # Status lifecycle
    # ------------------------------------------------------------------

    def assign_status(
        self,
        caller: str,
        subject_id: int,
        status_type: Union[StatusType, str],
        expiration: int,
        location: str,
        country: str,
        document_hash: bytes,
        reason: str,
        score: int,
        rating: int,
        height: int = 0,
    ) -> ServiceResult:
        """Create the subject's status. The value is the new status id."""
        error = self._engine.check_assignment(
            self._state, caller, height, subject_id, status_type, expiration,
            location, country, document_hash, reason, score, rating,
        )
        if error:
            return self._reject(
                "assign_status", error, caller=caller, subject_id=subject_id,
            )

        record = StatusRecord(
            subject_id=subject_id,
            status_type=StatusType.parse(status_type),
            created_at=height,
            updated_at=height,
            expiration=expiration,
            assigner=caller,
            location=location,
            country=country,
            document_hash=bytes(document_hash),
            reason=reason,
            score=score,
            rating=rating,
        )
        statuses = self._state.statuses
        history = self._state.history
        verifiers = self._state.verifiers

        status_id = statuses.create(record)
        history.seed(status_id)
        verifier = verifiers.record_assignment(caller, score)

        def _rollback() -> None:
            statuses.undo_create(status_id)
            history.drop(status_id)
            verifier.score -= score
            verifier.assignments -= 1

        return self._commit(
            EventKind.STATUS_ASSIGNED, caller, height,
            {
                "status_id": status_id,
                "subject_id": subject_id,
                "status_type": record.status_type.value,
                "expiration": expiration,
                "document_hash": record.document_hash.hex(),
            },
            _rollback, value=status_id,
        )

    def get_status(self, status_id: int) -> Optional[StatusRecord]:
        """Look up a status. Returns a copy, or None if absent."""
        record = self._state.statuses.get(status_id)
        return replace(record) if record is not None else None

    def status_id_for_subject(self, subject_id: int) -> Optional[int]:
        return self._state.statuses.id_for_subject(subject_id)

    def update_status(
        self,
        caller: str,
        status_id: int,
        new_status_type: Union[StatusType, str],
        new_expiration: int,
        new_reason: str,
        new_score: int,
        new_rating: int,
        height: int = 0,
    ) -> ServiceResult:
        """Change a status's mutable fields and extend its history.

        Only the assigner may update. A full history refuses the update
        and leaves the record untouched.
        """
        error = self._engine.check_update(
            self._state, caller, height, status_id, new_status_type,
            new_expiration, new_reason, new_score, new_rating,
        )
        if error:
            return self._reject(
                "update_status", error, caller=caller, status_id=status_id,
            )

        record = self._state.statuses.get(status_id)
        history = self._state.history
        before = replace(record)

        record.status_type = StatusType.parse(new_status_type)
        record.expiration = new_expiration
        record.reason = new_reason
        record.score = new_score
        record.rating = new_rating
        record.updated_at = height
        length = history.append(status_id, self._state.config.history_limit)

        def _rollback() -> None:
            record.status_type = before.status_type
            record.expiration = before.expiration
            record.reason = before.reason
            record.score = before.score
            record.rating = before.rating
            record.updated_at = before.updated_at
            history.pop(status_id)

        return self._commit(
            EventKind.STATUS_UPDATED, caller, height,
            {
                "status_id": status_id,
                "status_type": record.status_type.value,
                "expiration": new_expiration,
                "score": new_score,
                "rating": new_rating,
                "history_length": length,
            },
            _rollback, value=True,
        )

    def get_history(self, status_id: int) -> list[int]:
        return self._state.history.entries(status_id)

    def verify_status(self, status_id: int, height: int = 0) -> ServiceResult:
        """True iff the status is active and height < expiration."""
        record = self._state.statuses.get(status_id)
        if record is None:
            return self._reject(
                "verify_status", ErrorKind.STATUS_NOT_FOUND, status_id=status_id,
            )
        return ServiceResult(success=True, value=record.is_valid_at(height))

    def batch_verify_statuses(
        self, status_ids: list[int], height: int = 0,
    ) -> ServiceResult:
        """Verify each id in order.

        The first missing id fails the whole batch and no partial list
        is returned.
        """
        results: list[bool] = []
        for status_id in status_ids:
            verdict = self.verify_status(status_id, height)
            if not verdict.success:
                return verdict
            results.append(verdict.value)
        return ServiceResult(success=True, value=results)

    def renew_status(self, caller: str, status_id: int, height: int = 0) -> ServiceResult:
        """Extend a status by the grace period, paying the renewal fee.

        The fee moves from caller to authority before anything else
        changes; a refused transfer fails the renewal with no effect. If
        the renewal cannot be made durable afterwards, the fee is returned
        to the caller.
        """
        error = self._engine.check_renewal(self._state, caller, status_id)
        if error:
            return self._reject(
                "renew_status", error, caller=caller, status_id=status_id,
            )

        config = self._state.config
        fee = config.renewal_fee
        recipient = config.authority
        if not self._transfer.transfer(fee, caller, recipient):
            return self._reject(
                "renew_status", ErrorKind.TRANSFER_FAILED,
                caller=caller, status_id=status_id, fee=fee,
            )

        record = self._state.statuses.get(status_id)
        previous_expiration = record.expiration
        record.expiration = previous_expiration + self._engine.renewal_extension(self._state)

        unrefunded: list[str] = []

        def _rollback() -> None:
            record.expiration = previous_expiration
            if not self._transfer.transfer(fee, recipient, caller):
                logger.error(
                    "Renewal of status %d rolled back but refund of %d to %s "
                    "was refused", status_id, fee, caller,
                )
                unrefunded.append(
                    f"Refund failure: fee of {fee} was not returned to {caller}"
                )

        result = self._commit(
            EventKind.STATUS_RENEWED, caller, height,
            {
                "status_id": status_id,
                "fee": fee,
                "recipient": recipient,
                "previous_expiration": previous_expiration,
                "expiration": record.expiration,
            },
            _rollback, value=True,
        )
        if unrefunded:
            return replace(result, errors=result.errors + unrefunded)
        return result

    def deactivate_status(self, caller: str, status_id: int, height: int = 0) -> ServiceResult:
        """Mark a status inactive. Only the assigner may deactivate."""
        error = self._engine.check_assigner(self._state, caller, status_id)
        if error:
            return self._reject(
                "deactivate_status", error, caller=caller, status_id=status_id,
            )

        record = self._state.statuses.get(status_id)
        was_active = record.active
        record.active = False

        def _rollback() -> None:
            record.active = was_active

        return self._commit(
            EventKind.STATUS_DEACTIVATED, caller, height,
            {"status_id": status_id, "was_active": was_active},
            _rollback, value=True,
        )

    def get_status_count(self) -> ServiceResult:
        """Number of statuses ever created."""
        return ServiceResult(success=True, value=self._state.statuses.count)

    # ------------------------------------------------------------------
    # Appeals
    # ------------------------------------------------------------------

    def file_appeal(
        self, caller: str, status_id: int, reason: str, height: int = 0,
    ) -> ServiceResult:
        """Open an appeal against a status; the caller becomes its resolver.

        Any prior appeal on the same status is replaced.
        """
        error = self._engine.check_appeal_filing(self._state, status_id, reason)
        if error:
            return self._reject(
                "file_appeal", error, caller=caller, status_id=status_id,
            )

        appeals = self._state.appeals
        previous = appeals.file(status_id, reason, caller, height)

        def _rollback() -> None:
            if previous is not None:
                appeals.put(previous)
            else:
                appeals.discard(status_id)

        return self._commit(
            EventKind.APPEAL_FILED, caller, height,
            {
                "status_id": status_id,
                "replaced": previous.state.value if previous is not None else None,
            },
            _rollback, value=True,
        )

    def resolve_appeal(
        self, caller: str, status_id: int, outcome: bool, height: int = 0,
    ) -> ServiceResult:
        """Resolve a pending appeal. Only its filer may resolve it.

        An upheld appeal (outcome=True) deactivates the status.
        """
        appeals = self._state.appeals
        error = appeals.check_resolution(status_id, caller)
        if error:
            return self._reject(
                "resolve_appeal", error, caller=caller, status_id=status_id,
            )

        appeal = appeals.resolve(status_id, outcome)
        record = self._state.statuses.get(status_id)
        was_active = record.active if record is not None else None
        if outcome and record is not None:
            record.active = False

        def _rollback() -> None:
            appeal.state = AppealState.PENDING
            appeal.outcome = False
            if record is not None:
                record.active = was_active

        return self._commit(
            EventKind.APPEAL_RESOLVED, caller, height,
            {"status_id": status_id, "outcome": outcome},
            _rollback, value=True,
        )

    def get_appeal(self, status_id: int) -> Optional[AppealRecord]:
        """Look up the appeal on a status. Returns a copy."""
        record = self._state.appeals.get(status_id)
        return replace(record) if record is not None else None

    def appeal_state(self, status_id: int) -> AppealState:
        return self._state.appeals.state(status_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reject(self, operation: str, error: ErrorKind, **context: Any) -> ServiceResult:
        logger.debug("%s refused: %s %s", operation, error.value, context)
        return ServiceResult(success=False, error=error, errors=[error.message])

    def _commit(
        self,
        kind: EventKind,
        caller: str,
        height: int,
        payload: dict[str, Any],
        on_rollback: Callable[[], None],
        value: Any,
    ) -> ServiceResult:
        """Make an applied mutation durable, or undo it.

        Without an event log the state store is the only durable record,
        so a store failure rolls the mutation back. With an event log
        the audit event decides: a log failure rolls back, while a store
        failure after the event is durable only degrades persistence.
        """
        if self._event_log is None:
            err = self._safe_persist(on_rollback=on_rollback)
            if err:
                return ServiceResult(success=False, errors=[err])
            logger.info("%s by %s at height %d: %s", kind.value, caller, height, payload)
            return ServiceResult(success=True, value=value)

        err = self._record_event(kind, caller, height, payload)
        if err:
            on_rollback()
            logger.warning("%s rolled back: %s", kind.value, err)
            return ServiceResult(success=False, errors=[err])

        logger.info("%s by %s at height %d: %s", kind.value, caller, height, payload)
        data: dict[str, Any] = {}
        warning = self._safe_persist_post_audit()
        if warning:
            data["warning"] = warning
        return ServiceResult(success=True, value=value, data=data)

    def _next_event_id(self) -> str:
        """Generate a monotonically increasing unique event ID."""
        self._event_counter += 1
        return f"EVT-{self._event_counter:08d}"

    def _record_event(
        self,
        kind: EventKind,
        caller: str,
        height: int,
        payload: dict[str, Any],
    ) -> Optional[str]:
        """Append an audit event. Returns error string or None."""
        try:
            event = EventRecord.create(
                event_id=self._next_event_id(),
                event_kind=kind,
                caller=caller,
                height=height,
                payload=payload,
            )
            self._event_log.append(event)
        except (ValueError, OSError) as e:
            return f"Event log failure: {e}"
        return None

    def _persist_state(self) -> None:
        """Persist current state to the state store (if wired)."""
        if self._state_store is None:
            return
        self._state_store.save(self._state)

    def _safe_persist(
        self,
        on_rollback: Optional[Callable[[], None]] = None,
    ) -> Optional[str]:
        """Persist state; on failure undo the in-memory mutation."""
        try:
            self._persist_state()
            return None
        except OSError as e:
            if on_rollback is not None:
                on_rollback()
            logger.warning("Persistence failure, mutation rolled back: %s", e)
            return f"Persistence failure: {e}"

    def _safe_persist_post_audit(self) -> Optional[str]:
        """Persist state after the audit event has been committed.

        MUST NOT roll back: the audit trail is already durable. Flags
        degraded persistence and returns a warning instead.
        """
        try:
            self._persist_state()
            return None
        except OSError as e:
            self._persistence_degraded = True
            logger.warning("Persistence degraded: %s", e)
            return (
                f"Persistence degraded: {e}; state committed in audit trail "
                f"but StateStore is stale"
            )
