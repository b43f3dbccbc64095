"""Unit tests for the registry stores: verifiers, statuses, history, appeals."""

import pytest

from sanctuary.appeals.book import AppealBook
from sanctuary.models.appeal import AppealState
from sanctuary.models.errors import ErrorKind
from sanctuary.models.status import StatusRecord, StatusType
from sanctuary.registry.history import HistoryLog
from sanctuary.registry.statuses import StatusStore
from sanctuary.registry.verifiers import VerifierRegistry


def _make_record(subject_id: int = 1, assigner: str = "V1", expiration: int = 1000) -> StatusRecord:
    return StatusRecord(
        subject_id=subject_id,
        status_type=StatusType.REGISTERED,
        created_at=0,
        updated_at=0,
        expiration=expiration,
        assigner=assigner,
        location="CampA",
        country="CountryX",
        document_hash=bytes(32),
        reason="Valid",
        score=80,
        rating=4,
    )


# ===================================================================
# Verifier registry
# ===================================================================

class TestVerifierRegistry:
    def test_register_creates_verified_record(self) -> None:
        registry = VerifierRegistry()
        record = registry.register("V1")
        assert record.verified
        assert (record.score, record.assignments) == (0, 0)
        assert registry.is_verified("V1")
        assert not registry.is_verified("V2")

    def test_reregister_resets_totals(self) -> None:
        registry = VerifierRegistry()
        registry.register("V1")
        registry.record_assignment("V1", 40)
        registry.register("V1")
        assert registry.get("V1").score == 0
        assert registry.count == 1

    def test_record_assignment_accumulates(self) -> None:
        registry = VerifierRegistry()
        registry.register("V1")
        registry.record_assignment("V1", 40)
        registry.record_assignment("V1", 35)
        record = registry.get("V1")
        assert record.score == 75
        assert record.assignments == 2

    def test_record_assignment_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown verifier"):
            VerifierRegistry().record_assignment("ghost", 1)

    def test_blank_principal_rejected(self) -> None:
        with pytest.raises(ValueError):
            VerifierRegistry().register("  ")


# ===================================================================
# Status store
# ===================================================================

class TestStatusStore:
    def test_ids_are_sequential(self) -> None:
        store = StatusStore()
        assert store.create(_make_record(subject_id=1)) == 0
        assert store.create(_make_record(subject_id=2)) == 1
        assert store.create(_make_record(subject_id=3)) == 2
        assert store.count == 3

    def test_subject_index(self) -> None:
        store = StatusStore()
        store.create(_make_record(subject_id=7))
        assert store.has_subject(7)
        assert store.id_for_subject(7) == 0
        assert store.id_for_subject(8) is None

    def test_duplicate_subject_raises(self) -> None:
        store = StatusStore()
        store.create(_make_record(subject_id=7))
        with pytest.raises(ValueError):
            store.create(_make_record(subject_id=7))

    def test_deactivation_keeps_subject_indexed(self) -> None:
        store = StatusStore()
        sid = store.create(_make_record(subject_id=7))
        store.get(sid).active = False
        assert store.has_subject(7)

    def test_is_full(self) -> None:
        store = StatusStore()
        assert not store.is_full(1)
        store.create(_make_record())
        assert store.is_full(1)

    def test_undo_create_only_latest(self) -> None:
        store = StatusStore()
        store.create(_make_record(subject_id=1))
        store.create(_make_record(subject_id=2))
        with pytest.raises(ValueError):
            store.undo_create(0)
        store.undo_create(1)
        assert store.count == 1
        assert not store.has_subject(2)

    def test_restore_rejects_inconsistent_index(self) -> None:
        store = StatusStore()
        with pytest.raises(ValueError, match="inconsistent"):
            store.restore({0: _make_record(subject_id=1)}, {2: 0}, 1)

    def test_restore_rejects_id_beyond_counter(self) -> None:
        store = StatusStore()
        with pytest.raises(ValueError):
            store.restore({3: _make_record(subject_id=1)}, {1: 3}, 2)


class TestStatusRecord:
    def test_valid_until_expiration(self) -> None:
        record = _make_record(expiration=1000)
        assert record.is_valid_at(999)
        assert not record.is_valid_at(1000)
        assert record.is_expired_at(1000)

    def test_inactive_never_valid(self) -> None:
        record = _make_record(expiration=1000)
        record.active = False
        assert not record.is_valid_at(0)


# ===================================================================
# History log
# ===================================================================

class TestHistoryLog:
    def test_seed_starts_at_one(self) -> None:
        history = HistoryLog()
        history.seed(4)
        assert history.entries(4) == [4]
        assert history.length(4) == 1

    def test_append_until_limit(self) -> None:
        history = HistoryLog()
        history.seed(0)
        assert history.append(0, 3) == 2
        assert history.append(0, 3) == 3
        assert not history.has_capacity(0, 3)
        with pytest.raises(ValueError, match="full"):
            history.append(0, 3)
        assert history.length(0) == 3

    def test_entries_is_a_copy(self) -> None:
        history = HistoryLog()
        history.seed(0)
        history.entries(0).append(99)
        assert history.entries(0) == [0]

    def test_unknown_status_is_empty(self) -> None:
        assert HistoryLog().entries(5) == []


# ===================================================================
# Appeal book
# ===================================================================

class TestAppealBook:
    def test_no_appeal_state(self) -> None:
        assert AppealBook().state(0) == AppealState.NONE

    def test_file_creates_pending(self) -> None:
        book = AppealBook()
        assert book.file(0, "Wrong decision", "P1", 10) is None
        record = book.get(0)
        assert record.state == AppealState.PENDING
        assert record.resolver == "P1"
        assert record.filed_at == 10

    def test_refile_overwrites_and_returns_previous(self) -> None:
        book = AppealBook()
        book.file(0, "first", "P1", 1)
        previous = book.file(0, "second", "P2", 2)
        assert previous.appeal_reason == "first"
        assert book.get(0).resolver == "P2"

    def test_resolution_checks(self) -> None:
        book = AppealBook()
        assert book.check_resolution(0, "P1") == ErrorKind.STATUS_NOT_FOUND
        book.file(0, "reason", "P1", 0)
        assert book.check_resolution(0, "P2") == ErrorKind.NOT_AUTHORIZED
        assert book.check_resolution(0, "P1") is None
        book.resolve(0, True)
        assert book.check_resolution(0, "P1") == ErrorKind.APPEAL_ALREADY_RESOLVED

    def test_resolve_twice_raises(self) -> None:
        book = AppealBook()
        book.file(0, "reason", "P1", 0)
        book.resolve(0, False)
        with pytest.raises(ValueError):
            book.resolve(0, True)
        assert book.get(0).outcome is False
