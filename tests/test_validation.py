"""Unit tests for the validation layer.

Pure functions: each check returns the first ErrorKind or None.
"""

import pytest

from sanctuary.models.errors import ErrorKind
from sanctuary.models.status import StatusType
from sanctuary.policy.resolver import PolicyResolver
from sanctuary.validation import fields

LIMITS = PolicyResolver.default().field_limits()
HASH = bytes(32)


def _assignment(**overrides) -> dict:
    args = dict(
        subject_id=1,
        status_type="registered",
        expiration=1000,
        location="CampA",
        country="CountryX",
        document_hash=HASH,
        reason="Valid docs",
        score=80,
        rating=4,
    )
    args.update(overrides)
    return args


class TestSingleFieldChecks:
    def test_subject_id_must_be_positive(self) -> None:
        assert fields.check_subject_id(1) is None
        assert fields.check_subject_id(0) == ErrorKind.INVALID_SUBJECT_ID
        assert fields.check_subject_id(-3) == ErrorKind.INVALID_SUBJECT_ID

    def test_subject_id_rejects_non_integers(self) -> None:
        assert fields.check_subject_id("1") == ErrorKind.INVALID_SUBJECT_ID
        assert fields.check_subject_id(True) == ErrorKind.INVALID_SUBJECT_ID

    def test_status_type_accepts_enum_and_wire_string(self) -> None:
        assert fields.check_status_type(StatusType.DENIED) is None
        assert fields.check_status_type("asylum-granted") is None

    def test_status_type_rejects_unknown(self) -> None:
        assert fields.check_status_type("invalid") == ErrorKind.INVALID_STATUS_TYPE
        assert fields.check_status_type("ASYLUM_GRANTED") == ErrorKind.INVALID_STATUS_TYPE
        assert fields.check_status_type(None) == ErrorKind.INVALID_STATUS_TYPE

    def test_expiration_must_follow_height(self) -> None:
        assert fields.check_expiration(11, 10) is None
        assert fields.check_expiration(10, 10) == ErrorKind.INVALID_EXPIRATION
        assert fields.check_expiration(5, 10) == ErrorKind.INVALID_EXPIRATION

    def test_location_bounds(self) -> None:
        assert fields.check_location("x" * 100, LIMITS) is None
        assert fields.check_location("", LIMITS) == ErrorKind.INVALID_LOCATION
        assert fields.check_location("x" * 101, LIMITS) == ErrorKind.INVALID_LOCATION

    def test_country_bounds(self) -> None:
        assert fields.check_country("x" * 50, LIMITS) is None
        assert fields.check_country("", LIMITS) == ErrorKind.INVALID_COUNTRY
        assert fields.check_country("x" * 51, LIMITS) == ErrorKind.INVALID_COUNTRY

    def test_document_hash_exactly_32_bytes(self) -> None:
        assert fields.check_document_hash(bytes(32), LIMITS) is None
        assert fields.check_document_hash(bytearray(32), LIMITS) is None
        assert fields.check_document_hash(bytes(31), LIMITS) == ErrorKind.INVALID_DOCUMENT_HASH
        assert fields.check_document_hash(bytes(33), LIMITS) == ErrorKind.INVALID_DOCUMENT_HASH
        assert fields.check_document_hash("0" * 32, LIMITS) == ErrorKind.INVALID_DOCUMENT_HASH

    def test_reason_may_be_empty_but_bounded(self) -> None:
        assert fields.check_reason("", LIMITS) is None
        assert fields.check_reason("x" * 200, LIMITS) is None
        assert fields.check_reason("x" * 201, LIMITS) == ErrorKind.INVALID_REASON

    def test_score_and_rating_caps(self) -> None:
        assert fields.check_score(100, LIMITS) is None
        assert fields.check_score(101, LIMITS) == ErrorKind.INVALID_SCORE
        assert fields.check_score(-1, LIMITS) == ErrorKind.INVALID_SCORE
        assert fields.check_rating(5, LIMITS) is None
        assert fields.check_rating(6, LIMITS) == ErrorKind.INVALID_RATING

    def test_appeal_reason_must_be_non_empty(self) -> None:
        assert fields.check_appeal_reason("Wrong decision", LIMITS) is None
        assert fields.check_appeal_reason("", LIMITS) == ErrorKind.INVALID_APPEAL_REASON
        assert fields.check_appeal_reason("x" * 201, LIMITS) == ErrorKind.INVALID_APPEAL_REASON

    def test_grace_period_at_most_90(self) -> None:
        assert fields.check_grace_period(0, LIMITS) is None
        assert fields.check_grace_period(90, LIMITS) is None
        assert fields.check_grace_period(91, LIMITS) == ErrorKind.INVALID_GRACE_PERIOD

    def test_history_limit_range(self) -> None:
        assert fields.check_history_limit(1, LIMITS) is None
        assert fields.check_history_limit(20, LIMITS) is None
        assert fields.check_history_limit(0, LIMITS) == ErrorKind.INVALID_HISTORY_LIMIT
        assert fields.check_history_limit(21, LIMITS) == ErrorKind.INVALID_HISTORY_LIMIT

    def test_renewal_fee_non_negative(self) -> None:
        assert fields.check_renewal_fee(0) is None
        assert fields.check_renewal_fee(10**12) is None
        assert fields.check_renewal_fee(-1) == ErrorKind.INVALID_RENEWAL_FEE
        assert fields.check_renewal_fee(1.5) == ErrorKind.INVALID_RENEWAL_FEE


class TestValidateAssignment:
    def test_valid_assignment_passes(self) -> None:
        assert fields.validate_assignment(LIMITS, 0, **_assignment()) is None

    @pytest.mark.parametrize("overrides,expected", [
        ({"subject_id": 0}, ErrorKind.INVALID_SUBJECT_ID),
        ({"status_type": "invalid"}, ErrorKind.INVALID_STATUS_TYPE),
        ({"expiration": 0}, ErrorKind.INVALID_EXPIRATION),
        ({"location": ""}, ErrorKind.INVALID_LOCATION),
        ({"country": ""}, ErrorKind.INVALID_COUNTRY),
        ({"document_hash": bytes(16)}, ErrorKind.INVALID_DOCUMENT_HASH),
        ({"reason": "x" * 201}, ErrorKind.INVALID_REASON),
        ({"score": 101}, ErrorKind.INVALID_SCORE),
        ({"rating": 6}, ErrorKind.INVALID_RATING),
    ])
    def test_each_field_reports_its_kind(self, overrides: dict, expected: ErrorKind) -> None:
        assert fields.validate_assignment(LIMITS, 0, **_assignment(**overrides)) == expected

    def test_first_failure_wins(self) -> None:
        error = fields.validate_assignment(
            LIMITS, 0, **_assignment(subject_id=0, status_type="bogus", rating=9),
        )
        assert error == ErrorKind.INVALID_SUBJECT_ID

    def test_expiration_checked_against_height(self) -> None:
        error = fields.validate_assignment(LIMITS, 1000, **_assignment(expiration=1000))
        assert error == ErrorKind.INVALID_EXPIRATION


class TestValidateUpdate:
    def test_valid_update_passes(self) -> None:
        assert fields.validate_update(LIMITS, 0, "denied", 10, "", 0, 0) is None

    def test_update_order(self) -> None:
        assert fields.validate_update(LIMITS, 0, "nope", 0, "", 0, 0) == ErrorKind.INVALID_STATUS_TYPE
        assert fields.validate_update(LIMITS, 5, "denied", 5, "", 0, 0) == ErrorKind.INVALID_EXPIRATION
        assert fields.validate_update(LIMITS, 0, "denied", 10, "", 0, 9) == ErrorKind.INVALID_RATING
