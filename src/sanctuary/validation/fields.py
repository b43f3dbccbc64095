"""Field validation: pure checks run before any state mutation.

Each check returns the ErrorKind describing the first violation, or
None when the value is acceptable. Nothing here reads or writes registry
state; bounds come from the resolved FieldLimits.
"""

from __future__ import annotations

from typing import Any, Optional

from sanctuary.models.errors import ErrorKind
from sanctuary.models.status import StatusType
from sanctuary.policy.resolver import FieldLimits


def _is_uint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def check_subject_id(subject_id: Any) -> Optional[ErrorKind]:
    if not _is_uint(subject_id) or subject_id == 0:
        return ErrorKind.INVALID_SUBJECT_ID
    return None


def check_status_type(status_type: Any) -> Optional[ErrorKind]:
    if StatusType.parse(status_type) is None:
        return ErrorKind.INVALID_STATUS_TYPE
    return None


def check_expiration(expiration: Any, height: int) -> Optional[ErrorKind]:
    """Expiration must lie strictly after the current height."""
    if not _is_uint(expiration) or expiration <= height:
        return ErrorKind.INVALID_EXPIRATION
    return None


def check_location(location: Any, limits: FieldLimits) -> Optional[ErrorKind]:
    if not isinstance(location, str) or not 0 < len(location) <= limits.max_location_length:
        return ErrorKind.INVALID_LOCATION
    return None


def check_country(country: Any, limits: FieldLimits) -> Optional[ErrorKind]:
    if not isinstance(country, str) or not 0 < len(country) <= limits.max_country_length:
        return ErrorKind.INVALID_COUNTRY
    return None


def check_document_hash(document_hash: Any, limits: FieldLimits) -> Optional[ErrorKind]:
    """The hash is opaque: only its type and exact length are checked."""
    if not isinstance(document_hash, (bytes, bytearray)):
        return ErrorKind.INVALID_DOCUMENT_HASH
    if len(document_hash) != limits.document_hash_length:
        return ErrorKind.INVALID_DOCUMENT_HASH
    return None


def check_reason(reason: Any, limits: FieldLimits) -> Optional[ErrorKind]:
    # An empty reason is allowed on statuses, unlike appeals.
    if not isinstance(reason, str) or len(reason) > limits.max_reason_length:
        return ErrorKind.INVALID_REASON
    return None


def check_score(score: Any, limits: FieldLimits) -> Optional[ErrorKind]:
    if not _is_uint(score) or score > limits.max_score:
        return ErrorKind.INVALID_SCORE
    return None


def check_rating(rating: Any, limits: FieldLimits) -> Optional[ErrorKind]:
    if not _is_uint(rating) or rating > limits.max_rating:
        return ErrorKind.INVALID_RATING
    return None


def check_appeal_reason(reason: Any, limits: FieldLimits) -> Optional[ErrorKind]:
    if not isinstance(reason, str) or not 0 < len(reason) <= limits.max_appeal_reason_length:
        return ErrorKind.INVALID_APPEAL_REASON
    return None


def check_grace_period(period: Any, limits: FieldLimits) -> Optional[ErrorKind]:
    if not _is_uint(period) or period > limits.max_grace_period_days:
        return ErrorKind.INVALID_GRACE_PERIOD
    return None


def check_history_limit(limit: Any, limits: FieldLimits) -> Optional[ErrorKind]:
    if not _is_uint(limit):
        return ErrorKind.INVALID_HISTORY_LIMIT
    if not limits.min_history_limit <= limit <= limits.max_history_limit:
        return ErrorKind.INVALID_HISTORY_LIMIT
    return None


def check_renewal_fee(fee: Any) -> Optional[ErrorKind]:
    if not _is_uint(fee):
        return ErrorKind.INVALID_RENEWAL_FEE
    return None


def validate_assignment(
    limits: FieldLimits,
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
    """Check every creation field in order; return the first failure."""
    checks = (
        lambda: check_subject_id(subject_id),
        lambda: check_status_type(status_type),
        lambda: check_expiration(expiration, height),
        lambda: check_location(location, limits),
        lambda: check_country(country, limits),
        lambda: check_document_hash(document_hash, limits),
        lambda: check_reason(reason, limits),
        lambda: check_score(score, limits),
        lambda: check_rating(rating, limits),
    )
    for check in checks:
        error = check()
        if error is not None:
            return error
    return None


def validate_update(
    limits: FieldLimits,
    height: int,
    status_type: Any,
    expiration: Any,
    reason: Any,
    score: Any,
    rating: Any,
) -> Optional[ErrorKind]:
    """Check the mutable fields of an update; return the first failure."""
    checks = (
        lambda: check_status_type(status_type),
        lambda: check_expiration(expiration, height),
        lambda: check_reason(reason, limits),
        lambda: check_score(score, limits),
        lambda: check_rating(rating, limits),
    )
    for check in checks:
        error = check()
        if error is not None:
            return error
    return None
