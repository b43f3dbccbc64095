"""Error taxonomy for the status registry.

Every expected failure is reported as one ErrorKind. Kinds are grouped
into authorization, validation and state-conflict families. Each kind
has a stable numeric code so callers that only carry integers (audit
payloads, external clients) can still discriminate failures.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    """Closed set of failure reasons an operation may report."""
    # Authorization
    NOT_AUTHORIZED = "not_authorized"
    AUTHORITY_ALREADY_SET = "authority_already_set"
    AUTHORITY_NOT_SET = "authority_not_set"
    INVALID_AUTHORITY = "invalid_authority"
    INVALID_VERIFIER = "invalid_verifier"
    # Validation
    INVALID_SUBJECT_ID = "invalid_subject_id"
    INVALID_STATUS_TYPE = "invalid_status_type"
    INVALID_EXPIRATION = "invalid_expiration"
    INVALID_LOCATION = "invalid_location"
    INVALID_COUNTRY = "invalid_country"
    INVALID_DOCUMENT_HASH = "invalid_document_hash"
    INVALID_REASON = "invalid_reason"
    INVALID_SCORE = "invalid_score"
    INVALID_RATING = "invalid_rating"
    INVALID_APPEAL_REASON = "invalid_appeal_reason"
    INVALID_GRACE_PERIOD = "invalid_grace_period"
    INVALID_HISTORY_LIMIT = "invalid_history_limit"
    INVALID_RENEWAL_FEE = "invalid_renewal_fee"
    # State conflicts
    STATUS_ALREADY_EXISTS = "status_already_exists"
    STATUS_NOT_FOUND = "status_not_found"
    MAX_STATUSES_EXCEEDED = "max_statuses_exceeded"
    APPEAL_ALREADY_RESOLVED = "appeal_already_resolved"
    # External collaborator
    TRANSFER_FAILED = "transfer_failed"

    @property
    def code(self) -> int:
        return ERROR_CODES[self]

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_AUTHORIZED: 100,
    ErrorKind.INVALID_SUBJECT_ID: 102,
    ErrorKind.INVALID_AUTHORITY: 104,
    ErrorKind.STATUS_ALREADY_EXISTS: 105,
    ErrorKind.STATUS_NOT_FOUND: 106,
    ErrorKind.INVALID_EXPIRATION: 107,
    ErrorKind.INVALID_REASON: 108,
    ErrorKind.INVALID_LOCATION: 109,
    ErrorKind.INVALID_COUNTRY: 110,
    ErrorKind.INVALID_DOCUMENT_HASH: 111,
    ErrorKind.INVALID_STATUS_TYPE: 112,
    ErrorKind.MAX_STATUSES_EXCEEDED: 114,
    ErrorKind.INVALID_GRACE_PERIOD: 115,
    ErrorKind.INVALID_RENEWAL_FEE: 116,
    ErrorKind.AUTHORITY_NOT_SET: 117,
    ErrorKind.INVALID_HISTORY_LIMIT: 118,
    ErrorKind.INVALID_VERIFIER: 119,
    ErrorKind.INVALID_SCORE: 120,
    ErrorKind.INVALID_RATING: 121,
    ErrorKind.AUTHORITY_ALREADY_SET: 122,
    ErrorKind.INVALID_APPEAL_REASON: 123,
    ErrorKind.APPEAL_ALREADY_RESOLVED: 124,
    ErrorKind.TRANSFER_FAILED: 125,
}

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NOT_AUTHORIZED: "Caller is not authorized for this operation",
    ErrorKind.AUTHORITY_ALREADY_SET: "Authority is already configured",
    ErrorKind.AUTHORITY_NOT_SET: "Authority is not configured",
    ErrorKind.INVALID_AUTHORITY: "Authority principal is the reserved null address",
    ErrorKind.INVALID_VERIFIER: "Caller is not a verified verifier",
    ErrorKind.INVALID_SUBJECT_ID: "Subject id must be positive",
    ErrorKind.INVALID_STATUS_TYPE: "Unknown status type",
    ErrorKind.INVALID_EXPIRATION: "Expiration must be after the current height",
    ErrorKind.INVALID_LOCATION: "Location must be 1..100 characters",
    ErrorKind.INVALID_COUNTRY: "Country must be 1..50 characters",
    ErrorKind.INVALID_DOCUMENT_HASH: "Document hash must be exactly 32 bytes",
    ErrorKind.INVALID_REASON: "Reason must be at most 200 characters",
    ErrorKind.INVALID_SCORE: "Score must be in 0..100",
    ErrorKind.INVALID_RATING: "Rating must be in 0..5",
    ErrorKind.INVALID_APPEAL_REASON: "Appeal reason must be 1..200 characters",
    ErrorKind.INVALID_GRACE_PERIOD: "Grace period must be in 0..90 days",
    ErrorKind.INVALID_HISTORY_LIMIT: "History limit reached or out of range",
    ErrorKind.INVALID_RENEWAL_FEE: "Renewal fee must be a non-negative integer",
    ErrorKind.STATUS_ALREADY_EXISTS: "Subject already has a status",
    ErrorKind.STATUS_NOT_FOUND: "Status not found",
    ErrorKind.MAX_STATUSES_EXCEEDED: "Maximum number of statuses reached",
    ErrorKind.APPEAL_ALREADY_RESOLVED: "Appeal is already resolved",
    ErrorKind.TRANSFER_FAILED: "Renewal fee transfer failed",
}
