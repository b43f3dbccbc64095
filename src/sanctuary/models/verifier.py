"""Verifier record: a principal allowed to assign statuses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class VerifierRecord:
    """Verification flag plus running totals over assigned statuses.

    score is the sum of the scores of every status this verifier has
    assigned; assignments counts them.
    """
    principal: str
    verified: bool = True
    score: int = 0
    assignments: int = 0
