"""
Eligibility Evaluator

Decides whether a student may apply to a posting. Rules are checked in a
fixed order and the first failure wins, so the reason shown to the student
is always the same for the same inputs:

1. the user has a student profile
2. no offer has been accepted yet
3. the deadline has not passed
4. the posting is open
5. GPA meets the minimum (inclusive)
6. graduation year is one of the eligible years
7. if the posting requires verification: at least one document, all verified

Pure: no I/O, `now` is injectable.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from placement_portal.schemas.schemas import (
    Posting, PostingStatus, StudentProfile, VerificationDoc, VerificationStatus
)
from placement_portal.utils.dates import as_naive_utc, utcnow


@dataclass(frozen=True)
class Eligibility:
    allowed: bool
    reason: str = ""


def _deny(reason: str) -> Eligibility:
    return Eligibility(allowed=False, reason=reason)


def can_apply(
    student: Optional[StudentProfile],
    posting: Posting,
    student_docs: Iterable[VerificationDoc],
    now: Optional[datetime] = None,
) -> Eligibility:
    now = as_naive_utc(now) if now is not None else utcnow()

    if student is None:
        return _deny("Not a student.")
    if student.has_accepted_offer:
        return _deny("You have already accepted an offer.")
    if now >= as_naive_utc(posting.deadline):
        return _deny("Application deadline has passed.")
    if posting.status != PostingStatus.open:
        return _deny("This position is closed.")

    rules = posting.eligibility
    if student.gpa < rules.min_gpa:
        return _deny(f"Requires minimum GPA of {rules.min_gpa:g}.")
    if student.grad_year not in rules.grad_year:
        return _deny(f"Not open for your graduation year ({student.grad_year}).")

    if posting.requires_verification:
        docs = list(student_docs)
        # An empty document set does not count as "all verified"
        if not docs or any(d.status != VerificationStatus.verified for d in docs):
            return _deny("Requires all documents to be verified.")

    return Eligibility(allowed=True)
