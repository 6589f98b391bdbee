from datetime import datetime, timedelta, timezone

import pytest

from placement_portal.schemas.schemas import (
    EligibilityRules, Posting, PostingStatus, PostingType, StudentProfile, VerificationDoc
)
from placement_portal.services.eligibility import can_apply

NOW = datetime(2025, 3, 1, 12, 0, 0)


def make_posting(**overrides):
    fields = dict(
        id=1,
        title="Data Analyst",
        type=PostingType.full_time,
        recruiter_id=10,
        deadline=NOW + timedelta(days=7),
        status=PostingStatus.open,
        eligibility=EligibilityRules(min_gpa=3.0, grad_year=[2025]),
        requires_verification=False,
    )
    fields.update(overrides)
    return Posting(**fields)


def make_student(**overrides):
    fields = dict(gpa=3.5, grad_year=2025, has_accepted_offer=False)
    fields.update(overrides)
    return StudentProfile(**fields)


def doc(status, doc_id="a"):
    return VerificationDoc(id=doc_id, user_id=1, type="transcript", document_name="t.pdf",
                           url="https://files/t.pdf", status=status)


def test_eligible_student_is_allowed():
    result = can_apply(make_student(), make_posting(), [], now=NOW)
    assert result.allowed
    assert result.reason == ""


def test_missing_profile_is_not_a_student():
    result = can_apply(None, make_posting(), [], now=NOW)
    assert not result.allowed
    assert result.reason == "Not a student."


def test_accepted_offer_blocks_everything():
    result = can_apply(make_student(has_accepted_offer=True), make_posting(), [], now=NOW)
    assert result.reason == "You have already accepted an offer."


def test_deadline_passed():
    posting = make_posting(deadline=NOW - timedelta(seconds=1))
    assert can_apply(make_student(), posting, [], now=NOW).reason == "Application deadline has passed."


def test_deadline_equal_to_now_has_passed():
    posting = make_posting(deadline=NOW)
    assert not can_apply(make_student(), posting, [], now=NOW).allowed


def test_aware_deadline_is_compared_in_utc():
    # 13:00 at +02:00 is 11:00 UTC, an hour before NOW
    posting = make_posting(deadline=datetime(2025, 3, 1, 13, 0, tzinfo=timezone(timedelta(hours=2))))
    assert can_apply(make_student(), posting, [], now=NOW).reason == "Application deadline has passed."


def test_closed_posting():
    posting = make_posting(status=PostingStatus.closed)
    assert can_apply(make_student(), posting, [], now=NOW).reason == "This position is closed."


def test_deadline_checked_before_gpa():
    posting = make_posting(deadline=NOW - timedelta(days=1))
    result = can_apply(make_student(gpa=1.0), posting, [], now=NOW)
    assert result.reason == "Application deadline has passed."


@pytest.mark.parametrize("gpa,allowed", [(2.9, False), (3.0, True), (3.1, True)])
def test_gpa_boundary_is_inclusive(gpa, allowed):
    result = can_apply(make_student(gpa=gpa), make_posting(), [], now=NOW)
    assert result.allowed is allowed
    if not allowed:
        assert result.reason == "Requires minimum GPA of 3."


def test_gpa_reason_keeps_fraction():
    posting = make_posting(eligibility=EligibilityRules(min_gpa=3.25, grad_year=[2025]))
    result = can_apply(make_student(gpa=3.0), posting, [], now=NOW)
    assert result.reason == "Requires minimum GPA of 3.25."


def test_grad_year_not_listed():
    result = can_apply(make_student(grad_year=2027), make_posting(), [], now=NOW)
    assert result.reason == "Not open for your graduation year (2027)."


class TestVerificationRule:

    def test_not_required_ignores_documents(self):
        assert can_apply(make_student(), make_posting(), [doc("rejected")], now=NOW).allowed

    def test_zero_documents_fail(self):
        posting = make_posting(requires_verification=True)
        result = can_apply(make_student(), posting, [], now=NOW)
        assert result.reason == "Requires all documents to be verified."

    def test_all_verified_pass(self):
        posting = make_posting(requires_verification=True)
        docs = [doc("verified", "a"), doc("verified", "b")]
        assert can_apply(make_student(), posting, docs, now=NOW).allowed

    def test_one_pending_fails(self):
        posting = make_posting(requires_verification=True)
        docs = [doc("verified", "a"), doc("pending", "b")]
        assert not can_apply(make_student(), posting, docs, now=NOW).allowed

    def test_accepts_a_generator(self):
        posting = make_posting(requires_verification=True)
        docs = (d for d in [doc("verified")])
        assert can_apply(make_student(), posting, docs, now=NOW).allowed


def test_defaults_now_to_current_time():
    posting = make_posting(deadline=datetime.now(timezone.utc) + timedelta(hours=1))
    assert can_apply(make_student(), posting, []).allowed
