"""
Dashboard Routes (self or admin)

GET /faculty/{user_id}/dashboard - Review queue and student counts
GET /recruiter/{user_id}/dashboard - Postings and applications received
GET /student/{user_id}/dashboard - Own application progress
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import ensure_self_or_admin, get_current_user
from placement_portal.core.exceptions import NotFound
from placement_portal.services.application_service import ApplicationRepository
from placement_portal.services.lifecycle import CANONICAL_ORDER, ApplicationStatus
from placement_portal.services.mongo_service import VerificationDocService
from placement_portal.services.posting_service import PostingRepository
from placement_portal.services.user_service import UserRepository
from placement_portal.schemas.schemas import (
    DataResponse, FacultyDashboard, FunnelEntry, PostingStatus, RecruiterDashboard,
    StudentDashboard, StudentProgress, User, UserRole, VerificationStatus
)

router = APIRouter(tags=["Dashboards"])


def _target(current: User, user_id: int, role: UserRole) -> User:
    ensure_self_or_admin(current, user_id)
    target = UserRepository().get(user_id)
    if target is None or target.role != role:
        raise NotFound(f"{role.value.capitalize()} not found")
    return target


@router.get("/faculty/{user_id}/dashboard", response_model=DataResponse[FacultyDashboard])
async def faculty_dashboard(user_id: int, current: User = Depends(get_current_user)):
    _target(current, user_id, UserRole.faculty)
    docs = VerificationDocService().count_by_status()
    return DataResponse(data=FacultyDashboard(
        faculty_id=user_id,
        pending_documents=docs[VerificationStatus.pending],
        verified_documents=docs[VerificationStatus.verified],
        rejected_documents=docs[VerificationStatus.rejected],
        students=UserRepository().count_by_role(UserRole.student.value),
    ))


@router.get("/recruiter/{user_id}/dashboard", response_model=DataResponse[RecruiterDashboard])
async def recruiter_dashboard(user_id: int, current: User = Depends(get_current_user)):
    _target(current, user_id, UserRole.recruiter)
    postings = PostingRepository()
    counts = ApplicationRepository().count_by_status(posting_ids=postings.ids_for_recruiter(user_id))
    return DataResponse(data=RecruiterDashboard(
        recruiter_id=user_id,
        active_postings=postings.count(user_id, PostingStatus.open),
        total_postings=postings.count(user_id),
        applications_received=sum(counts.values()),
        applications_by_status=[
            FunnelEntry(stage=stage, count=counts[stage]) for stage in CANONICAL_ORDER if counts.get(stage)
        ],
    ))


@router.get("/student/{user_id}/dashboard", response_model=DataResponse[StudentDashboard])
async def student_dashboard(user_id: int, current: User = Depends(get_current_user)):
    """
    Progress buckets: pending = APPLIED, under review = UNDER_REVIEW or
    INTERVIEW, offers = OFFERED or ACCEPTED.
    """
    student = _target(current, user_id, UserRole.student)
    counts = ApplicationRepository().count_by_status(student_id=user_id)

    def n(*statuses: ApplicationStatus) -> int:
        return sum(counts.get(s, 0) for s in statuses)

    return DataResponse(data=StudentDashboard(
        student_id=user_id,
        applications=sum(counts.values()),
        accepted_offers=n(ApplicationStatus.ACCEPTED),
        has_accepted_offer=bool(student.student_profile and student.student_profile.has_accepted_offer),
        progress=StudentProgress(
            pending=n(ApplicationStatus.APPLIED),
            under_review=n(ApplicationStatus.UNDER_REVIEW, ApplicationStatus.INTERVIEW),
            offers=n(ApplicationStatus.OFFERED, ApplicationStatus.ACCEPTED),
        ),
    ))
