"""
Application Routes

GET /applications - List applications visible to the current user
GET /applications/{application_id} - Get one application with its history
POST /applications - Apply to a posting (student only)
PATCH /applications/{application_id}/status - Move an application through its lifecycle

Visibility: students see their own applications, recruiters see applications
to their own postings, faculty and admins see everything.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from placement_portal.core.auth import get_current_user, require_roles
from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import NotEligible, NotFound, ValidationFailure
from placement_portal.services.application_service import ApplicationRepository
from placement_portal.services.eligibility import can_apply
from placement_portal.services.lifecycle import authorize_transition, normalize_status
from placement_portal.services.mongo_service import VerificationDocService
from placement_portal.services.posting_service import PostingRepository
from placement_portal.services.query import paginate, resolve_limit
from placement_portal.schemas.schemas import (
    Application, ApplicationCreate, ApplicationStatusUpdate, DataResponse,
    ListResponse, User, UserRole
)

settings = get_settings()

router = APIRouter(prefix="/applications", tags=["Applications"])


def _visible(application: Application, user: User) -> bool:
    if user.role in (UserRole.admin, UserRole.faculty):
        return True
    if user.role == UserRole.student:
        return application.student_id == user.id
    return application.posting_id in PostingRepository().ids_for_recruiter(user.id)


def _load(application_id: int, user: User) -> Application:
    application = ApplicationRepository().get(application_id)
    if application is None or not _visible(application, user):
        raise NotFound("Application not found")
    return application


@router.get("", response_model=ListResponse[Application])
async def list_applications(
    status: Optional[str] = Query(None),
    posting_id: Optional[int] = Query(None, alias="postingId"),
    student_id: Optional[int] = Query(None, alias="studentId"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    user: User = Depends(get_current_user)
):
    try:
        status_filter = normalize_status(status) if status else None
    except ValueError as e:
        raise ValidationFailure(str(e))

    posting_ids = None
    if user.role == UserRole.student:
        student_id = user.id
    elif user.role == UserRole.recruiter:
        posting_ids = PostingRepository().ids_for_recruiter(user.id)

    applications = ApplicationRepository().list(
        status=status_filter, posting_id=posting_id, student_id=student_id, posting_ids=posting_ids
    )
    items, pagination = paginate(
        applications, page, resolve_limit(limit, settings.default_page_size, settings.max_page_size)
    )
    return ListResponse(data=items, pagination=pagination)


@router.get("/{application_id}", response_model=DataResponse[Application])
async def get_application(application_id: int, user: User = Depends(get_current_user)):
    return DataResponse(data=_load(application_id, user))


@router.post("", response_model=DataResponse[Application], status_code=201)
async def apply(request: ApplicationCreate, student: User = Depends(require_roles("student"))):
    """
    Apply to a posting.

    The eligibility rules run first and their reason is returned verbatim;
    a student can hold at most one application per posting.
    """
    posting = PostingRepository().get(request.posting_id)
    if posting is None:
        raise NotFound("Posting not found")

    docs = VerificationDocService().get_by_user(student.id)
    result = can_apply(student.student_profile, posting, docs)
    if not result.allowed:
        raise NotEligible(result.reason)

    repo = ApplicationRepository()
    if repo.find(posting.id, student.id) is not None:
        raise ValidationFailure("You have already applied to this posting")

    application = repo.create(posting.id, student.id, request.cover_letter)
    return DataResponse(data=application, message="Application submitted successfully")


@router.patch("/{application_id}/status", response_model=DataResponse[Application])
async def update_status(
    application_id: int,
    request: ApplicationStatusUpdate,
    user: User = Depends(get_current_user)
):
    """
    Move an application to a new status.

    Recruiters drive their postings' applications forward or reject them;
    the applicant may withdraw or accept an offer; admins may do either.
    """
    application = _load(application_id, user)
    posting = PostingRepository().get(application.posting_id)
    authorize_transition(
        request.status,
        actor_id=user.id,
        actor_role=user.role.value,
        student_id=application.student_id,
        posting_owner_id=posting.recruiter_id if posting else None,
    )

    updated = ApplicationRepository().transition(application, request.status)
    return DataResponse(data=updated, message=f"Application moved to {updated.status.value}")
