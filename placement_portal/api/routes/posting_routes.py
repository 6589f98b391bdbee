"""
Posting Routes

GET /postings - List open postings with filters and pagination
GET /postings/{posting_id} - Get posting details
POST /postings - Create posting (recruiter or admin)
PUT /postings/{posting_id} - Update posting (owner or admin)
DELETE /postings/{posting_id} - Delete posting (owner or admin)
GET /postings/{posting_id}/eligibility - Can the current user apply?
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from placement_portal.core.auth import get_current_user, require_roles
from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import Forbidden, NotFound, ValidationFailure
from placement_portal.services.eligibility import can_apply
from placement_portal.services.mongo_service import VerificationDocService
from placement_portal.services.posting_service import PostingRepository
from placement_portal.services.query import PostingFilters, filter_postings, paginate, resolve_limit
from placement_portal.services.reference_service import ReferenceDataRepository
from placement_portal.services.user_service import UserRepository
from placement_portal.schemas.schemas import (
    DataResponse, EligibilityResponse, ListResponse, Posting, PostingCreate,
    PostingType, PostingUpdate, User, UserRole
)

settings = get_settings()

router = APIRouter(prefix="/postings", tags=["Postings"])


def _load(posting_id: int) -> Posting:
    posting = PostingRepository().get(posting_id)
    if posting is None:
        raise NotFound("Posting not found")
    return posting


def _ensure_owner(posting: Posting, user: User) -> None:
    if user.role != UserRole.admin and posting.recruiter_id != user.id:
        raise Forbidden("Only the recruiter who owns this posting can change it")


def _check_skills(skill_ids: Optional[List[int]]) -> None:
    if not skill_ids:
        return
    missing = sorted(set(skill_ids) - ReferenceDataRepository().existing_skill_ids(skill_ids))
    if missing:
        raise ValidationFailure(f"Unknown skill id(s): {', '.join(str(s) for s in missing)}")


@router.get("", response_model=ListResponse[Posting])
async def list_postings(
    search: str = Query("", description="Search in title and company"),
    location: str = Query(""),
    skill: Optional[int] = Query(None, description="Required skill id"),
    type: Optional[PostingType] = Query(None),
    remote_only: bool = Query(False, alias="remoteOnly"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
):
    """List open postings, newest first. Closed postings are never listed."""
    filters = PostingFilters(search=search, location=location, skill_id=skill, type=type, remote_only=remote_only)
    matching = filter_postings(PostingRepository().list(), filters)
    items, pagination = paginate(matching, page, resolve_limit(limit, settings.default_page_size, settings.max_page_size))
    return ListResponse(data=items, pagination=pagination)


@router.get("/{posting_id}", response_model=DataResponse[Posting])
async def get_posting(posting_id: int):
    """Get a single posting, open or closed."""
    return DataResponse(data=_load(posting_id))


@router.post("", response_model=DataResponse[Posting], status_code=201)
async def create_posting(posting: PostingCreate, user: User = Depends(require_roles("recruiter", "admin"))):
    """
    Create a posting.

    Recruiters always own what they create. Admins create on behalf of a
    recruiter and must name them with recruiterId.
    """
    if user.role == UserRole.recruiter:
        recruiter_id = user.id
    else:
        if posting.recruiter_id is None:
            raise ValidationFailure("recruiterId is required when an admin creates a posting")
        owner = UserRepository().get(posting.recruiter_id)
        if owner is None or owner.role != UserRole.recruiter:
            raise ValidationFailure("recruiterId must refer to a recruiter")
        recruiter_id = owner.id

    _check_skills(posting.required_skills)
    created = PostingRepository().create(posting, recruiter_id)
    return DataResponse(data=created, message="Posting created successfully")


@router.put("/{posting_id}", response_model=DataResponse[Posting])
async def update_posting(posting_id: int, update: PostingUpdate, user: User = Depends(get_current_user)):
    _ensure_owner(_load(posting_id), user)
    _check_skills(update.required_skills)

    updated = PostingRepository().update(posting_id, update)
    if updated is None:
        raise NotFound("Posting not found")
    return DataResponse(data=updated, message="Posting updated successfully")


@router.delete("/{posting_id}", response_model=DataResponse[Posting])
async def delete_posting(posting_id: int, user: User = Depends(get_current_user)):
    """Delete a posting. Its applications are kept for reporting."""
    _ensure_owner(_load(posting_id), user)

    deleted = PostingRepository().delete(posting_id)
    if deleted is None:
        raise NotFound("Posting not found")
    return DataResponse(data=deleted, message="Posting deleted successfully")


@router.get("/{posting_id}/eligibility", response_model=DataResponse[EligibilityResponse])
async def check_eligibility(posting_id: int, user: User = Depends(get_current_user)):
    posting = _load(posting_id)
    if user.role == UserRole.student:
        profile = user.student_profile
        docs = VerificationDocService().get_by_user(user.id)
    else:
        profile, docs = None, []

    result = can_apply(profile, posting, docs)
    return DataResponse(data=EligibilityResponse(allowed=result.allowed, reason=result.reason))
