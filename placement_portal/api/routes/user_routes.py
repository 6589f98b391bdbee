"""
User Routes

GET /users/{user_id}/profile - Get a user's profile
PUT /users/{user_id}/profile - Update name / email (self or admin)
PUT /users/{user_id}/student-profile - Set GPA, grad year, department (student, faculty or admin)
PUT /users/{user_id}/change-password - Change own password
"""

import logging

from fastapi import APIRouter, Depends

from placement_portal.core.auth import ensure_self_or_admin, get_current_user, hash_password, verify_password
from placement_portal.core.exceptions import Forbidden, NotFound, ValidationFailure
from placement_portal.services.reference_service import ReferenceDataRepository
from placement_portal.services.user_service import UserRepository
from placement_portal.schemas.schemas import (
    ChangePasswordRequest, DataResponse, MessageResponse, ProfileUpdate,
    StudentProfileUpdate, User, UserRole
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _load(user_id: int) -> User:
    user = UserRepository().get(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("/{user_id}/profile", response_model=DataResponse[User])
async def get_profile(user_id: int, current: User = Depends(get_current_user)):
    """Any signed-in user may view a profile (recruiters look at applicants)."""
    return DataResponse(data=_load(user_id))


@router.put("/{user_id}/profile", response_model=DataResponse[User])
async def update_profile(user_id: int, update: ProfileUpdate, current: User = Depends(get_current_user)):
    ensure_self_or_admin(current, user_id)
    _load(user_id)

    repo = UserRepository()
    fields = update.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in fields and repo.exists(fields["email"], exclude_id=user_id):
        raise ValidationFailure("Email already registered")

    user = repo.update_profile(user_id, fields)
    return DataResponse(data=user, message="Profile updated successfully")


@router.put("/{user_id}/student-profile", response_model=DataResponse[User])
async def update_student_profile(
    user_id: int,
    update: StudentProfileUpdate,
    current: User = Depends(get_current_user)
):
    """
    Create or replace a student's academic profile.

    The accepted-offer flag is owned by the application lifecycle and
    cannot be set here.
    """
    if current.role not in (UserRole.admin, UserRole.faculty) and current.id != user_id:
        raise Forbidden("You can only edit your own student profile")

    target = _load(user_id)
    if target.role != UserRole.student:
        raise ValidationFailure("Only students have a student profile")
    if update.department_id is not None and ReferenceDataRepository().get_department(update.department_id) is None:
        raise ValidationFailure("Department not found")

    user = UserRepository().upsert_student_profile(
        user_id,
        gpa=update.gpa,
        grad_year=update.grad_year,
        department_id=update.department_id,
        program=update.program,
    )
    logger.info("Student profile for user %s updated by user %s", user_id, current.id)
    return DataResponse(data=user, message="Student profile updated successfully")


@router.put("/{user_id}/change-password", response_model=MessageResponse)
async def change_password(
    user_id: int,
    request: ChangePasswordRequest,
    current: User = Depends(get_current_user)
):
    if current.id != user_id:
        raise Forbidden("You can only change your own password")

    repo = UserRepository()
    if not verify_password(request.old_password, repo.get_password_hash(user_id)):
        raise ValidationFailure("Old password is incorrect")
    if request.confirm_new_password is not None and request.confirm_new_password != request.new_password:
        raise ValidationFailure("New passwords do not match")

    repo.update_password(user_id, hash_password(request.new_password))
    logger.info("Password changed for user %s", user_id)
    return MessageResponse(message="Password changed successfully")
