"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

import logging

from fastapi import APIRouter, Depends

from placement_portal.core.auth import hash_password, verify_password, create_access_token, get_current_user
from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import Forbidden, Unauthorized, ValidationFailure
from placement_portal.services.user_service import UserRepository
from placement_portal.schemas.schemas import (
    DataResponse, LoginRequest, LoginResponse, RegisterRequest, User, UserRole
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=DataResponse[User], status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    The username defaults to the email address. Students fill in their
    academic profile afterwards via PUT /users/{id}/student-profile.
    """
    if request.role == UserRole.admin and not settings.allow_admin_signup:
        raise Forbidden("Admin accounts cannot be self-registered")

    repo = UserRepository()
    username = request.username or request.email
    if repo.exists(username, request.email):
        raise ValidationFailure("Username or email already registered")

    user = repo.create(
        username=username,
        email=request.email,
        password_hash=hash_password(request.password),
        role=request.role.value,
        name=request.name,
    )
    logger.info("Registered user %s as %s", user.id, user.role.value)
    return DataResponse(data=user, message=f"Registered successfully as {user.role.value}")


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """
    Login with username or email and receive a JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    found = UserRepository().get_credentials(request.username)
    if found is None or not verify_password(request.password, found[1]):
        logger.warning("Failed login for %s", request.username)
        raise Unauthorized("Invalid username or password")

    user = found[0]
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return LoginResponse(data=user, access_token=token)


@router.get("/me", response_model=DataResponse[User])
async def get_me(user: User = Depends(get_current_user)):
    """Get current logged-in user info."""
    return DataResponse(data=user)
