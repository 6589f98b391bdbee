"""
Admin Routes

GET /admin/users - List users, optionally by role (admin only)
GET /admin/roles - List the available roles
PATCH /admin/users/{user_id}/role - Change a user's role (admin only)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from placement_portal.core.auth import get_current_user, require_roles
from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import NotFound
from placement_portal.services.query import paginate, resolve_limit
from placement_portal.services.user_service import UserRepository
from placement_portal.schemas.schemas import DataResponse, ListResponse, RoleUpdate, User, UserRole

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=ListResponse[User])
async def list_users(
    role: Optional[UserRole] = Query(None),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    admin: User = Depends(require_roles("admin"))
):
    users = UserRepository().list(role.value if role else None)
    items, pagination = paginate(users, page, resolve_limit(limit, settings.default_page_size, settings.max_page_size))
    return ListResponse(data=items, pagination=pagination)


@router.get("/roles", response_model=DataResponse[List[UserRole]])
async def list_roles(user: User = Depends(get_current_user)):
    return DataResponse(data=list(UserRole))


@router.patch("/users/{user_id}/role", response_model=DataResponse[User])
async def update_role(user_id: int, update: RoleUpdate, admin: User = Depends(require_roles("admin"))):
    """Takes effect on the user's next request; tokens carry no authority of their own."""
    user = UserRepository().update_role(user_id, update.role_id.value)
    if user is None:
        raise NotFound("User not found")
    logger.info("Admin %s set role of user %s to %s", admin.id, user_id, update.role_id.value)
    return DataResponse(data=user, message="Role updated successfully")
