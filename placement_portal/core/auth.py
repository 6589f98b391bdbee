"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes and role checks
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import Forbidden
from placement_portal.schemas.schemas import User
from placement_portal.services.user_service import UserRepository

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> User:
    """
    FastAPI dependency - Get current authenticated user.

    The role is always re-read from the database, so an admin role change
    takes effect on the next request even with an older token.

    Usage:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    user = UserRepository().get(int(user_id))
    if not user:
        raise credentials_exception

    return user


def require_roles(*roles: str):
    """
    Dependency factory - allow only the given roles.

    Usage:
        @router.post("", dependencies=[Depends(require_roles("recruiter", "admin"))])
    """
    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role.value not in roles:
            raise Forbidden(f"Requires role: {', '.join(roles)}")
        return user

    return checker


def ensure_self_or_admin(user: User, target_user_id: int) -> None:
    if user.role.value != "admin" and user.id != target_user_id:
        raise Forbidden("You can only access your own records")
