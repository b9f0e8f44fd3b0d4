"""
FastAPI dependencies: database session, the signed-in user and role guards.

Bearer tokens are read first; the "session" cookie set by /auth/login is the
fallback for the browser UI. JWT payloads are never logged.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Annotated, Optional

import bcrypt
from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from finishing_touch.config import settings
from finishing_touch.database import get_db
from finishing_touch.exceptions import ForbiddenError, UnauthorizedError
from finishing_touch.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

SESSION_COOKIE = "session"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token carrying the user's id, email and role."""
    expires_at = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {"sub": user.id, "email": user.email, "role": user.role, "exp": expires_at}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _user_id_from_token(token: str, auth_method: str) -> str:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        logger.warning("JWT validation failed (%s)", auth_method)
        raise UnauthorizedError()

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError()
    return str(user_id)


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)] = None,
    session_token: Annotated[Optional[str], Cookie(alias=SESSION_COOKIE)] = None,
) -> User:
    """Resolve the signed-in user; disabled accounts get 403."""
    if credentials:
        token, auth_method = credentials.credentials, "bearer"
    elif session_token:
        token, auth_method = session_token, "cookie"
    else:
        raise UnauthorizedError()

    user_id = _user_id_from_token(token, auth_method)
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()

    if user is None:
        raise UnauthorizedError()
    if not user.is_active:
        raise ForbiddenError("User account is disabled")

    return user


def require_roles(*roles: UserRole):
    """
    Dependency factory limiting an endpoint to the given roles.

    Usage:
        @router.delete("/{employee_id}")
        async def delete_employee(db: DbSession, current_user: AdminUser):
            ...
    """
    allowed = {role.value for role in roles}

    async def checker(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if current_user.role not in allowed:
            logger.warning(
                "User %s with role %s denied, requires one of %s",
                current_user.id,
                current_user.role,
                sorted(allowed),
            )
            raise ForbiddenError("Insufficient role for this action")
        return current_user

    return checker


DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
ManagerUser = Annotated[User, Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER))]
AdminUser = Annotated[User, Depends(require_roles(UserRole.ADMIN))]
