import logging

from fastapi import APIRouter, Response
from sqlalchemy import select

from finishing_touch.api.deps import (
    SESSION_COOKIE,
    CurrentUser,
    DbSession,
    create_access_token,
    verify_password,
)
from finishing_touch.config import settings
from finishing_touch.exceptions import ForbiddenError, UnauthorizedError
from finishing_touch.models.user import User
from finishing_touch.schemas.auth import LoginRequest, LoginResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest, response: Response, db: DbSession):
    """Exchange email and password for a JWT, returned in the body and as the session cookie."""
    user = (
        await db.execute(select(User).where(User.email == credentials.email))
    ).scalar_one_or_none()

    # Same answer for unknown email and wrong password
    if user is None or not verify_password(credentials.password, user.hashed_password):
        logger.info("Failed login for %s", credentials.email)
        raise UnauthorizedError("Incorrect email or password")
    if not user.is_active:
        raise ForbiddenError("User account is disabled")

    token = create_access_token(user)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return {"access_token": token, "token_type": "bearer", "user": user}


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(key=SESSION_COOKIE)
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserResponse)
async def me(current_user: CurrentUser):
    return current_user
