from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)


class UserResponse(BaseModel):
    """The signed-in office user."""

    id: str
    email: str
    name: Optional[str] = None
    role: str
    is_active: bool

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Bearer token plus the user it was issued to; the same token is also set as the session cookie."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
