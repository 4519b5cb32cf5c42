"""User-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field

from unmute_world.models.user import BIO_MAX_LENGTH

from .common import CamelModel

PASSWORD_MIN_LENGTH = 6


class UserResponse(CamelModel):
    """Account as returned to clients, with stats derived at read time."""

    id: str = Field(..., description="Opaque user identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Lowercased email address")
    profile_pic: str = Field(..., description="Avatar URL")
    bio: str = Field("", description="Short self description")
    is_admin: bool = Field(False, description="Administrator flag")
    is_blocked: bool = Field(False, description="Blocked accounts cannot sign in or write")
    join_date: datetime = Field(..., description="Registration timestamp")
    post_count: int = Field(0, description="Number of posts authored")
    avg_rating: float = Field(0.0, description="Mean of per-post means over rated posts")


class SignupRequest(CamelModel):
    """Registration payload."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)


class LoginRequest(CamelModel):
    """Credentials submitted to obtain a token."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(CamelModel):
    """Signed-in user together with a bearer token."""

    user: UserResponse
    token: str = Field(..., description="JWT bearer token")


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)


class ProfileUpdateRequest(CamelModel):
    """Partial profile update; omitted fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=BIO_MAX_LENGTH)
    profile_pic: str | None = Field(None, min_length=1, description="Avatar URL")


class PasswordChangeRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)


class BlockToggleResponse(CamelModel):
    success: bool = True
    is_blocked: bool
