"""Pydantic schemas for request and response bodies."""

from .admin import CategoryPopularity, PlatformStatsResponse
from .category import CategoryCreate, CategoryResponse
from .common import CamelModel, SuccessResponse
from .post import (
    IsSavedResponse,
    MyRatingResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
    RatingRequest,
)
from .user import (
    AuthResponse,
    BlockToggleResponse,
    ForgotPasswordRequest,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    ResetPasswordRequest,
    SignupRequest,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "BlockToggleResponse",
    "CamelModel",
    "CategoryCreate",
    "CategoryPopularity",
    "CategoryResponse",
    "ForgotPasswordRequest",
    "IsSavedResponse",
    "LoginRequest",
    "MyRatingResponse",
    "PasswordChangeRequest",
    "PlatformStatsResponse",
    "PostCreate",
    "PostResponse",
    "PostUpdate",
    "ProfileUpdateRequest",
    "RatingRequest",
    "ResetPasswordRequest",
    "SignupRequest",
    "SuccessResponse",
    "UserResponse",
]
