"""Authentication endpoints: signup, login, current user and password reset."""

from fastapi import APIRouter, status

from unmute_world.api.v1.dependencies import CurrentUserDep, SessionDep
from unmute_world.core.security import create_access_token
from unmute_world.schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    SuccessResponse,
    UserResponse,
)
from unmute_world.services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: SessionDep) -> AuthResponse:
    """Register a new account and return it with a bearer token."""
    user = user_service.register(db, payload.name, payload.email, payload.password)
    return AuthResponse(
        user=user_service.user_response(db, user),
        token=create_access_token(user.id),
    )


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Exchange email and password for a bearer token."""
    user = user_service.authenticate(db, payload.email, payload.password)
    return AuthResponse(
        user=user_service.user_response(db, user),
        token=create_access_token(user.id),
    )


@router.get("/me", response_model=UserResponse)
def read_me(current_user: CurrentUserDep, db: SessionDep) -> UserResponse:
    """Return the authenticated user with current stats."""
    return user_service.user_response(db, current_user)


@router.post("/forgotpassword", response_model=SuccessResponse)
def forgot_password(payload: ForgotPasswordRequest, db: SessionDep) -> SuccessResponse:
    """Email a reset link; the answer does not reveal whether the account exists."""
    message = user_service.request_password_reset(db, payload.email)
    return SuccessResponse(message=message)


@router.put("/resetpassword/{token}", response_model=SuccessResponse)
def reset_password(token: str, payload: ResetPasswordRequest, db: SessionDep) -> SuccessResponse:
    """Set a new password with an emailed reset token."""
    user_service.reset_password(db, token, payload.password)
    return SuccessResponse(message="Password has been reset successfully.")
