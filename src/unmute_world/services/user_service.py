"""Account lifecycle: registration, sign-in, profile and password management."""
from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from unmute_world.core import security
from unmute_world.core.errors import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from unmute_world.core.settings import settings
from unmute_world.db.time import utcnow
from unmute_world.models import User
from unmute_world.repositories import UserRepository
from unmute_world.repositories.user_repo import normalize_email
from unmute_world.schemas.user import ProfileUpdateRequest, UserResponse
from unmute_world.services import mailer
from unmute_world.services.stats import StatsEngine

logger = logging.getLogger(__name__)

__all__ = [
    "authenticate",
    "change_password",
    "get_user",
    "list_users",
    "register",
    "request_password_reset",
    "reset_password",
    "toggle_block",
    "update_profile",
    "user_response",
]

RESET_REQUEST_MESSAGE = "If a user with that email exists, a reset link has been sent."
RESET_INVALID_MESSAGE = "Invalid or expired token. Please try again."


def user_response(db: Session, user: User) -> UserResponse:
    """Serialize a user with post count and average rating computed now."""
    stats = StatsEngine.from_session(db).author_stats(user.id)
    return UserResponse.model_validate(user).model_copy(
        update={"post_count": stats.post_count, "avg_rating": stats.avg_rating}
    )


def get_user(db: Session, user_id: str) -> User:
    """Return a user by id or raise ``NotFoundError``."""
    user = UserRepository(db).find_user(user_id)
    if user is None:
        raise NotFoundError("User")
    return user


def list_users(db: Session) -> list[UserResponse]:
    """Return every user, newest first, with derived stats."""
    return [user_response(db, user) for user in UserRepository(db).list_users()]


def register(db: Session, name: str, email: str, password: str) -> User:
    """Create an account; email uniqueness ignores case."""
    users = UserRepository(db)
    if users.find_by_email(email) is not None:
        raise ConflictError("User already exists")

    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_hash=security.hash_password(password),
        profile_pic=settings.default_profile_pic,
    )
    try:
        users.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("User already exists") from exc
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user matching the credentials.

    Raises:
        AuthenticationError: unknown email or wrong password.
        ForbiddenError: the account is blocked.
    """
    user = UserRepository(db).find_by_email(email)
    if user is None or not security.verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    if user.is_blocked:
        raise ForbiddenError("Your account has been blocked.")
    return user


def update_profile(db: Session, user: User, update: ProfileUpdateRequest) -> User:
    """Apply the fields present in ``update``; an empty bio clears it."""
    for key, value in update.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if key == "name":
            value = value.strip()
        setattr(user, key, value)
    db.commit()
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    """Replace the password after verifying the current one."""
    if not security.verify_password(current_password, user.password_hash):
        raise AuthenticationError("Invalid current password.")
    user.password_hash = security.hash_password(new_password)
    db.commit()
    logger.info("Password changed for user %s", user.id)


def request_password_reset(db: Session, email: str) -> str:
    """Email a single-use reset link when the address is registered.

    The response is the same whether or not the account exists. A new request
    replaces any outstanding token. When delivery fails the token is cleared
    again and the mail error propagates.
    """
    user = UserRepository(db).find_by_email(email)
    if user is None:
        return RESET_REQUEST_MESSAGE

    token, token_hash = security.generate_reset_token()
    user.reset_password_token = token_hash
    user.reset_password_expire = utcnow() + timedelta(minutes=settings.reset_token_expire_minutes)
    db.commit()

    reset_url = f"{settings.frontend_url.rstrip('/')}/#/reset-password/{token}"
    try:
        mailer.send_email(
            user.email,
            "Unmute World - Password Reset Link",
            mailer.password_reset_email(reset_url, settings.reset_token_expire_minutes),
        )
    except DependencyError:
        user.clear_reset_token()
        db.commit()
        logger.warning("Cleared reset token for user %s after mail failure", user.id)
        raise

    logger.info("Password reset requested for user %s", user.id)
    return RESET_REQUEST_MESSAGE


def reset_password(db: Session, token: str, password: str) -> None:
    """Set a new password using an emailed reset token.

    Raises:
        ValidationError: the token is unknown, already used or expired.
    """
    user = UserRepository(db).find_by_reset_token(security.hash_reset_token(token), utcnow())
    if user is None:
        raise ValidationError(RESET_INVALID_MESSAGE)
    user.password_hash = security.hash_password(password)
    user.clear_reset_token()
    db.commit()
    logger.info("Password reset completed for user %s", user.id)


def toggle_block(db: Session, user_id: str) -> User:
    """Flip the blocked flag. Stats and content are unaffected."""
    user = get_user(db, user_id)
    user.is_blocked = not user.is_blocked
    db.commit()
    logger.info("User %s is_blocked=%s", user_id, user.is_blocked)
    return user
