"""Data access helpers for user accounts."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from unmute_world.models import User

__all__ = ["UserRepository", "normalize_email"]


def normalize_email(email: str) -> str:
    """Return the canonical (trimmed, lowercased) form of an email address."""
    return email.strip().lower()


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_user(self, user_id: str) -> User | None:
        """Return a user by identifier."""
        return self.session.execute(select(User).where(User.id == user_id)).scalars().first()

    def find_by_email(self, email: str) -> User | None:
        """Return the user registered under ``email``, ignoring case."""
        return (
            self.session.execute(select(User).where(User.email == normalize_email(email)))
            .scalars()
            .first()
        )

    def find_by_reset_token(self, token_hash: str, now: datetime) -> User | None:
        """Return the user holding an unexpired reset token with this hash."""
        candidate = (
            self.session.execute(select(User).where(User.reset_password_token == token_hash))
            .scalars()
            .first()
        )
        if candidate is None or candidate.reset_password_expire is None:
            return None
        expires = candidate.reset_password_expire
        # SQLite hands back naive datetimes; they were written as UTC.
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=now.tzinfo)
        return candidate if expires > now else None

    def list_users(self) -> list[User]:
        """Return every user, most recently joined first."""
        return list(
            self.session.execute(select(User).order_by(User.join_date.desc(), User.id.desc())).scalars()
        )

    def count_users(self) -> int:
        """Return the number of registered users."""
        return int(self.session.execute(select(func.count()).select_from(User)).scalar() or 0)

    def add(self, user: User) -> User:
        """Stage a new user and flush so defaults are populated."""
        self.session.add(user)
        self.session.flush()
        return user

    def delete_user(self, user_id: str) -> int:
        """Delete the user row; safe to re-run."""
        result = self.session.execute(delete(User).where(User.id == user_id))
        return result.rowcount or 0
