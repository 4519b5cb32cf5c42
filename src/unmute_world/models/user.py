# src/unmute_world/models/user.py
"""SQLAlchemy model for registered accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from unmute_world.db.session import Base, new_id
from unmute_world.db.time import utcnow

BIO_MAX_LENGTH = 300


class User(Base):
    """Registered author, rater and (optionally) administrator.

    Post count and average rating are never stored here; they are derived from
    the posts table on every read.
    """

    __tablename__ = "app_user"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # Always stored lowercased so uniqueness is case-insensitive.
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    profile_pic: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str] = mapped_column(String(BIO_MAX_LENGTH), nullable=False, default="")
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    join_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Single active reset token at a time; only its sha256 is kept.
    reset_password_token: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    reset_password_expire: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def clear_reset_token(self) -> None:
        """Drop any outstanding password-reset token."""
        self.reset_password_token = None
        self.reset_password_expire = None
