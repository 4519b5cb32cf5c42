# src/unmute_world/models/post.py
"""SQLAlchemy models for posts, their ratings and tags."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from unmute_world.db.session import Base, new_id
from unmute_world.db.time import utcnow
from unmute_world.services.stats import compute_post_rating

POST_BASIS_OPTIONS: tuple[str, ...] = (
    "My personal experience",
    "My professional knowledge",
    "A researched source",
    "My opinion/perspective",
    "Something else",
)


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim tags, drop blanks and duplicates while keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for raw in tags:
        tag = raw.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


class Post(Base):
    """Primary content entity produced by users.

    The ``author_name``/``author_avg_rating``/``author_post_count`` columns
    are a snapshot of the author's stats taken when the post was created. They
    are never refreshed afterwards.
    """

    __tablename__ = "post"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    basis: Mapped[str] = mapped_column(String(64), nullable=False)
    anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    author_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )

    # Author snapshot frozen at creation time.
    author_name: Mapped[str] = mapped_column(Text, nullable=False)
    author_avg_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    author_post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    ratings: Mapped[list[PostRating]] = relationship(
        "PostRating",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    tag_rows: Mapped[list[PostTag]] = relationship(
        "PostTag",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="PostTag.position",
    )

    @property
    def post_rating(self) -> float:
        """Mean of the rating values, 0 when unrated."""
        return compute_post_rating(r.value for r in self.ratings).mean

    @property
    def rating_count(self) -> int:
        """Number of distinct raters."""
        return len(self.ratings)

    @property
    def tags(self) -> list[str]:
        """Tags in the order they were supplied."""
        return [row.tag for row in self.tag_rows]

    def set_tags(self, tags: Iterable[str]) -> None:
        """Replace the tag list, reusing rows for tags that survive."""
        existing = {row.tag: row for row in self.tag_rows}
        rows: list[PostTag] = []
        for position, tag in enumerate(normalize_tags(tags)):
            row = existing.get(tag) or PostTag(tag=tag)
            row.position = position
            rows.append(row)
        self.tag_rows = rows

    def rating_by(self, rater_id: str) -> int | None:
        """Return the value ``rater_id`` gave this post, if any."""
        for rating in self.ratings:
            if rating.rater_id == rater_id:
                return rating.value
        return None


class PostRating(Base):
    """Per-user star rating on a post.

    The composite primary key allows at most one rating per rater per post, so
    re-rating is an update of the existing row.
    """

    __tablename__ = "post_rating"
    __table_args__ = (
        CheckConstraint("value BETWEEN 1 AND 5", name="ck_post_rating_value"),
        Index("ix_post_rating_rater_id", "rater_id"),
    )

    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    rater_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)


class PostTag(Base):
    """A single tag attached to a post."""

    __tablename__ = "post_tag"
    __table_args__ = (Index("ix_post_tag_tag", "tag"),)

    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag: Mapped[str] = mapped_column(String(100), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
