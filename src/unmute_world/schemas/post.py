"""Post-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from unmute_world.models.post import normalize_tags

from .common import CamelModel

ANONYMOUS_AUTHOR_NAME = "Anonymous"

PostBasis = Literal[
    "My personal experience",
    "My professional knowledge",
    "A researched source",
    "My opinion/perspective",
    "Something else",
]


class PostCreate(CamelModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=300, description="Post headline")
    content: str = Field(..., min_length=1, description="Post body")
    category: str = Field(..., min_length=1, description="Name of an existing category")
    basis: PostBasis = Field(..., description="What the post is based on")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    anonymous: bool = Field(False, description="Hide the author's name on the post")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        """Trim tags and drop blanks and duplicates."""
        return normalize_tags(v)


class PostUpdate(CamelModel):
    """Admin edit; omitted fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = Field(None, min_length=1)
    category: str | None = Field(None, min_length=1)
    basis: PostBasis | None = None
    tags: list[str] | None = None
    anonymous: bool | None = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return normalize_tags(v) if v is not None else None


class PostResponse(CamelModel):
    """Post as returned to clients.

    The ratings themselves are never exposed, only their mean and count.
    """

    id: str
    title: str
    content: str
    category: str
    basis: str
    tags: list[str] = Field(default_factory=list)
    anonymous: bool
    author_id: str
    author_name: str
    author_avg_rating: float
    author_post_count: int
    created_at: datetime
    post_rating: float = Field(0.0, description="Mean rating, 0 when unrated")
    rating_count: int = Field(0, description="Number of raters")
    user_rating: int | None = Field(
        None,
        description="The caller's own rating, when authenticated and rated",
    )


class RatingRequest(CamelModel):
    """Star rating submission; range is enforced by the rating engine."""

    rating: int = Field(..., description="Integer from 1 to 5")


class MyRatingResponse(CamelModel):
    rating: int = Field(0, description="The caller's rating, 0 when none")


class IsSavedResponse(CamelModel):
    is_saved: bool
