"""Admin dashboard schemas."""
from __future__ import annotations

from pydantic import Field

from .common import CamelModel


class CategoryPopularity(CamelModel):
    name: str
    count: int


class PlatformStatsResponse(CamelModel):
    """Platform-wide rollups."""

    total_users: int
    total_posts: int
    anonymous_posts: int
    avg_platform_rating: float = Field(..., description="Mean of per-post means over rated posts")
    category_popularity: list[CategoryPopularity] = Field(default_factory=list)
