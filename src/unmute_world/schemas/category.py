"""Category schemas."""
from __future__ import annotations

import re

from pydantic import Field, field_validator

from unmute_world.models.category import DEFAULT_CATEGORY_COLOR

from .common import CamelModel

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class CategoryCreate(CamelModel):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    color: str = Field(DEFAULT_CATEGORY_COLOR, description="Hex color code (e.g., #FF5733)")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name must not be blank")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        """Validate color is a valid hex color code."""
        if not HEX_COLOR.match(v):
            raise ValueError("Color must be a valid hex color code (e.g., #FF5733)")
        return v


class CategoryResponse(CamelModel):
    id: str
    name: str
    description: str
    color: str
