# src/unmute_world/models/__init__.py
"""SQLAlchemy models for the Unmute World application."""

from .category import Category
from .post import POST_BASIS_OPTIONS, Post, PostRating, PostTag
from .saved_post import SavedPost
from .user import User

__all__ = [
    "Category",
    "Post", "PostRating", "PostTag", "POST_BASIS_OPTIONS",
    "SavedPost",
    "User",
]
