"""Persistence helpers wrapping SQLAlchemy sessions."""

from .category_repo import CategoryRepository
from .post_repo import PostRepository
from .user_repo import UserRepository

__all__ = ["CategoryRepository", "PostRepository", "UserRepository"]
