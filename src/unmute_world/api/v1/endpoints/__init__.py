"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .categories import router as categories_router
from .posts import router as posts_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "auth_router",
    "categories_router",
    "posts_router",
    "users_router",
]
