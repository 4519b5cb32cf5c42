"""Data access helpers for categories."""
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from unmute_world.models import Category

__all__ = ["CategoryRepository"]


class CategoryRepository:
    """Thin wrapper around database access for categories."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_categories(self) -> list[Category]:
        """Return all categories ordered by name."""
        return list(self.session.execute(select(Category).order_by(Category.name)).scalars())

    def find_category(self, category_id: str) -> Category | None:
        return self.session.execute(select(Category).where(Category.id == category_id)).scalars().first()

    def find_by_name(self, name: str) -> Category | None:
        return self.session.execute(select(Category).where(Category.name == name)).scalars().first()

    def add(self, category: Category) -> Category:
        self.session.add(category)
        self.session.flush()
        return category

    def delete_category(self, category_id: str) -> int:
        result = self.session.execute(delete(Category).where(Category.id == category_id))
        return result.rowcount or 0
