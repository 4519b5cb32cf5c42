"""Category management."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from unmute_world.core.errors import ConflictError
from unmute_world.models import Category
from unmute_world.repositories import CategoryRepository
from unmute_world.schemas.category import CategoryCreate

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Category with this name already exists."


def list_categories(db: Session) -> list[Category]:
    return CategoryRepository(db).list_categories()


def create_category(db: Session, payload: CategoryCreate) -> Category:
    """Create a category with a unique name."""
    categories = CategoryRepository(db)
    if categories.find_by_name(payload.name) is not None:
        raise ConflictError(DUPLICATE_MESSAGE)

    category = Category(name=payload.name, description=payload.description, color=payload.color)
    try:
        categories.add(category)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(DUPLICATE_MESSAGE) from exc
    logger.info("Created category %s (%s)", category.id, category.name)
    return category
