"""Cascading deletes for users, posts and categories.

Every step is a bulk statement keyed on ids, so a cascade interrupted part way
converges when it is simply run again. Steps are flushed in order and the
caller's single commit makes them visible together.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from unmute_world.core.errors import ConflictError, ForbiddenError, NotFoundError
from unmute_world.repositories import CategoryRepository, PostRepository, UserRepository

logger = logging.getLogger(__name__)

__all__ = ["on_delete_category", "on_delete_post", "on_delete_user"]


def on_delete_user(db: Session, user_id: str) -> None:
    """Delete a non-admin user with everything that references them.

    Order: ratings the user gave, the user's posts (with their ratings, tags
    and saved references), the user's own saved set, then the user row.

    Raises:
        NotFoundError: no such user.
        ForbiddenError: the user is an administrator.
    """
    users = UserRepository(db)
    posts = PostRepository(db)

    user = users.find_user(user_id)
    if user is None:
        raise NotFoundError("User")
    if user.is_admin:
        raise ForbiddenError("Cannot delete an admin user.")

    stripped = posts.delete_ratings_by_rater(user_id)
    logger.info("Cascade user %s: stripped %d ratings given", user_id, stripped)

    authored = posts.post_ids_by_author(user_id)
    unsaved = posts.remove_post_from_saved_sets(authored)
    removed = posts.delete_posts(authored)
    logger.info(
        "Cascade user %s: deleted %d posts, %d saved references to them",
        user_id,
        removed,
        unsaved,
    )

    own_saved = posts.delete_saved_by_user(user_id)
    logger.info("Cascade user %s: cleared %d saved posts", user_id, own_saved)

    users.delete_user(user_id)
    db.expire_all()
    db.commit()
    logger.info("Deleted user %s", user_id)


def on_delete_post(db: Session, post_id: str) -> None:
    """Remove a post from every saved set, then delete it with its ratings and tags.

    Raises:
        NotFoundError: no such post.
    """
    posts = PostRepository(db)
    if posts.find_post(post_id) is None:
        raise NotFoundError("Post")

    unsaved = posts.remove_post_from_saved_sets([post_id])
    posts.delete_posts([post_id])
    db.expire_all()
    db.commit()
    logger.info("Deleted post %s (removed from %d saved sets)", post_id, unsaved)


def on_delete_category(db: Session, category_id: str) -> None:
    """Delete a category that no post references.

    Raises:
        NotFoundError: no such category.
        ConflictError: at least one post is filed under the category name.
    """
    categories = CategoryRepository(db)
    category = categories.find_category(category_id)
    if category is None:
        raise NotFoundError("Category")

    name = category.name
    in_use = PostRepository(db).count_posts(category=name)
    if in_use:
        raise ConflictError(
            "Cannot delete category with existing posts. Please re-assign posts first."
        )

    categories.delete_category(category_id)
    db.expire_all()
    db.commit()
    logger.info("Deleted category %s (%s)", category_id, name)
