"""Post creation, listing, admin edits, ratings and saved sets."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from unmute_world.core.errors import ConflictError, NotFoundError
from unmute_world.models import Post, User
from unmute_world.repositories import CategoryRepository, PostRepository
from unmute_world.repositories.post_repo import SortOrder
from unmute_world.schemas.post import ANONYMOUS_AUTHOR_NAME, PostCreate, PostResponse, PostUpdate
from unmute_world.services.stats import RatingSummary, StatsEngine

logger = logging.getLogger(__name__)

__all__ = [
    "create_post",
    "get_post",
    "is_saved",
    "list_posts",
    "my_rating",
    "posts_by_author",
    "rate_post",
    "save_post",
    "saved_posts",
    "to_response",
    "unsave_post",
    "update_post",
]


def to_response(post: Post, viewer_id: str | None = None) -> PostResponse:
    """Serialize a post, masking the author name of anonymous posts."""
    summary = StatsEngine.post_rating(post)
    return PostResponse(
        id=post.id,
        title=post.title,
        content=post.content,
        category=post.category,
        basis=post.basis,
        tags=post.tags,
        anonymous=post.anonymous,
        author_id=post.author_id,
        author_name=ANONYMOUS_AUTHOR_NAME if post.anonymous else post.author_name,
        author_avg_rating=post.author_avg_rating,
        author_post_count=post.author_post_count,
        created_at=post.created_at,
        post_rating=summary.mean,
        rating_count=summary.count,
        user_rating=post.rating_by(viewer_id) if viewer_id else None,
    )


def _require_category(db: Session, name: str) -> None:
    if CategoryRepository(db).find_by_name(name) is None:
        raise NotFoundError("Category")


def get_post(db: Session, post_id: str) -> Post:
    """Return a post by id or raise ``NotFoundError``."""
    post = PostRepository(db).find_post(post_id)
    if post is None:
        raise NotFoundError("Post")
    return post


def list_posts(
    db: Session,
    *,
    limit: int | None = None,
    sort: SortOrder = "newest",
    category: str | None = None,
    tag: str | None = None,
    q: str | None = None,
) -> list[Post]:
    """List posts; a non-blank ``q`` switches to relevance-ranked search."""
    posts = PostRepository(db)
    if q and q.strip():
        return posts.search_posts(q, limit=limit)
    return posts.list_posts(limit=limit, sort=sort, category=category, tag=tag)


def create_post(db: Session, author: User, payload: PostCreate) -> Post:
    """Publish a post with the author's stats frozen onto it.

    The snapshot is taken before the post is inserted, so the new post never
    counts towards its own ``authorPostCount``.
    """
    _require_category(db, payload.category)

    snapshot = StatsEngine.from_session(db).snapshot_author_stats_at_post_creation(author.id)
    post = Post(
        title=payload.title,
        content=payload.content,
        category=payload.category,
        basis=payload.basis,
        anonymous=payload.anonymous,
        author_id=author.id,
        author_name=author.name,
        author_avg_rating=snapshot.avg_rating,
        author_post_count=snapshot.post_count,
    )
    post.set_tags(payload.tags)
    PostRepository(db).add(post)
    db.commit()
    logger.info(
        "User %s created post %s (snapshot: %d posts, avg %.2f)",
        author.id,
        post.id,
        snapshot.post_count,
        snapshot.avg_rating,
    )
    return post


def update_post(db: Session, post_id: str, payload: PostUpdate) -> Post:
    """Admin edit of a post's content fields.

    Ratings and the author snapshot are left untouched.
    """
    post = get_post(db, post_id)
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}

    if "category" in changes and changes["category"] != post.category:
        _require_category(db, changes["category"])
    tags = changes.pop("tags", None)
    for key, value in changes.items():
        setattr(post, key, value)
    if tags is not None:
        post.set_tags(tags)

    db.commit()
    logger.info("Post %s updated (%s)", post_id, ", ".join(sorted(payload.model_fields_set)))
    return post


def posts_by_author(db: Session, user_id: str, *, public_only: bool = False) -> list[Post]:
    """Return a user's posts, newest first; ``public_only`` hides anonymous ones."""
    return PostRepository(db).find_posts_by_author(user_id, include_anonymous=not public_only)


def rate_post(db: Session, post_id: str, rater_id: str, value: object) -> RatingSummary:
    """Record a rating and commit it."""
    summary = StatsEngine.from_session(db).submit_rating(post_id, rater_id, value)
    db.commit()
    return summary


def my_rating(db: Session, post_id: str, user_id: str) -> int:
    """Return the caller's rating of the post, 0 when they have not rated it."""
    get_post(db, post_id)
    return PostRepository(db).rating_of(post_id, user_id) or 0


def saved_posts(db: Session, user_id: str) -> list[Post]:
    return PostRepository(db).list_saved_posts(user_id)


def is_saved(db: Session, user_id: str, post_id: str) -> bool:
    return PostRepository(db).is_saved(user_id, post_id)


def save_post(db: Session, user_id: str, post_id: str) -> None:
    """Add a post to the user's saved set.

    Raises:
        NotFoundError: no such post.
        ConflictError: the post is already saved.
    """
    posts = PostRepository(db)
    get_post(db, post_id)
    if posts.is_saved(user_id, post_id):
        raise ConflictError("Post already saved")
    try:
        posts.save(user_id, post_id)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Post already saved") from exc


def unsave_post(db: Session, user_id: str, post_id: str) -> None:
    """Remove a post from the user's saved set; nothing happens if absent."""
    PostRepository(db).unsave(user_id, post_id)
    db.commit()
