"""Data access helpers for working with posts, ratings and saved sets."""
from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Literal

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from unmute_world.models import Post, PostRating, PostTag, SavedPost

__all__ = ["PostRepository", "SortOrder"]

SortOrder = Literal["newest", "oldest"]

# Dialects with INSERT ... ON CONFLICT DO UPDATE.
_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _naive_utc(value: datetime) -> datetime:
    # SQLite hands back naive values while fresh objects still carry UTC.
    return value.replace(tzinfo=None) if value.tzinfo is not None else value


def _search_score(post: Post, terms: list[str]) -> int:
    """Count how many search terms hit any searchable field of the post."""
    haystacks = [post.title.lower(), post.content.lower(), *(t.lower() for t in post.tags)]
    if not post.anonymous:
        haystacks.append(post.author_name.lower())
    return sum(1 for term in terms if any(term.lower() in text for text in haystacks))


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    # --- reads -----------------------------------------------------------

    def find_post(self, post_id: str) -> Post | None:
        """Return a post by identifier."""
        return self.session.execute(select(Post).where(Post.id == post_id)).scalars().first()

    def list_posts(
        self,
        *,
        limit: int | None = None,
        sort: SortOrder = "newest",
        category: str | None = None,
        tag: str | None = None,
    ) -> list[Post]:
        """Return posts filtered by category and/or tag in creation order."""
        stmt = select(Post)
        if category:
            stmt = stmt.where(Post.category == category)
        if tag:
            stmt = stmt.where(Post.tag_rows.any(PostTag.tag == tag))
        if sort == "oldest":
            stmt = stmt.order_by(Post.created_at.asc(), Post.id.asc())
        else:
            stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars())

    def search_posts(self, query: str, *, limit: int | None = None) -> list[Post]:
        """Full-text style search over title, content, tags and author name.

        A post matches when any whitespace-separated term appears in any
        field. The author name of anonymous posts is never searched. Results
        are ranked by the number of matching terms, then newest first.
        """
        terms = query.split()
        if not terms:
            return []

        clauses = []
        for term in terms:
            pattern = _like_pattern(term)
            clauses.append(
                or_(
                    Post.title.ilike(pattern, escape="\\"),
                    Post.content.ilike(pattern, escape="\\"),
                    Post.tag_rows.any(PostTag.tag.ilike(pattern, escape="\\")),
                    and_(
                        Post.anonymous.is_(False),
                        Post.author_name.ilike(pattern, escape="\\"),
                    ),
                )
            )

        posts = list(self.session.execute(select(Post).where(or_(*clauses))).scalars())
        # Two stable sorts: recency first, then relevance on top of it.
        posts.sort(key=lambda p: (_naive_utc(p.created_at), p.id), reverse=True)
        posts.sort(key=lambda p: _search_score(p, terms), reverse=True)
        return posts[:limit] if limit is not None else posts

    def find_posts_by_author(self, author_id: str, *, include_anonymous: bool = True) -> list[Post]:
        """Return an author's posts, newest first."""
        stmt = select(Post).where(Post.author_id == author_id)
        if not include_anonymous:
            stmt = stmt.where(Post.anonymous.is_(False))
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        return list(self.session.execute(stmt).scalars())

    def list_saved_posts(self, user_id: str) -> list[Post]:
        """Return the posts a user saved, newest first.

        The inner join skips saved references whose post no longer exists.
        """
        stmt = (
            select(Post)
            .join(SavedPost, SavedPost.post_id == Post.id)
            .where(SavedPost.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def count_posts(
        self,
        *,
        author_id: str | None = None,
        anonymous: bool | None = None,
        category: str | None = None,
    ) -> int:
        """Count posts matching every given filter."""
        stmt = select(func.count()).select_from(Post)
        if author_id is not None:
            stmt = stmt.where(Post.author_id == author_id)
        if anonymous is not None:
            stmt = stmt.where(Post.anonymous.is_(anonymous))
        if category is not None:
            stmt = stmt.where(Post.category == category)
        return int(self.session.execute(stmt).scalar() or 0)

    def category_counts(self) -> list[tuple[str, int]]:
        """Return ``(category, post count)`` for every category in use."""
        rows = self.session.execute(
            select(Post.category, func.count(Post.id))
            .where(Post.category.isnot(None))
            .group_by(Post.category)
        ).all()
        return [(name, int(count)) for name, count in rows]

    def rating_values(self, post_id: str) -> list[int]:
        """Return the rating values currently stored for a post."""
        rows = self.session.execute(
            select(PostRating.value).where(PostRating.post_id == post_id)
        ).scalars()
        return [int(value) for value in rows]

    def rating_values_by_author(self, author_id: str) -> list[list[int]]:
        """Return one list of rating values per post by the author.

        Unrated posts appear as empty lists.
        """
        rows = self.session.execute(
            select(Post.id, PostRating.value)
            .outerjoin(PostRating, PostRating.post_id == Post.id)
            .where(Post.author_id == author_id)
        ).all()
        grouped: dict[str, list[int]] = defaultdict(list)
        for post_id, value in rows:
            bucket = grouped[post_id]
            if value is not None:
                bucket.append(int(value))
        return list(grouped.values())

    def rating_values_of_rated_posts(self) -> list[list[int]]:
        """Return the rating values of every post that has at least one rating."""
        rows = self.session.execute(
            select(PostRating.post_id, PostRating.value).join(Post, Post.id == PostRating.post_id)
        ).all()
        grouped: dict[str, list[int]] = defaultdict(list)
        for post_id, value in rows:
            grouped[post_id].append(int(value))
        return list(grouped.values())

    def rating_of(self, post_id: str, rater_id: str) -> int | None:
        """Return the value ``rater_id`` gave a post, if any."""
        value = self.session.execute(
            select(PostRating.value).where(
                PostRating.post_id == post_id,
                PostRating.rater_id == rater_id,
            )
        ).scalar()
        return int(value) if value is not None else None

    def is_saved(self, user_id: str, post_id: str) -> bool:
        """Return True when the post is in the user's saved set."""
        found = self.session.execute(
            select(SavedPost.post_id).where(
                SavedPost.user_id == user_id,
                SavedPost.post_id == post_id,
            )
        ).first()
        return found is not None

    # --- writes ----------------------------------------------------------

    def add(self, post: Post) -> Post:
        """Stage a new post and flush it so defaults are populated."""
        self.session.add(post)
        self.session.flush()
        return post

    def upsert_rating(self, post_id: str, rater_id: str, value: int) -> None:
        """Insert or replace one rater's rating as a single atomic statement.

        Concurrent ratings from different raters touch different rows and
        never overwrite each other; a repeat from the same rater updates its
        own row in place.
        """
        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Rating upsert is not supported on the {dialect!r} dialect")

        stmt = insert(PostRating).values(post_id=post_id, rater_id=rater_id, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[PostRating.post_id, PostRating.rater_id],
            set_={"value": value},
        )
        self.session.execute(stmt)
        self._expire_ratings(post_id)

    def _expire_ratings(self, post_id: str) -> None:
        loaded = self.session.identity_map.get(Session.identity_key(Post, post_id))
        if loaded is not None:
            self.session.expire(loaded, ["ratings"])

    def save(self, user_id: str, post_id: str) -> None:
        """Add a post to the user's saved set."""
        self.session.add(SavedPost(user_id=user_id, post_id=post_id))
        self.session.flush()

    def unsave(self, user_id: str, post_id: str) -> None:
        """Remove a post from the user's saved set; no-op when absent."""
        self.session.execute(
            delete(SavedPost).where(SavedPost.user_id == user_id, SavedPost.post_id == post_id)
        )

    # --- cascade primitives ------------------------------------------------
    # Each primitive is a single bulk statement that is safe to re-run.

    def delete_ratings_by_rater(self, rater_id: str) -> int:
        """Strip every rating the user gave, on any post."""
        result = self.session.execute(delete(PostRating).where(PostRating.rater_id == rater_id))
        return result.rowcount or 0

    def remove_post_from_saved_sets(self, post_ids: list[str]) -> int:
        """Drop the given posts from every user's saved set."""
        if not post_ids:
            return 0
        result = self.session.execute(delete(SavedPost).where(SavedPost.post_id.in_(post_ids)))
        return result.rowcount or 0

    def delete_saved_by_user(self, user_id: str) -> int:
        """Empty a user's own saved set."""
        result = self.session.execute(delete(SavedPost).where(SavedPost.user_id == user_id))
        return result.rowcount or 0

    def delete_posts(self, post_ids: list[str]) -> int:
        """Delete posts together with their ratings and tags."""
        if not post_ids:
            return 0
        self.session.execute(delete(PostRating).where(PostRating.post_id.in_(post_ids)))
        self.session.execute(delete(PostTag).where(PostTag.post_id.in_(post_ids)))
        result = self.session.execute(delete(Post).where(Post.id.in_(post_ids)))
        return result.rowcount or 0

    def post_ids_by_author(self, author_id: str) -> list[str]:
        """Return the ids of every post the user authored."""
        return list(self.session.execute(select(Post.id).where(Post.author_id == author_id)).scalars())
