"""Rating and statistics aggregation.

Every derived number the API exposes is computed here from raw facts: a
post's mean rating and rating count, an author's post count and average
rating, and the platform-wide rollups shown on the admin dashboard.

Two averaging shapes are in play and must not be confused:

* a post's rating is the plain mean of its rating values;
* author and platform averages are a *mean of means*: each rated post
  contributes its own mean once, regardless of how many ratings it has, and
  unrated posts are left out of both the sum and the divisor.

Nothing is cached. The engine re-reads through the repositories on every call
so concurrent requests never observe process-local state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from unmute_world.core.errors import NotFoundError, SelfRatingError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from unmute_world.models import Post
    from unmute_world.repositories import PostRepository, UserRepository

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class RatingSummary:
    """Mean rating and number of ratings of one post."""

    mean: float
    count: int


@dataclass(frozen=True)
class AuthorStats:
    """Derived reputation numbers for an author."""

    post_count: int
    avg_rating: float


@dataclass(frozen=True)
class CategoryCount:
    """Number of posts filed under a category name."""

    name: str
    count: int


@dataclass(frozen=True)
class PlatformStats:
    """Platform-wide rollups for the admin dashboard."""

    total_users: int
    total_posts: int
    anonymous_posts: int
    avg_platform_rating: float
    category_popularity: list[CategoryCount] = field(default_factory=list)


def compute_post_rating(values: Iterable[int]) -> RatingSummary:
    """Return the mean and count of a post's rating values.

    The mean is 0 for an unrated post. Order of ``values`` does not matter.
    """
    total = 0
    count = 0
    for value in values:
        total += value
        count += 1
    if count == 0:
        return RatingSummary(mean=0.0, count=0)
    return RatingSummary(mean=total / count, count=count)


def mean_of_means(rating_sets: Iterable[Sequence[int]]) -> float:
    """Average the per-post means of every non-empty rating set.

    Empty sets (unrated posts) are skipped entirely, so an author with one
    5-star post and one unrated post averages 5.0, not 2.5. Returns 0 when no
    set has a rating.
    """
    total = 0.0
    rated = 0
    for values in rating_sets:
        summary = compute_post_rating(values)
        if summary.count:
            total += summary.mean
            rated += 1
    return total / rated if rated else 0.0


def rank_category_popularity(counts: Iterable[tuple[str | None, int]]) -> list[CategoryCount]:
    """Sort category counts descending, dropping empty and unnamed buckets.

    Ties are broken by name so the ordering is deterministic.
    """
    ranked = [
        CategoryCount(name=name, count=int(count))
        for name, count in counts
        if name is not None and count
    ]
    ranked.sort(key=lambda entry: (-entry.count, entry.name))
    return ranked


def validate_rating_value(value: object) -> int:
    """Return ``value`` when it is an integer star rating, else raise."""
    # bool is an int subclass but never a rating.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Rating must be an integer between 1 and 5")
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValidationError("Rating must be an integer between 1 and 5")
    return value


class StatsEngine:
    """Computes and maintains derived rating facts over the repositories."""

    def __init__(self, posts: PostRepository, users: UserRepository) -> None:
        self.posts = posts
        self.users = users

    @classmethod
    def from_session(cls, db: Session) -> StatsEngine:
        """Build an engine bound to repositories over ``db``."""
        from unmute_world.repositories import PostRepository, UserRepository

        return cls(PostRepository(db), UserRepository(db))

    @staticmethod
    def post_rating(post: Post) -> RatingSummary:
        """Return the rating summary of a loaded post."""
        return compute_post_rating(r.value for r in post.ratings)

    def submit_rating(self, post_id: str, rater_id: str, value: object) -> RatingSummary:
        """Record ``rater_id``'s rating of a post.

        A repeat rating from the same rater replaces the earlier value, so the
        rating count only grows for first-time raters. The author's snapshot
        on the post is left untouched.

        Raises:
            ValidationError: ``value`` is not an integer in 1..5.
            NotFoundError: the post does not exist.
            SelfRatingError: the rater wrote the post.
        """
        rating = validate_rating_value(value)
        post = self.posts.find_post(post_id)
        if post is None:
            raise NotFoundError("Post")
        if post.author_id == rater_id:
            raise SelfRatingError()

        self.posts.upsert_rating(post_id, rater_id, rating)
        logger.info("Recorded rating %d on post %s", rating, post_id)
        return compute_post_rating(self.posts.rating_values(post_id))

    def compute_author_avg_rating(self, author_id: str) -> float:
        """Mean of per-post means over the author's rated posts."""
        return mean_of_means(self.posts.rating_values_by_author(author_id))

    def compute_author_post_count(self, author_id: str) -> int:
        """Number of posts authored, counted at read time."""
        return self.posts.count_posts(author_id=author_id)

    def author_stats(self, author_id: str) -> AuthorStats:
        """Return the author's current post count and average rating."""
        return AuthorStats(
            post_count=self.compute_author_post_count(author_id),
            avg_rating=self.compute_author_avg_rating(author_id),
        )

    def snapshot_author_stats_at_post_creation(self, author_id: str) -> AuthorStats:
        """Capture the author's stats for a post that is about to be inserted.

        Must run before the new post is added to the session so that only
        pre-existing posts are counted. The result is written onto the new
        post once and never refreshed.
        """
        return self.author_stats(author_id)

    def compute_platform_stats(self) -> PlatformStats:
        """Return the admin dashboard rollups."""
        return PlatformStats(
            total_users=self.users.count_users(),
            total_posts=self.posts.count_posts(),
            anonymous_posts=self.posts.count_posts(anonymous=True),
            avg_platform_rating=mean_of_means(self.posts.rating_values_of_rated_posts()),
            category_popularity=rank_category_popularity(self.posts.category_counts()),
        )


__all__ = [
    "AuthorStats",
    "CategoryCount",
    "PlatformStats",
    "RatingSummary",
    "StatsEngine",
    "compute_post_rating",
    "mean_of_means",
    "rank_category_popularity",
    "validate_rating_value",
]
