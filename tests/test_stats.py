"""Tests for rating aggregation and the stats engine."""

from types import SimpleNamespace

import pytest

from unmute_world.core.errors import NotFoundError, SelfRatingError, ValidationError
from unmute_world.repositories import PostRepository
from unmute_world.services.stats import (
    CategoryCount,
    StatsEngine,
    compute_post_rating,
    mean_of_means,
    rank_category_popularity,
    validate_rating_value,
)


def test_post_rating_of_unrated_post_is_zero() -> None:
    summary = compute_post_rating([])
    assert summary.mean == 0
    assert summary.count == 0


def test_post_rating_is_order_independent() -> None:
    assert compute_post_rating([5, 3, 1]) == compute_post_rating([1, 5, 3])
    assert compute_post_rating([5, 3, 1]).mean == pytest.approx(3.0)


def test_mean_of_means_skips_unrated_posts() -> None:
    """One 5-star post and one unrated post average 5, not 2.5."""
    assert mean_of_means([[5], []]) == pytest.approx(5.0)


def test_mean_of_means_weights_each_post_once() -> None:
    # Post means are 4 and 1; the number of ratings per post does not matter.
    assert mean_of_means([[5, 3], [1]]) == pytest.approx(2.5)
    assert mean_of_means([]) == 0


def test_rank_category_popularity_sorts_and_drops_empty() -> None:
    ranked = rank_category_popularity([("Health", 2), ("Art", 2), ("Tech", 5), (None, 3), ("Empty", 0)])
    assert ranked == [
        CategoryCount("Tech", 5),
        CategoryCount("Art", 2),
        CategoryCount("Health", 2),
    ]


@pytest.mark.parametrize("value", [0, 6, -1, True, 3.5, "3", None])
def test_validate_rating_value_rejects(value) -> None:
    with pytest.raises(ValidationError):
        validate_rating_value(value)


@pytest.mark.parametrize("value", [1, 3, 5])
def test_validate_rating_value_accepts(value) -> None:
    assert validate_rating_value(value) == value


def test_rerating_replaces_value(db_session, author, reader, make_post) -> None:
    """A second rating from the same rater replaces the first; count stays 1."""
    post = make_post(author)
    engine = StatsEngine.from_session(db_session)

    engine.submit_rating(post.id, reader.id, 4)
    summary = engine.submit_rating(post.id, reader.id, 2)

    assert summary.count == 1
    assert summary.mean == pytest.approx(2.0)
    assert engine.post_rating(post).count == 1


def test_ratings_from_different_raters_accumulate(db_session, author, make_user, make_post) -> None:
    post = make_post(author)
    engine = StatsEngine.from_session(db_session)
    raters = [make_user() for _ in range(3)]

    for rater, value in zip(raters, [5, 4, 3]):
        engine.submit_rating(post.id, rater.id, value)

    summary = engine.post_rating(post)
    assert summary.count == 3
    assert summary.mean == pytest.approx(4.0)


def test_self_rating_is_rejected(db_session, author, make_post) -> None:
    post = make_post(author)
    with pytest.raises(SelfRatingError):
        StatsEngine.from_session(db_session).submit_rating(post.id, author.id, 5)
    assert StatsEngine.post_rating(post).count == 0


def test_rating_unknown_post(db_session, reader) -> None:
    with pytest.raises(NotFoundError):
        StatsEngine.from_session(db_session).submit_rating("missing", reader.id, 3)


def test_invalid_value_is_rejected_before_lookup(db_session, reader) -> None:
    with pytest.raises(ValidationError):
        StatsEngine.from_session(db_session).submit_rating("missing", reader.id, 9)


def test_author_stats_use_mean_of_means(db_session, author, reader, make_user, make_post, rate) -> None:
    other = make_user()
    rated_twice = make_post(author, title="first")
    rated_once = make_post(author, title="second")
    make_post(author, title="unrated")

    rate(rated_twice, reader, 5)
    rate(rated_twice, other, 3)
    rate(rated_once, reader, 1)

    stats = StatsEngine.from_session(db_session).author_stats(author.id)
    assert stats.post_count == 3
    assert stats.avg_rating == pytest.approx(2.5)


def test_author_without_posts(db_session, reader) -> None:
    stats = StatsEngine.from_session(db_session).author_stats(reader.id)
    assert stats.post_count == 0
    assert stats.avg_rating == 0


def test_platform_stats(db_session, author, reader, make_post, rate) -> None:
    tech = make_post(author, category="Technology")
    make_post(author, category="Technology", anonymous=True)
    health = make_post(author, category="Health")
    rate(tech, reader, 4)
    rate(health, reader, 2)

    stats = StatsEngine.from_session(db_session).compute_platform_stats()

    assert stats.total_users == 2
    assert stats.total_posts == 3
    assert stats.anonymous_posts == 1
    assert stats.avg_platform_rating == pytest.approx(3.0)
    assert stats.category_popularity == [
        CategoryCount("Technology", 2),
        CategoryCount("Health", 1),
    ]


def test_rating_upsert_requires_on_conflict_dialect(db_session, author, reader, make_post, monkeypatch) -> None:
    """Ratings are only written on dialects with INSERT ... ON CONFLICT."""
    post = make_post(author)
    fake_bind = SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
    monkeypatch.setattr(db_session, "get_bind", lambda *args, **kwargs: fake_bind)

    with pytest.raises(NotImplementedError, match="mysql"):
        PostRepository(db_session).upsert_rating(post.id, reader.id, 4)

    monkeypatch.undo()
    assert PostRepository(db_session).rating_values(post.id) == []
