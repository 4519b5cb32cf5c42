"""Tests for the cascading delete helpers."""

import pytest

from unmute_world.core.errors import ConflictError, ForbiddenError, NotFoundError
from unmute_world.models import SavedPost
from unmute_world.repositories import PostRepository, UserRepository
from unmute_world.services import cascades
from unmute_world.services.stats import StatsEngine


def test_interrupted_user_cascade_converges(db_session, author, reader, make_post, rate) -> None:
    """Re-running after a partial cascade reaches the same end state."""
    readers_post = make_post(reader, title="reader's")
    authors_post = make_post(author, title="author's")
    authors_post_id, readers_post_id = authors_post.id, readers_post.id
    rate(readers_post, author, 2)
    rate(authors_post, reader, 5)
    db_session.add(SavedPost(user_id=reader.id, post_id=authors_post_id))
    db_session.commit()

    # Simulate a crash after the first two steps.
    posts = PostRepository(db_session)
    posts.delete_ratings_by_rater(author.id)
    posts.remove_post_from_saved_sets(posts.post_ids_by_author(author.id))
    db_session.commit()
    author_id = author.id

    cascades.on_delete_user(db_session, author_id)

    assert UserRepository(db_session).find_user(author_id) is None
    assert posts.find_post(authors_post_id) is None
    assert posts.rating_values(readers_post_id) == []
    assert posts.list_saved_posts(reader.id) == []
    assert StatsEngine.from_session(db_session).compute_platform_stats().total_posts == 1


def test_deleting_twice_reports_missing(db_session, author) -> None:
    author_id = author.id
    cascades.on_delete_user(db_session, author_id)
    with pytest.raises(NotFoundError):
        cascades.on_delete_user(db_session, author_id)


def test_admin_is_protected(db_session, admin_user) -> None:
    with pytest.raises(ForbiddenError):
        cascades.on_delete_user(db_session, admin_user.id)


def test_dangling_saved_reference_is_skipped(db_session, author, reader, make_post) -> None:
    """Readers ignore saved rows whose post has already gone."""
    post = make_post(author)
    db_session.add(SavedPost(user_id=reader.id, post_id=post.id))
    db_session.add(SavedPost(user_id=reader.id, post_id="already-deleted"))
    db_session.commit()

    saved = PostRepository(db_session).list_saved_posts(reader.id)
    assert [p.id for p in saved] == [post.id]


def test_on_delete_post_unknown(db_session) -> None:
    with pytest.raises(NotFoundError):
        cascades.on_delete_post(db_session, "missing")


def test_on_delete_category_guards(db_session, author, categories, make_post) -> None:
    make_post(author, category="Technology")
    with pytest.raises(ConflictError):
        cascades.on_delete_category(db_session, categories["Technology"].id)
    with pytest.raises(NotFoundError):
        cascades.on_delete_category(db_session, "missing")
