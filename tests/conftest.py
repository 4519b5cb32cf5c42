# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from unmute_world.core.security import create_access_token, hash_password  # noqa: E402
from unmute_world.db.session import Base  # noqa: E402
from unmute_world.db.session import get_db as app_get_session  # noqa: E402
from unmute_world.main import app as fastapi_app  # noqa: E402
from unmute_world.models import Category, Post, User  # noqa: E402
from unmute_world.schemas.post import PostCreate  # noqa: E402
from unmute_world.services import post_service  # noqa: E402

TEST_DB_URL = "sqlite://"
DEFAULT_PASSWORD = "password123"
BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@lru_cache(maxsize=None)
def _hashed(password: str) -> str:
    # bcrypt is deliberately slow; hash each distinct password once per run.
    return hash_password(password)


def bearer(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory persisting users with a known password."""
    numbers = count(1)

    def _make(
        name: str | None = None,
        *,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        is_admin: bool = False,
        is_blocked: bool = False,
    ) -> User:
        n = next(numbers)
        user = User(
            name=name or f"User {n}",
            email=(email or f"user{n}@example.com").lower(),
            password_hash=_hashed(password),
            profile_pic="https://example.com/avatar.png",
            is_admin=is_admin,
            is_blocked=is_blocked,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def author(make_user: Callable[..., User]) -> User:
    """Primary post author."""
    return make_user("Alice Author", email="alice@example.com")


@pytest.fixture()
def reader(make_user: Callable[..., User]) -> User:
    """A second user who rates and saves posts."""
    return make_user("Rita Reader", email="rita@example.com")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("Ada Admin", email="admin@example.com", is_admin=True)


@pytest.fixture()
def author_headers(author: User) -> dict[str, str]:
    return bearer(author)


@pytest.fixture()
def reader_headers(reader: User) -> dict[str, str]:
    return bearer(reader)


@pytest.fixture()
def admin_headers(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture()
def categories(db_session: Session) -> dict[str, Category]:
    """Two categories available to posts."""
    rows = {
        "Technology": Category(name="Technology", description="Gadgets and code", color="#1E90FF"),
        "Health": Category(name="Health", description="Body and mind", color="#2E8B57"),
    }
    db_session.add_all(rows.values())
    db_session.commit()
    return rows


@pytest.fixture()
def make_post(db_session: Session, categories: dict[str, Category]) -> Callable[..., Post]:
    """Factory publishing posts through the post service.

    Each post gets a creation time one minute after the previous one so that
    ordering assertions are deterministic.
    """
    minutes = count(0)

    def _make(
        author: User,
        *,
        title: str = "A post",
        content: str = "Some content",
        category: str = "Technology",
        basis: str = "My personal experience",
        tags: list[str] | None = None,
        anonymous: bool = False,
    ) -> Post:
        payload = PostCreate(
            title=title,
            content=content,
            category=category,
            basis=basis,
            tags=tags or [],
            anonymous=anonymous,
        )
        post = post_service.create_post(db_session, author, payload)
        post.created_at = BASE_TIME + timedelta(minutes=next(minutes))
        db_session.commit()
        return post

    return _make


@pytest.fixture()
def rate(db_session: Session) -> Callable[[Post, User, int], None]:
    """Record a rating directly through the service layer."""

    def _rate(post: Post, rater: User, value: int) -> None:
        post_service.rate_post(db_session, post.id, rater.id, value)

    return _rate


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Build bearer headers for any user."""
    return bearer
