# tests/v1/test_auth.py
"""Tests for signup, login, the current user and password reset."""

from datetime import timedelta

import pytest
from fastapi import status

from unmute_world.core.errors import DependencyError
from unmute_world.db.time import utcnow
from unmute_world.services import mailer


@pytest.fixture()
def outbox(monkeypatch) -> list[dict[str, str]]:
    """Capture outgoing email instead of talking to SMTP."""
    sent: list[dict[str, str]] = []

    def _fake_send(to: str, subject: str, html: str, **_: object) -> None:
        sent.append({"to": to, "subject": subject, "html": html})

    monkeypatch.setattr(mailer, "send_email", _fake_send)
    return sent


def _token_from(mail: dict[str, str]) -> str:
    marker = "/#/reset-password/"
    start = mail["html"].index(marker) + len(marker)
    return mail["html"][start:].split('"', 1)[0]


def test_signup(client) -> None:
    """Signing up returns the new user with a token and no secrets."""
    response = client.post(
        "/api/auth/signup",
        json={"name": "Nora", "email": "Nora@Example.com", "password": "secret1"},
    )
    assert response.status_code == status.HTTP_201_CREATED

    data = response.json()
    assert data["token"]
    user = data["user"]
    assert user["email"] == "nora@example.com"
    assert user["postCount"] == 0
    assert user["avgRating"] == 0
    assert user["isAdmin"] is False
    assert "passwordHash" not in user
    assert "resetPasswordToken" not in user

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["id"] == user["id"]


def test_signup_duplicate_email_ignores_case(client, author) -> None:
    response = client.post(
        "/api/auth/signup",
        json={"name": "Copy", "email": "ALICE@example.com", "password": "secret1"},
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_signup_rejects_short_password(client) -> None:
    response = client.post(
        "/api/auth/signup",
        json={"name": "Short", "email": "short@example.com", "password": "123"},
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.parametrize(
    "email",
    ["a@b.c@d.com", "foo@bar..com", "x@y.", "<script>@x.com", "plainaddress", "no-local@"],
)
def test_signup_rejects_malformed_email(client, email) -> None:
    response = client.post(
        "/api/auth/signup",
        json={"name": "Mallory", "email": email, "password": "secret1"},
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_forgot_password_rejects_malformed_email(client, outbox) -> None:
    response = client.post("/api/auth/forgotpassword", json={"email": "foo@bar..com"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert outbox == []


def test_login(client, author) -> None:
    response = client.post(
        "/api/auth/login",
        json={"email": "Alice@Example.com", "password": "password123"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["id"] == author.id


@pytest.mark.parametrize(
    "email,password",
    [("alice@example.com", "wrong-password"), ("nobody@example.com", "password123")],
)
def test_login_bad_credentials(client, author, email, password) -> None:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid email or password"


def test_login_blocked_user(client, make_user) -> None:
    make_user("Blocked", email="blocked@example.com", is_blocked=True)
    response = client.post(
        "/api/auth/login",
        json={"email": "blocked@example.com", "password": "password123"},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_me_requires_token(client) -> None:
    assert client.get("/api/auth/me").status_code == status.HTTP_401_UNAUTHORIZED


def test_me_with_token_for_unknown_user(client) -> None:
    from unmute_world.core.security import create_access_token

    headers = {"Authorization": f"Bearer {create_access_token('no-such-user')}"}
    assert client.get("/api/auth/me", headers=headers).status_code == status.HTTP_401_UNAUTHORIZED


def test_me_includes_stats(client, author, author_headers, reader, make_post, rate) -> None:
    post = make_post(author)
    rate(post, reader, 5)

    data = client.get("/api/auth/me", headers=author_headers).json()
    assert data["postCount"] == 1
    assert data["avgRating"] == 5.0


def test_forgot_password_unknown_email_is_generic(client, outbox) -> None:
    response = client.post("/api/auth/forgotpassword", json={"email": "ghost@example.com"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is True
    assert outbox == []


def test_password_reset_flow(client, author, outbox) -> None:
    response = client.post("/api/auth/forgotpassword", json={"email": "alice@example.com"})
    assert response.status_code == status.HTTP_200_OK
    assert len(outbox) == 1
    assert outbox[0]["to"] == "alice@example.com"

    token = _token_from(outbox[0])
    response = client.put(f"/api/auth/resetpassword/{token}", json={"password": "brand-new-pass"})
    assert response.status_code == status.HTTP_200_OK

    login = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "brand-new-pass"})
    assert login.status_code == status.HTTP_200_OK

    # Tokens are single-use.
    reuse = client.put(f"/api/auth/resetpassword/{token}", json={"password": "another-pass"})
    assert reuse.status_code == status.HTTP_400_BAD_REQUEST


def test_new_reset_request_replaces_old_token(client, author, outbox) -> None:
    client.post("/api/auth/forgotpassword", json={"email": "alice@example.com"})
    client.post("/api/auth/forgotpassword", json={"email": "alice@example.com"})
    first, second = _token_from(outbox[0]), _token_from(outbox[1])

    stale = client.put(f"/api/auth/resetpassword/{first}", json={"password": "brand-new-pass"})
    assert stale.status_code == status.HTTP_400_BAD_REQUEST
    fresh = client.put(f"/api/auth/resetpassword/{second}", json={"password": "brand-new-pass"})
    assert fresh.status_code == status.HTTP_200_OK


def test_expired_reset_token(client, db_session, author, outbox) -> None:
    client.post("/api/auth/forgotpassword", json={"email": "alice@example.com"})
    token = _token_from(outbox[0])

    author.reset_password_expire = utcnow() - timedelta(minutes=1)
    db_session.commit()

    response = client.put(f"/api/auth/resetpassword/{token}", json={"password": "brand-new-pass"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid or expired token. Please try again."


def test_mail_failure_clears_token(client, author, monkeypatch) -> None:
    def _broken_send(*_: object, **__: object) -> None:
        raise DependencyError("Connection to email server failed.")

    monkeypatch.setattr(mailer, "send_email", _broken_send)

    response = client.post("/api/auth/forgotpassword", json={"email": "alice@example.com"})
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["detail"] == "Connection to email server failed."
    assert author.reset_password_token is None
    assert author.reset_password_expire is None
