"""Tests for registration, login and logout."""

from jose import jwt
from sqlalchemy.exc import OperationalError

from taskflow.core import security
from taskflow.core.config import settings
from taskflow.db import models

from conftest import auth_header


def test_register_returns_token(client, session):
    response = client.post(
        "/api/auth/register",
        json={"fullName": "Jane Doe", "email": "Jane@Example.com ", "password": "pw123456"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["role"] == "user"

    payload = jwt.decode(body["data"]["token"], settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    assert payload["role"] == "user"
    assert int(payload["sub"]) == body["data"]["userId"]

    stored = session.query(models.User).one()
    assert stored.email == "jane@example.com"
    assert stored.hashed_password != "pw123456"
    assert security.verify_password("pw123456", stored.hashed_password)


def test_register_duplicate_email(client, user):
    response = client.post(
        "/api/auth/register",
        json={"fullName": "Copy", "email": user.email, "password": "whatever"},
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "User already exists"}


def test_register_missing_fields(client, session):
    response = client.post("/api/auth/register", json={"email": "a@example.com"})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation error"
    assert any(error.startswith("fullName") for error in body["errors"])
    assert any(error.startswith("password") for error in body["errors"])
    assert session.query(models.User).count() == 0


def test_login_normalizes_email_and_logs(client, session, user):
    response = client.post(
        "/api/auth/login",
        json={"email": "  USER@example.com ", "password": "secret123"},
        headers={"User-Agent": "pytest-agent", "X-Forwarded-For": "10.0.0.7, 10.0.0.1"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["userId"] == user.id
    assert data["fullName"] == user.full_name
    assert data["role"] == "user"

    log = session.query(models.UserLog).one()
    assert log.action == "login"
    assert log.user_email == user.email
    assert log.token_id == data["token"][-8:]
    assert log.ip_address == "10.0.0.7"
    assert log.user_agent == "pytest-agent"
    assert log.login_time is not None
    assert log.logout_time is None


def test_login_wrong_password(client, session, user):
    response = client.post("/api/auth/login", json={"email": user.email, "password": "nope"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid email or password"
    assert session.query(models.UserLog).count() == 0


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "x"})
    assert response.status_code == 400


def test_login_succeeds_when_audit_write_fails(client, session, user, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT INTO user_logs", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)
    response = client.post("/api/auth/login", json={"email": user.email, "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["data"]["token"]
    monkeypatch.undo()
    assert session.query(models.UserLog).count() == 0


def test_logout_requires_token(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. No token provided."


def test_logout_rejects_bad_token(client):
    response = client.post("/api/auth/logout", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token."


def test_logout_writes_logout_row(client, session, user):
    login = client.post("/api/auth/login", json={"email": user.email, "password": "secret123"})
    token = login.json()["data"]["token"]

    response = client.post("/api/auth/logout", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"

    logout = session.query(models.UserLog).filter(models.UserLog.action == "logout").one()
    assert logout.token_id == token[-8:]
    assert logout.logout_time is not None
    assert logout.session_duration == 0


def test_logout_for_deleted_user_still_succeeds(client, session, user):
    headers = auth_header(user)
    session.delete(user)
    session.commit()

    response = client.post("/api/auth/logout", headers=headers)
    assert response.status_code == 200
    assert session.query(models.UserLog).count() == 0


def test_expired_token_is_rejected(client, user, monkeypatch):
    monkeypatch.setattr(settings, "ACCESS_TOKEN_EXPIRE_MINUTES", -1)
    headers = auth_header(user)
    response = client.get("/api/tasks", headers=headers)
    assert response.status_code == 401


def test_register_cannot_grant_admin(client, session):
    response = client.post(
        "/api/auth/register",
        json={"fullName": "Mallory", "email": "mallory@example.com", "password": "pw", "role": "admin"},
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["role"] == "user"
    assert session.query(models.User).filter(models.User.email == "mallory@example.com").one().role == "user"

    headers = {"Authorization": f"Bearer {data['token']}"}
    assert client.get("/admin/stats", headers=headers).status_code == 403
