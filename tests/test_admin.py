"""Tests for the admin-only user management routes."""

from datetime import date

import pytest

from taskflow.core import security
from taskflow.db import models

from conftest import make_user


ADMIN_ROUTES = [
    ("get", "/admin/admins", None),
    ("get", "/admin/stats", None),
    ("get", "/admin/users", None),
    ("post", "/admin/create-admin", {"fullName": "X", "email": "x@example.com", "password": "pw"}),
    ("put", "/admin/users/other@example.com", {"role": "admin"}),
    ("delete", "/admin/users/other@example.com", None),
]


@pytest.mark.parametrize("method,url,payload", ADMIN_ROUTES)
def test_non_admin_is_forbidden(client, session, user_headers, other_user, method, url, payload):
    kwargs = {"headers": user_headers}
    if payload is not None:
        kwargs["json"] = payload

    response = client.request(method.upper(), url, **kwargs)
    assert response.status_code == 403
    assert response.json()["success"] is False

    session.expire_all()
    assert session.query(models.User).count() == 2
    assert session.query(models.User).filter(models.User.email == "other@example.com").one().role == "user"


@pytest.mark.parametrize("method,url,payload", ADMIN_ROUTES)
def test_anonymous_is_unauthorized(client, method, url, payload):
    kwargs = {"json": payload} if payload is not None else {}
    response = client.request(method.upper(), url, **kwargs)
    assert response.status_code == 401


def test_create_admin(client, session, admin_headers):
    response = client.post(
        "/admin/create-admin",
        json={"fullName": "Second Admin", "email": "second@example.com", "password": "pw123"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["role"] == "admin"
    assert "password" not in data
    assert "hashedPassword" not in data

    stored = session.query(models.User).filter(models.User.email == "second@example.com").one()
    assert security.verify_password("pw123", stored.hashed_password)


def test_create_admin_duplicate(client, admin, admin_headers):
    response = client.post(
        "/admin/create-admin",
        json={"fullName": "Again", "email": admin.email, "password": "pw"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "User already exists"


def test_list_admins_and_users(client, session, user, admin, admin_headers):
    admins = client.get("/admin/admins", headers=admin_headers).json()["data"]
    assert [row["email"] for row in admins] == [admin.email]

    users = client.get("/admin/users", headers=admin_headers).json()["data"]
    assert {row["email"] for row in users} == {user.email, admin.email}
    assert all("hashedPassword" not in row for row in users)


def test_stats(client, session, user, other_user, admin, admin_headers):
    response = client.get("/admin/stats", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"totalUsers": 2, "totalAdmins": 1, "totalAllUsers": 3}


def test_update_user_by_email(client, session, user, admin_headers):
    response = client.put(
        f"/admin/users/{user.email}", json={"fullName": "Promoted", "role": "admin"}, headers=admin_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["fullName"] == "Promoted"
    assert data["role"] == "admin"


def test_update_user_rejects_bad_role(client, user, admin_headers):
    response = client.put(f"/admin/users/{user.email}", json={"role": "root"}, headers=admin_headers)
    assert response.status_code == 400


def test_update_unknown_user(client, admin_headers):
    response = client.put("/admin/users/nobody@example.com", json={"fullName": "N"}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_delete_user_removes_tasks_keeps_logs(client, session, user, admin_headers):
    session.add(models.Task(title="t", description="d", due_date=date(2025, 1, 1), user_id=user.id))
    session.commit()
    client.post("/api/auth/login", json={"email": user.email, "password": "secret123"})

    response = client.delete(f"/admin/users/{user.email}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "User deleted successfully"

    assert session.query(models.User).filter(models.User.email == "user@example.com").count() == 0
    assert session.query(models.Task).count() == 0
    assert session.query(models.UserLog).count() == 1


def test_delete_unknown_user(client, admin_headers):
    response = client.delete("/admin/users/nobody@example.com", headers=admin_headers)
    assert response.status_code == 404


def test_token_role_decides_access(client, session):
    # Role comes from the token, so a promotion only applies after a new login.
    user = make_user(session, email="later@example.com")
    stale = {"Authorization": f"Bearer {security.create_access_token(user.id, 'user')}"}
    user.role = "admin"
    session.commit()

    assert client.get("/admin/stats", headers=stale).status_code == 403
    fresh = {"Authorization": f"Bearer {security.create_access_token(user.id, 'admin')}"}
    assert client.get("/admin/stats", headers=fresh).status_code == 200
