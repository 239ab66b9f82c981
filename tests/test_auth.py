"""API tests for login, registration and token checks."""

from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient
from jose import jwt

from app.config import settings
from app.domain.models import User, UserRole
from app.main import user_repo
from app.services.auth import create_access_token, decode_access_token


def test_login_returns_token_and_profile(client: TestClient, admin: User, admin_password):
    resp = client.post(
        "/api/auth/login", json={"email": "Admin@Example.com", "password": admin_password}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["user"] == {
        "id": admin.id,
        "email": "admin@example.com",
        "name": "Admin User",
        "role": "ADMIN",
    }
    claims = jwt.decode(body["token"], settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert claims["userId"] == admin.id
    assert claims["role"] == "ADMIN"


def test_login_wrong_password(client: TestClient, admin: User):
    resp = client.post(
        "/api/auth/login", json={"email": admin.email, "password": "not-the-password"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client: TestClient):
    resp = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "whatever"}
    )
    assert resp.status_code == 401


def test_login_account_without_password(client: TestClient, member: User):
    """Accounts created by an admin have no password and cannot log in."""
    resp = client.post("/api/auth/login", json={"email": member.email, "password": "admin123"})
    assert resp.status_code == 401


def test_register_then_login(client: TestClient):
    resp = client.post(
        "/api/auth/register",
        json={"email": "new@example.com", "password": "hunter22", "name": "New Person"},
    )
    assert resp.status_code == 201
    assert resp.json()["user"]["role"] == "USER"

    stored = user_repo.get_by_email("new@example.com")
    assert stored is not None
    assert stored.password_hash != "hunter22"

    login = client.post(
        "/api/auth/login", json={"email": "new@example.com", "password": "hunter22"}
    )
    assert login.status_code == 200


def test_register_duplicate_email(client: TestClient, member: User):
    resp = client.post(
        "/api/auth/register",
        json={"email": member.email, "password": "hunter22", "name": "Someone"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User already exists"


def test_register_validation(client: TestClient):
    short_password = client.post(
        "/api/auth/register",
        json={"email": "a@example.com", "password": "123", "name": "Valid"},
    )
    assert short_password.status_code == 422

    bad_email = client.post(
        "/api/auth/register",
        json={"email": "not-an-email", "password": "123456", "name": "Valid"},
    )
    assert bad_email.status_code == 422


# ---------------------------------------------------------------------------
# Token handling
# ---------------------------------------------------------------------------


def test_missing_token(client: TestClient):
    resp = client.get("/api/users")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Access token required"


def test_garbage_token(client: TestClient):
    resp = client.get("/api/users", headers={"Authorization": "Bearer not.a.jwt"})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Invalid or expired token"


def test_expired_token(client: TestClient, member: User):
    token = create_access_token(member, expires_delta=timedelta(seconds=-10))
    assert decode_access_token(token) is None

    resp = client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_token_for_deleted_user(client: TestClient):
    ghost = User(email="ghost@example.com", name="Ghost", role=UserRole.ADMIN)
    token = create_access_token(ghost)

    resp = client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_admin_only_route(client: TestClient, member_headers):
    resp = client.post(
        "/api/services", json={"name": "Massage", "duration": 30}, headers=member_headers
    )
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Admin access required"
