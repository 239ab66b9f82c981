"""Shared fixtures: clean repositories, an API client and signed-in accounts."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.domain.models import User, UserRole
from app.main import (
    app,
    booking_repo,
    picture_storage,
    service_repo,
    staff_repo,
    user_repo,
)
from app.services.auth import create_access_token, hash_password

ADMIN_PASSWORD = "admin-secret"
_ADMIN_HASH = hash_password(ADMIN_PASSWORD)


def _clear() -> None:
    user_repo._store.clear()
    service_repo._store.clear()
    staff_repo._store.clear()
    booking_repo._store.clear()


@pytest.fixture(autouse=True)
def _clear_repos(tmp_path):
    """Reset in-memory repos and point uploads at a scratch dir."""
    _clear()
    picture_storage.root = tmp_path
    picture_storage.max_bytes = settings.max_picture_bytes
    picture_storage.max_files = settings.max_pictures
    yield
    _clear()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def admin() -> User:
    user = User(
        email="admin@example.com",
        name="Admin User",
        role=UserRole.ADMIN,
        password_hash=_ADMIN_HASH,
    )
    user_repo.add(user)
    return user


@pytest.fixture()
def admin_headers(admin: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(admin)}"}


@pytest.fixture()
def member() -> User:
    user = User(email="jane@example.com", name="Jane Smith", phone="+1234567892")
    user_repo.add(user)
    return user


@pytest.fixture()
def member_headers(member: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(member)}"}


@pytest.fixture()
def admin_password() -> str:
    return ADMIN_PASSWORD
