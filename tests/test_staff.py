"""API tests for the staff directory and picture uploads."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.domain.models import StaffMember, StaffStatus
from app.main import picture_storage, staff_repo

_PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _png(name: str = "face.png") -> tuple[str, tuple[str, bytes, str]]:
    return ("pictures", (name, _PNG, "image/png"))


def _file_for(url: str) -> Path:
    return picture_storage.staff_dir / url.rsplit("/", 1)[-1]


@pytest.fixture()
def member_record() -> StaffMember:
    record = StaffMember(name="Alice Smith", staff_id="S-001")
    staff_repo.add(record)
    return record


def test_create_staff_with_pictures(client: TestClient, admin_headers):
    resp = client.post(
        "/api/staff",
        data={"name": "Bob Stone", "staff_id": "S-002", "status": "active", "remarks": "Weekends"},
        files=[_png("a.png"), ("pictures", ("b.jpg", b"jpegdata", "image/jpeg"))],
        headers=admin_headers,
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "active"
    assert body["remarks"] == "Weekends"
    assert len(body["pictures"]) == 2
    for url in body["pictures"]:
        assert url.startswith("/uploads/staff/staff-")
        assert _file_for(url).exists()
    assert body["pictures"][1].endswith(".jpg")


def test_create_staff_without_pictures(client: TestClient, admin_headers):
    resp = client.post(
        "/api/staff",
        data={"name": "Carl Moss", "staff_id": "S-003", "status": "inactive"},
        headers=admin_headers,
    )

    assert resp.status_code == 201
    assert resp.json()["pictures"] == []
    assert resp.json()["status"] == StaffStatus.INACTIVE


def test_create_staff_duplicate_staff_id(client: TestClient, admin_headers, member_record):
    resp = client.post(
        "/api/staff",
        data={"name": "Other", "staff_id": member_record.staff_id, "status": "active"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Staff with this ID already exists"


def test_create_staff_validation(client: TestClient, admin_headers):
    resp = client.post(
        "/api/staff",
        data={"name": "Dee", "staff_id": "S-004", "status": "on-leave"},
        headers=admin_headers,
    )
    assert resp.status_code == 422


def test_reject_non_image_upload(client: TestClient, admin_headers):
    resp = client.post(
        "/api/staff",
        data={"name": "Eve Adams", "staff_id": "S-005", "status": "active"},
        files=[_png(), ("pictures", ("notes.txt", b"hello", "text/plain"))],
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only image files are allowed!"
    assert staff_repo.get_by_staff_id("S-005") is None
    assert not picture_storage.staff_dir.exists() or not any(picture_storage.staff_dir.iterdir())


def test_reject_oversized_upload(client: TestClient, admin_headers):
    picture_storage.max_bytes = 8

    resp = client.post(
        "/api/staff",
        data={"name": "Fay Lee", "staff_id": "S-006", "status": "active"},
        files=[_png()],
        headers=admin_headers,
    )

    assert resp.status_code == 413


def test_reject_too_many_pictures(client: TestClient, admin_headers):
    picture_storage.max_files = 1

    resp = client.post(
        "/api/staff",
        data={"name": "Gus Hart", "staff_id": "S-007", "status": "active"},
        files=[_png("a.png"), _png("b.png")],
        headers=admin_headers,
    )

    assert resp.status_code == 400


def test_list_and_search_staff(client: TestClient, member_headers, member_record):
    staff_repo.add(StaffMember(name="Zed Young", staff_id="X-900"))

    everyone = client.get("/api/staff", headers=member_headers)
    assert len(everyone.json()) == 2

    by_code = client.get("/api/staff", params={"search": "s-00"}, headers=member_headers)
    assert [m["id"] for m in by_code.json()] == [member_record.id]


def test_get_staff_404(client: TestClient, member_headers):
    resp = client.get("/api/staff/missing", headers=member_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Staff member not found"


def test_update_replaces_pictures_and_removes_old_files(client: TestClient, admin_headers):
    created = client.post(
        "/api/staff",
        data={"name": "Hana Park", "staff_id": "S-008", "status": "active"},
        files=[_png("old.png")],
        headers=admin_headers,
    ).json()
    old_file = _file_for(created["pictures"][0])
    assert old_file.exists()

    resp = client.put(
        f"/api/staff/{created['id']}",
        data={"remarks": "New headshot"},
        files=[_png("new.png")],
        headers=admin_headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["remarks"] == "New headshot"
    assert body["name"] == "Hana Park"
    assert body["pictures"] != created["pictures"]
    assert _file_for(body["pictures"][0]).exists()
    assert not old_file.exists()


def test_update_without_files_keeps_pictures(client: TestClient, admin_headers):
    created = client.post(
        "/api/staff",
        data={"name": "Ivan Ross", "staff_id": "S-009", "status": "active"},
        files=[_png()],
        headers=admin_headers,
    ).json()

    resp = client.put(
        f"/api/staff/{created['id']}",
        data={"status": "inactive"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["status"] == "inactive"
    assert resp.json()["pictures"] == created["pictures"]
    assert _file_for(created["pictures"][0]).exists()


def test_update_to_taken_staff_id(client: TestClient, admin_headers, member_record):
    other = StaffMember(name="Jon Kim", staff_id="S-010")
    staff_repo.add(other)

    resp = client.put(
        f"/api/staff/{other.id}",
        data={"staff_id": member_record.staff_id},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_delete_staff_removes_pictures(client: TestClient, admin_headers):
    created = client.post(
        "/api/staff",
        data={"name": "Kim Lowe", "staff_id": "S-011", "status": "active"},
        files=[_png()],
        headers=admin_headers,
    ).json()
    picture = _file_for(created["pictures"][0])

    resp = client.delete(f"/api/staff/{created['id']}", headers=admin_headers)

    assert resp.status_code == 200
    assert staff_repo.get(created["id"]) is None
    assert not picture.exists()


def test_uploaded_picture_is_served(client: TestClient, admin_headers):
    created = client.post(
        "/api/staff",
        data={"name": "Lia Moon", "staff_id": "S-012", "status": "active"},
        files=[_png()],
        headers=admin_headers,
    ).json()

    resp = client.get(created["pictures"][0])

    assert resp.status_code == 200
    assert resp.content == _PNG
