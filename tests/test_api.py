"""HTTP API tests: in-process ASGI transport, temporary SQLite per test."""
import json

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from onboard.api.app import app
from onboard.api.routers.profile import get_avatar_storage
from onboard.config import settings
from onboard.database.session import get_session_factory
from onboard.services.avatar_storage import AvatarStorage

from conftest import VALID_PASSWORD

NEW_EMPLOYEE = {
    "fullName": "Aarav Sharma",
    "email": "aarav.sharma@example.com",
    "phoneNumber": "9876543210",
    "department": "Engineering",
    "role": "Software Engineer",
    "dateOfJoining": "2024-03-10",
}


@pytest_asyncio.fixture
async def client(session_factory, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "")
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_avatar_storage] = lambda: AvatarStorage(
        root=tmp_path / "media", base_url="http://testserver"
    )
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()


async def create(client, **overrides):
    r = await client.post("/employees", json={**NEW_EMPLOYEE, **overrides})
    assert r.status_code == 201, r.text
    return r.json()


# ---------------------------------------------------------------------------
# Health and API key
# ---------------------------------------------------------------------------


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["db"] == "connected"
    assert "version" in body


async def test_api_key_enforced_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "test-key-12345")

    assert (await client.get("/employees")).status_code == 403
    assert (await client.get("/employees", headers={"X-API-Key": "wrong"})).status_code == 403
    r = await client.get("/employees", headers={"X-API-Key": "test-key-12345"})
    assert r.status_code == 200
    assert (await client.get("/health")).status_code == 200


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------


async def test_list_empty(client):
    r = await client.get("/employees")
    assert r.status_code == 200
    assert r.json() == []


async def test_create_returns_camel_case(client):
    body = await create(client, password=VALID_PASSWORD)

    assert body["employeeId"].startswith("24ENG")
    assert body["fullName"] == "Aarav Sharma"
    assert body["authUserId"]
    assert body["version"] == 1
    assert "password" not in body


async def test_create_missing_fields(client):
    r = await client.post("/employees", json={"fullName": "Priya"})
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "Missing or invalid employee data"
    assert "dateOfJoining" in body["fields"]


async def test_create_duplicate_email(client):
    await create(client)
    r = await client.post("/employees", json=NEW_EMPLOYEE)
    assert r.status_code == 409
    assert "error" in r.json()


async def test_update(client):
    created = await create(client)
    r = await client.put(
        "/employees",
        json={"employeeId": created["employeeId"], "role": "Staff Engineer", "version": 1},
    )
    assert r.status_code == 200
    assert r.json()["role"] == "Staff Engineer"
    assert r.json()["version"] == 2


async def test_update_stale_version(client):
    created = await create(client)
    await client.put("/employees", json={"employeeId": created["employeeId"], "role": "Lead"})

    r = await client.put(
        "/employees",
        json={"employeeId": created["employeeId"], "role": "Manager", "version": 1},
    )
    assert r.status_code == 409


async def test_update_department_refused(client):
    created = await create(client)
    r = await client.put(
        "/employees",
        json={"employeeId": created["employeeId"], "department": "Sales"},
    )
    assert r.status_code == 422
    assert "department" in r.json()["fields"]


async def test_update_missing(client):
    r = await client.put("/employees", json={"employeeId": "24ENG0000", "role": "x"})
    assert r.status_code == 404
    assert r.json() == {"error": "Employee not found"}


async def test_delete(client):
    created = await create(client)

    r = await client.delete("/employees", params={"id": created["employeeId"]})
    assert r.status_code == 200
    assert r.json() == {"message": "Employee deleted successfully"}

    assert (await client.delete("/employees", params={"id": created["employeeId"]})).status_code == 404
    assert (await client.delete("/employees")).status_code == 400


async def test_restore(client, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "SEED_FILE", tmp_path / "missing.json")
    assert (await client.post("/employees/restore")).status_code == 404

    seed = tmp_path / "initial-employees.json"
    seed.write_text(
        json.dumps(
            [
                {
                    "employee_id": "23HR2210",
                    "full_name": "Priya Nair",
                    "email": "priya.nair@example.com",
                    "phone_number": "9123456780",
                    "department": "Human Resources",
                    "role": "HR Manager",
                    "date_of_joining": "2023-07-03",
                }
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setattr(settings, "SEED_FILE", seed)
    await create(client)

    r = await client.post("/employees/restore")
    assert r.status_code == 200
    assert r.json()["count"] == 1
    listed = (await client.get("/employees")).json()
    assert [e["employeeId"] for e in listed] == ["23HR2210"]


async def test_restore_with_duplicate_emails_is_conflict(client, tmp_path, monkeypatch):
    duplicate = {
        "full_name": "Priya Nair",
        "email": "priya.nair@example.com",
        "phone_number": "9123456780",
        "department": "Human Resources",
        "role": "HR Manager",
        "date_of_joining": "2023-07-03",
    }
    seed = tmp_path / "initial-employees.json"
    seed.write_text(
        json.dumps(
            [
                {**duplicate, "employee_id": "23HR2210"},
                {**duplicate, "employee_id": "23HR3310"},
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setattr(settings, "SEED_FILE", seed)
    created = await create(client)

    r = await client.post("/employees/restore")
    assert r.status_code == 409
    assert "error" in r.json()

    listed = (await client.get("/employees")).json()
    assert [e["employeeId"] for e in listed] == [created["employeeId"]]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


async def test_login_success_by_email_and_id(client):
    created = await create(client, password=VALID_PASSWORD)

    for identifier in (NEW_EMPLOYEE["email"], created["employeeId"]):
        r = await client.post(
            "/auth/login", json={"identifier": identifier, "password": VALID_PASSWORD}
        )
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["employee"]["employeeId"] == created["employeeId"]


async def test_login_failures(client):
    created = await create(client)

    r = await client.post("/auth/login", json={"identifier": "x@example.com", "password": "a"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid credentials"}

    r = await client.post(
        "/auth/login",
        json={"identifier": created["employeeId"], "password": VALID_PASSWORD},
    )
    assert r.status_code == 401
    assert "not activated" in r.json()["error"]


async def test_link_employee(client):
    await create(client)

    r = await client.post(
        "/auth/link-employee",
        json={"email": NEW_EMPLOYEE["email"], "authUserId": "oauth-user-1"},
    )
    assert r.status_code == 200
    assert r.json()["authUserId"] == "oauth-user-1"

    r = await client.post(
        "/auth/link-employee",
        json={"email": NEW_EMPLOYEE["email"], "authUserId": "oauth-user-2"},
    )
    assert r.status_code == 409

    r = await client.post(
        "/auth/link-employee",
        json={"email": "nobody@example.com", "authUserId": "oauth-user-3"},
    )
    assert r.status_code == 404


async def test_link_employee_refuses_identity_of_another_employee(client):
    owner = await create(client, password=VALID_PASSWORD)
    other = await create(client, email="priya@example.com")

    r = await client.post(
        "/auth/link-employee",
        json={"email": "priya@example.com", "authUserId": owner["authUserId"]},
    )
    assert r.status_code == 409

    r = await client.post(
        "/auth/login",
        json={"identifier": other["employeeId"], "password": VALID_PASSWORD},
    )
    assert r.status_code == 401
    assert "not activated" in r.json()["error"]


async def test_validate_email(client):
    created = await create(client)

    r = await client.get("/auth/validate-email", params={"email": "AARAV.sharma@example.com"})
    assert r.json() == {
        "isValid": True,
        "employee": {
            "email": NEW_EMPLOYEE["email"],
            "employeeId": created["employeeId"],
            "fullName": "Aarav Sharma",
        },
    }

    r = await client.get("/auth/validate-email", params={"email": "nobody@example.com"})
    assert r.json()["isValid"] is False

    assert (await client.get("/auth/validate-email")).status_code == 400


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


async def test_profile(client):
    created = await create(client)

    r = await client.get("/profile", params={"id": created["employeeId"]})
    assert r.status_code == 200
    assert r.json()["email"] == NEW_EMPLOYEE["email"]

    assert (await client.get("/profile", params={"id": "24ENG0000"})).status_code == 404


async def test_avatar_upload(client, tmp_path):
    created = await create(client)
    employee_id = created["employeeId"]

    r = await client.post(
        "/profile/update-avatar",
        files={"file": ("me.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
        data={"employeeId": employee_id},
    )
    assert r.status_code == 200
    public_url = r.json()["publicUrl"]
    assert public_url.startswith(f"http://testserver/media/avatars/{employee_id}/")
    assert public_url.endswith(".png")

    stored = list((tmp_path / "media" / "avatars" / employee_id).iterdir())
    assert len(stored) == 1

    profile = (await client.get("/profile", params={"id": employee_id})).json()
    assert profile["profileImageUrl"] == public_url


@pytest.mark.parametrize(
    "files, data, status",
    [
        ({"file": ("notes.txt", b"hello", "text/plain")}, {"employeeId": "x"}, 404),
        (None, {"employeeId": "x"}, 400),
    ],
)
async def test_avatar_upload_rejected(client, files, data, status):
    r = await client.post("/profile/update-avatar", files=files, data=data)
    assert r.status_code == status


async def test_avatar_upload_wrong_type(client):
    created = await create(client)
    r = await client.post(
        "/profile/update-avatar",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        data={"employeeId": created["employeeId"]},
    )
    assert r.status_code == 422
    assert r.json()["error"] == "Unsupported image type"
