"""Integration tests for member API endpoints."""
from __future__ import annotations

from fastapi.testclient import TestClient


def _member(name: str, email: str, **extra) -> dict:
    payload = {"name": name, "email": email}
    payload.update(extra)
    return payload


def test_members_require_admin_session(test_client: TestClient):
    assert test_client.get("/api/members").status_code == 401
    response = test_client.post("/api/members", json=_member("Asha", "asha@x.com"))
    assert response.status_code == 401
    assert response.json()["detail"] == "Admin login required"


def test_unknown_token_is_rejected(test_client: TestClient):
    response = test_client.get("/api/members", headers={"Authorization": "Bearer not-a-session"})
    assert response.status_code == 401


def test_add_member(test_client: TestClient, admin_headers):
    response = test_client.post(
        "/api/members",
        json=_member("  Asha Rao ", "asha@x.com", department="Design", phone_number=""),
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Asha Rao"
    assert data["department"] == "Design"
    assert data["phone_number"] is None
    assert data["status"] == "active"
    assert "id" in data and "created_at" in data


def test_duplicate_email_is_rejected(test_client: TestClient, admin_headers):
    test_client.post("/api/members", json=_member("Asha", "asha@x.com"), headers=admin_headers)

    response = test_client.post("/api/members", json=_member("Other", "asha@x.com"), headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["detail"] == "A member with this email already exists."
    listed = test_client.get("/api/members", headers=admin_headers).json()
    assert [m["name"] for m in listed] == ["Asha"]


def test_blank_name_is_rejected(test_client: TestClient, admin_headers):
    response = test_client.post("/api/members", json=_member("   ", "a@x.com"), headers=admin_headers)
    assert response.status_code == 422


def test_list_members_newest_first_with_filters(test_client: TestClient, admin_headers):
    test_client.post("/api/members", json=_member("Asha", "asha@x.com", role="President"), headers=admin_headers)
    test_client.post("/api/members", json=_member("Ben", "ben@x.com", status="inactive"), headers=admin_headers)
    test_client.post("/api/members", json=_member("Chloe", "chloe@x.com"), headers=admin_headers)

    names = [m["name"] for m in test_client.get("/api/members", headers=admin_headers).json()]
    assert names == ["Chloe", "Ben", "Asha"]

    searched = test_client.get("/api/members", params={"search": "PRESIDENT"}, headers=admin_headers).json()
    assert [m["name"] for m in searched] == ["Asha"]

    active = test_client.get("/api/members", params={"status": "active"}, headers=admin_headers).json()
    assert [m["name"] for m in active] == ["Chloe", "Asha"]


def test_delete_member(test_client: TestClient, admin_headers):
    created = test_client.post("/api/members", json=_member("Asha", "asha@x.com"), headers=admin_headers).json()

    response = test_client.delete(f"/api/members/{created['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert test_client.get("/api/members", headers=admin_headers).json() == []

    missing = test_client.delete(f"/api/members/{created['id']}", headers=admin_headers)
    assert missing.status_code == 404
