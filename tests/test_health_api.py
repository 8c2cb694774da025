"""Tests for liveness and readiness endpoints."""
from fastapi.testclient import TestClient


def test_health_endpoints(test_client: TestClient, admin_headers):
    assert test_client.get("/health").json() == {"status": "ok"}
    assert test_client.get("/api/health/status").json() == {"status": "online"}

    test_client.post("/api/members", json={"name": "Asha", "email": "asha@x.com"}, headers=admin_headers)
    test_client.post(
        "/api/members",
        json={"name": "Ben", "email": "ben@x.com", "status": "inactive"},
        headers=admin_headers,
    )

    readiness = test_client.get("/api/health/readiness").json()
    assert readiness == {
        "database": "ok",
        "members": 2,
        "active_members": 1,
        "email_configured": False,
    }
