"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

_TMP_DIR = Path(tempfile.mkdtemp(prefix="club-portal-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["LOG_DIR"] = str(_TMP_DIR / "logs")
os.environ["ADMIN_PASSWORD"] = "test-password"
# Individual tests decide whether the email provider is configured.
os.environ["RESEND_API_KEY"] = ""

from app.logging_config import configure_logging

configure_logging()

from app.config import Settings
from app.database import Base, SessionLocal, engine
from app.dependencies import get_dispatcher, get_session_gate
from app.main import app
from app.models import database_models  # noqa: F401
from app.services.notification_service import NotificationDispatcher

ADMIN_PASSWORD = "test-password"


class FakeEmailProvider:
    """In-process stand-in for the Resend API built on ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[Dict[str, Any]] = []
        self._rejections: Dict[str, tuple[int, Any]] = {}
        self._unreachable: set[str] = set()

    def reject(self, email: str, status_code: int = 422, body: Any = None) -> None:
        if body is None:
            body = {"statusCode": status_code, "message": f"Invalid `to` field: {email}"}
        self._rejections[email] = (status_code, body)

    def unreachable(self, email: str) -> None:
        self._unreachable.add(email)

    @property
    def recipients(self) -> list[str]:
        return [r["payload"]["to"][0] for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append({"headers": dict(request.headers), "payload": payload})
        email = payload["to"][0]

        if email in self._unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        if email in self._rejections:
            status_code, body = self._rejections[email]
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, json=body)
        return httpx.Response(200, json={"id": f"msg-{email}"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture(autouse=True)
def reset_state() -> Iterator[None]:
    """Give every test an empty database, no admin sessions and no overrides."""

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    get_session_gate().clear()
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture
def db_session() -> Iterator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def admin_headers(test_client: TestClient) -> Dict[str, str]:
    response = test_client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def email_provider() -> FakeEmailProvider:
    return FakeEmailProvider()


@pytest.fixture
def configured_settings() -> Settings:
    return Settings(resend_api_key="re_test_key")


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(resend_api_key=None)


@pytest.fixture
def dispatcher(configured_settings: Settings, email_provider: FakeEmailProvider) -> NotificationDispatcher:
    return NotificationDispatcher(configured_settings, client=email_provider.client())


@pytest.fixture
def unconfigured_dispatcher(
    unconfigured_settings: Settings,
    email_provider: FakeEmailProvider,
) -> NotificationDispatcher:
    return NotificationDispatcher(unconfigured_settings, client=email_provider.client())


@pytest.fixture
def use_dispatcher(dispatcher: NotificationDispatcher) -> NotificationDispatcher:
    """Route the API's email dispatch through the fake provider."""

    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    return dispatcher


@pytest.fixture
def use_unconfigured_dispatcher(unconfigured_dispatcher: NotificationDispatcher) -> NotificationDispatcher:
    app.dependency_overrides[get_dispatcher] = lambda: unconfigured_dispatcher
    return unconfigured_dispatcher
