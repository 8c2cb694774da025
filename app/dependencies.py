"""Shared FastAPI dependencies."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import get_settings
from app.services.notification_service import NotificationDispatcher
from app.services.session_gate import AdminSession, SessionGate


bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache()
def get_session_gate() -> SessionGate:
    """Process-wide gate; sessions start at login and end at logout."""

    return SessionGate(get_settings().admin_password)


def get_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(get_settings())


def require_admin(
    gate: Annotated[SessionGate, Depends(get_session_gate)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AdminSession:
    """Resolve the bearer token to an admin session or reject with 401."""

    session = gate.resolve(credentials.credentials if credentials else None)
    if session is None:
        raise HTTPException(
            status_code=401,
            detail="Admin login required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session
