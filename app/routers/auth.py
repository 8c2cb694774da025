"""Admin login/logout endpoints."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from app.dependencies import bearer_scheme, get_session_gate, require_admin
from app.models.schemas import LoginRequest, SessionResponse, SessionStatus
from app.services.errors import InvalidPasswordError
from app.services.session_gate import AdminSession, SessionGate


router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=SessionResponse)
async def login(
    credentials: LoginRequest,
    gate: Annotated[SessionGate, Depends(get_session_gate)],
):
    """Exchange the shared admin password for a session token."""
    try:
        session = gate.login(credentials.password)
    except InvalidPasswordError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    return SessionResponse(token=session.token, created_at=session.created_at)


@router.post("/logout")
async def logout(
    session: Annotated[AdminSession, Depends(require_admin)],
    gate: Annotated[SessionGate, Depends(get_session_gate)],
) -> dict:
    gate.logout(session.token)
    return {"message": "Logged out"}


@router.get("/session", response_model=SessionStatus)
async def session_status(
    gate: Annotated[SessionGate, Depends(get_session_gate)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
):
    """Report whether the presented token belongs to a live admin session."""
    session = gate.resolve(credentials.credentials if credentials else None)
    if session is None:
        return SessionStatus(authenticated=False)
    return SessionStatus(authenticated=True, created_at=session.created_at)
