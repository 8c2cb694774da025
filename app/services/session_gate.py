"""Admin session handling for the shared club password.

The shared password only keeps casual visitors out of the admin screens. It
is not an authentication system and is intentionally not treated as one.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime

from app.services.errors import InvalidPasswordError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSession:
    """An unlocked admin session, alive from login until logout."""

    token: str
    created_at: datetime = field(default_factory=datetime.utcnow)


class SessionGate:
    """Issue and revoke admin sessions against a single shared password."""

    def __init__(self, password: str) -> None:
        self._password = password
        self._sessions: dict[str, AdminSession] = {}

    def login(self, password: str) -> AdminSession:
        if not secrets.compare_digest(password.encode("utf-8"), self._password.encode("utf-8")):
            logger.warning("Rejected admin login attempt")
            raise InvalidPasswordError("Invalid admin password. Please try again.")
        session = AdminSession(token=secrets.token_urlsafe(32))
        self._sessions[session.token] = session
        logger.info("Admin session opened (%d active)", len(self._sessions))
        return session

    def resolve(self, token: str | None) -> AdminSession | None:
        if not token:
            return None
        return self._sessions.get(token)

    def logout(self, token: str) -> bool:
        """Forget the session; returns False when the token was unknown."""

        removed = self._sessions.pop(token, None) is not None
        if removed:
            logger.info("Admin session closed (%d active)", len(self._sessions))
        return removed

    def clear(self) -> None:
        self._sessions.clear()
