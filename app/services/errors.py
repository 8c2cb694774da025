"""Error types raised by the club portal services.

Routers translate these into HTTP responses:

- ``NotificationValidationError`` -> 400, nothing was sent.
- ``EmailNotConfiguredError`` -> 500, nothing was sent.
- ``RecordNotFoundError`` -> 404.
- ``DuplicateRecordError`` -> 409, the row was not written.
- ``RecordStoreError`` -> 500.
- ``InvalidPasswordError`` -> 401.
"""
from __future__ import annotations

from typing import Any, Optional


class NotificationError(Exception):
    """Base error for notification dispatch failures that abort the whole batch."""


class NotificationValidationError(NotificationError):
    """The dispatch request was malformed; no email was attempted."""


class EmailNotConfiguredError(NotificationError):
    """The email provider credential is missing; no email was attempted."""

    def __init__(self, message: str = "Email service not configured") -> None:
        super().__init__(message)


class RecordStoreError(Exception):
    """Base error for record store failures.

    Args:
        message: Human-readable error description.
        table: Table the failing operation targeted.
        details: Optional underlying driver error text.
    """

    def __init__(self, message: str, *, table: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.table = table
        self.details = details


class RecordNotFoundError(RecordStoreError):
    """Raised when no row matches the requested id."""

    def __init__(self, table: str, record_id: int) -> None:
        super().__init__(f"{table} record {record_id} not found", table=table)
        self.record_id = record_id


class DuplicateRecordError(RecordStoreError):
    """Raised when an insert violates a unique constraint (e.g. member email)."""


class InvalidPasswordError(Exception):
    """The admin password did not match."""
