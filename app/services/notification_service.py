"""Email fan-out to club members through the Resend API."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.config import Settings, get_settings
from app.models.schemas import (
    NOTIFICATION_CATEGORIES,
    DeliveryResult,
    DispatchResult,
    DispatchSummary,
)
from app.services.errors import EmailNotConfiguredError, NotificationValidationError


logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

_templates = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)


def validate_dispatch_request(
    recipients: Any,
    subject: Any,
    body: Any,
    category: Any = None,
) -> None:
    """Reject malformed dispatch input before any email is attempted."""

    if (
        not isinstance(recipients, (list, tuple))
        or not recipients
        or not all(isinstance(r, str) and r.strip() for r in recipients)
    ):
        raise NotificationValidationError("No email addresses provided")
    if not isinstance(subject, str) or not subject.strip() or not isinstance(body, str) or not body.strip():
        raise NotificationValidationError("Subject and message are required")
    if category is not None and category not in NOTIFICATION_CATEGORIES:
        raise NotificationValidationError(
            f"Unknown notification type '{category}'. Expected one of {', '.join(NOTIFICATION_CATEGORIES)}"
        )


class NotificationDispatcher:
    """Send one templated email per recipient and report each outcome.

    The dispatcher keeps no state between calls. Every recipient is sent
    concurrently and independently; a failed send is recorded in that
    recipient's result and never aborts the batch.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client

    def render_html(self, subject: str, body: str) -> str:
        """Wrap each line of ``body`` in its own paragraph inside the club template."""

        template = _templates.get_template("email/notification.html")
        return template.render(
            club_name=self.settings.club_name,
            subject=subject,
            lines=body.split("\n"),
            year=datetime.now().year,
        )

    async def dispatch(
        self,
        recipients: Sequence[str],
        subject: str,
        body: str,
        category: str | None = None,
    ) -> DispatchResult:
        """
        Send ``subject``/``body`` to every address in ``recipients``.

        Args:
            recipients: Non-empty list of email addresses
            subject: Email subject, also rendered as the heading
            body: Plain-text message; each line becomes a paragraph
            category: Optional notification tag (event, meeting, expense, gallery)

        Returns:
            DispatchResult: per-recipient outcomes in input order plus summary counts

        Raises:
            NotificationValidationError: malformed input, nothing sent
            EmailNotConfiguredError: no provider API key, nothing sent
        """
        validate_dispatch_request(recipients, subject, body, category)

        api_key = self.settings.resend_api_key
        if not api_key:
            logger.error("RESEND_API_KEY is not set; refusing to dispatch %d emails", len(recipients))
            raise EmailNotConfiguredError()

        html = self.render_html(subject, body)
        logger.info(
            "Dispatching notification | type=%s | recipients=%d | subject=%s",
            category or "unspecified",
            len(recipients),
            subject,
        )

        if self._client is not None:
            results = await self._send_all(self._client, api_key, list(recipients), subject, html)
        else:
            timeout = httpx.Timeout(self.settings.email_timeout_seconds)
            async with httpx.AsyncClient(timeout=timeout) as client:
                results = await self._send_all(client, api_key, list(recipients), subject, html)

        sent = sum(1 for r in results if r.status == "sent")
        failed = len(results) - sent
        logger.info("Email notification summary: %d sent, %d failed", sent, failed)

        return DispatchResult(
            success=True,
            results=results,
            summary=DispatchSummary(total=len(recipients), sent=sent, failed=failed),
        )

    async def _send_all(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        recipients: list[str],
        subject: str,
        html: str,
    ) -> list[DeliveryResult]:
        tasks = [self._send_one(client, api_key, email, subject, html) for email in recipients]
        return list(await asyncio.gather(*tasks))

    async def _send_one(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        email: str,
        subject: str,
        html: str,
    ) -> DeliveryResult:
        payload = {
            "from": self.settings.email_sender,
            "to": [email],
            "subject": subject,
            "html": html,
        }
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = await client.post(self.settings.resend_api_url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Error sending email to %s: %s", email, exc)
            return _failed(email, str(exc) or type(exc).__name__)
        except Exception as exc:
            logger.exception("Unexpected error sending email to %s", email)
            return _failed(email, str(exc) or type(exc).__name__)

        data = _json_body(response)
        if response.is_success:
            logger.debug("Email sent successfully to %s", email)
            message_id = data.get("id")
            return DeliveryResult(
                email=email,
                status="sent",
                message_id=str(message_id) if message_id is not None else None,
                message="Email sent successfully",
            )

        logger.error(
            "Failed to send email to %s: status=%s body=%s",
            email,
            response.status_code,
            data or response.text,
        )
        return _failed(email, str(data.get("message") or "Unknown error"))


def _failed(email: str, error: str) -> DeliveryResult:
    return DeliveryResult(email=email, status="failed", error=error, message="Failed to send email")


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
