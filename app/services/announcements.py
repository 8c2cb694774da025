"""Member announcements sent after an event or meeting is created."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.models.database_models import Event, Meeting, Member, Notification
from app.models.schemas import NotificationDelivery
from app.services.errors import NotificationError, RecordStoreError
from app.services.formatting import format_clock_time, format_long_date
from app.services.notification_service import NotificationDispatcher
from app.services.record_store import RecordStore


logger = logging.getLogger(__name__)

AnnouncementKind = Literal["event", "meeting"]

_LABELS: dict[str, str] = {"event": "Event", "meeting": "Meeting"}

# Past-tense verb used in the creation message shown to the admin.
_VERBS: dict[str, str] = {"event": "created", "meeting": "scheduled"}

_CLOSINGS: dict[str, str] = {
    "event": "We look forward to seeing you there!",
    "meeting": "Please mark your calendar and join us!",
}


def build_subject(kind: AnnouncementKind, title: str) -> str:
    return f"New {_LABELS[kind]}: {title}"


def build_body(
    kind: AnnouncementKind,
    title: str,
    when: datetime,
    clock: str | None = None,
    location: str | None = None,
    description: str | None = None,
    club_name: str = "Fashion Walk Club",
) -> str:
    """
    Assemble the plain-text announcement.

    Lines appear in a fixed order: title, date, time, location, description.
    Optional lines are left out entirely when their value is empty.
    """
    label = _LABELS[kind]
    lines = [
        f"A new {kind} has been scheduled!",
        "",
        f"{label}: {title}",
        f"Date: {format_long_date(when)}",
    ]
    if clock:
        lines.append(f"Time: {format_clock_time(clock)}")
    if location:
        lines.append(f"Location: {location}")
    if description:
        lines.extend(["", "Description:", description])
    lines.extend([
        "",
        _CLOSINGS[kind],
        "",
        "Best regards,",
        club_name,
    ])
    return "\n".join(lines)


def record_notification(db: Session, category: str, title: str, message: str) -> Notification | None:
    """
    Insert the in-app notification row for a newly created item.

    The row is a side effect of the creation that already succeeded, so a
    failure here is logged and reported as ``None`` rather than raised.
    """
    try:
        return RecordStore(db, Notification).insert(
            {"title": title, "message": message, "type": category, "is_read": False}
        )
    except RecordStoreError:
        logger.exception("Failed to record %s notification '%s'", category, title)
        return None


def describe_outcome(kind: AnnouncementKind, delivery: NotificationDelivery) -> str:
    """User-facing message for a creation followed by a member fan-out."""

    done = f"{_LABELS[kind]} {_VERBS[kind]} successfully"
    if delivery.status == "skipped":
        return f"{done}!"
    if delivery.status == "failed":
        return f"{done}, but email notifications failed to send."
    summary = delivery.summary
    if summary is not None and summary.failed:
        return (
            f"{done}. Notifications sent to {summary.sent} of "
            f"{summary.total} members; {summary.failed} failed."
        )
    return f"{done} and notifications sent to all members!"


class AnnouncementService:
    """Notify active members about a freshly created event or meeting."""

    def __init__(
        self,
        db: Session,
        dispatcher: NotificationDispatcher | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.db = db
        self.settings = settings or get_settings()
        self.dispatcher = dispatcher or NotificationDispatcher(self.settings)

    def active_member_emails(self) -> list[str]:
        members = RecordStore(self.db, Member).list(
            filters={"status": "active"},
            order_by="created_at",
        )
        return [m.email for m in members]

    async def announce(self, kind: AnnouncementKind, record: Event | Meeting) -> NotificationDelivery:
        """
        Record the in-app notification and email every active member once.

        Must only be called after ``record`` has been committed. The write is
        never rolled back, whatever happens to the emails.

        Returns:
            NotificationDelivery: ``skipped`` when there are no active members,
            ``failed`` when the roster could not be read or the dispatcher
            refused the whole batch, otherwise
            ``sent`` with the per-batch summary (which may include failures).
        """
        subject = build_subject(kind, record.title)
        body = build_body(
            kind,
            record.title,
            record.date,
            clock=record.time,
            location=record.location,
            description=record.description,
            club_name=self.settings.club_name,
        )
        record_notification(self.db, kind, subject, body)

        try:
            emails = self.active_member_emails()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Could not load active members for %s id=%s", kind, record.id)
            return NotificationDelivery(status="failed", error=f"Could not load member list: {exc}")

        if not emails:
            logger.info("No active members; skipping %s notification for id=%s", kind, record.id)
            return NotificationDelivery(status="skipped")

        try:
            result = await self.dispatcher.dispatch(emails, subject, body, kind)
        except NotificationError as exc:
            logger.error("Email notifications for %s id=%s failed: %s", kind, record.id, exc)
            return NotificationDelivery(status="failed", error=str(exc))

        if result.summary.failed:
            logger.warning(
                "Partial delivery for %s id=%s: %d of %d failed",
                kind,
                record.id,
                result.summary.failed,
                result.summary.total,
            )
        return NotificationDelivery(status="sent", summary=result.summary)
