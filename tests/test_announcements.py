"""Tests for the event/meeting announcement fan-out."""
from __future__ import annotations

from datetime import datetime

import pytest

from sqlalchemy.exc import OperationalError

from app.models.database_models import Event, Meeting, Member, Notification
from app.models.schemas import DispatchSummary, NotificationDelivery
from app.services.announcements import (
    AnnouncementService,
    build_body,
    build_subject,
    describe_outcome,
)
from app.services.record_store import RecordStore


def _add_member(db, name: str, email: str, status: str = "active") -> Member:
    return RecordStore(db, Member).insert({"name": name, "email": email, "status": status})


def _add_event(db, **overrides) -> Event:
    values = {
        "title": "Spring Showcase",
        "date": datetime(2025, 3, 1, 18, 0),
        "time": "18:00",
        "location": "Main Hall",
        "description": "Annual runway show",
    }
    values.update(overrides)
    return RecordStore(db, Event).insert(values)


def test_build_subject():
    assert build_subject("event", "Gala") == "New Event: Gala"
    assert build_subject("meeting", "Planning") == "New Meeting: Planning"


def test_build_body_full():
    body = build_body(
        "event",
        "Gala",
        datetime(2025, 1, 1),
        clock="19:30",
        location="Main Hall",
        description="Dress code: formal",
        club_name="Fashion Walk Club",
    )

    assert body.split("\n") == [
        "A new event has been scheduled!",
        "",
        "Event: Gala",
        "Date: January 1st, 2025",
        "Time: 7:30 PM",
        "Location: Main Hall",
        "",
        "Description:",
        "Dress code: formal",
        "",
        "We look forward to seeing you there!",
        "",
        "Best regards,",
        "Fashion Walk Club",
    ]


def test_build_body_omits_empty_optional_lines():
    body = build_body("meeting", "Planning", datetime(2025, 2, 22), club_name="Fashion Walk Club")

    lines = body.split("\n")
    assert lines[:4] == [
        "A new meeting has been scheduled!",
        "",
        "Meeting: Planning",
        "Date: February 22nd, 2025",
    ]
    assert not any(line.startswith(("Time:", "Location:", "Description:")) for line in lines)
    assert lines[4:] == ["", "Please mark your calendar and join us!", "", "Best regards,", "Fashion Walk Club"]


def test_describe_outcome_messages():
    assert describe_outcome("event", NotificationDelivery(status="skipped")) == "Event created successfully!"
    assert describe_outcome("meeting", NotificationDelivery(status="failed", error="boom")) == (
        "Meeting scheduled successfully, but email notifications failed to send."
    )
    all_sent = NotificationDelivery(status="sent", summary=DispatchSummary(total=3, sent=3, failed=0))
    assert describe_outcome("event", all_sent) == "Event created successfully and notifications sent to all members!"
    partial = NotificationDelivery(status="sent", summary=DispatchSummary(total=3, sent=2, failed=1))
    assert describe_outcome("event", partial) == (
        "Event created successfully. Notifications sent to 2 of 3 members; 1 failed."
    )


def test_active_member_emails_excludes_inactive(db_session, dispatcher):
    _add_member(db_session, "Asha", "asha@x.com")
    _add_member(db_session, "Ben", "ben@x.com", status="inactive")
    _add_member(db_session, "Chloe", "chloe@x.com")

    service = AnnouncementService(db_session, dispatcher)

    assert service.active_member_emails() == ["asha@x.com", "chloe@x.com"]


@pytest.mark.asyncio
async def test_announce_emails_every_active_member_once(db_session, dispatcher, email_provider):
    _add_member(db_session, "Asha", "asha@x.com")
    _add_member(db_session, "Ben", "ben@x.com")
    _add_member(db_session, "Dev", "dev@x.com", status="inactive")
    event = _add_event(db_session)

    delivery = await AnnouncementService(db_session, dispatcher).announce("event", event)

    assert delivery.status == "sent"
    assert delivery.summary.model_dump() == {"total": 2, "sent": 2, "failed": 0}
    assert sorted(email_provider.recipients) == ["asha@x.com", "ben@x.com"]
    payload = email_provider.requests[0]["payload"]
    assert payload["subject"] == "New Event: Spring Showcase"
    assert "Time: 6:00 PM" in payload["html"]


@pytest.mark.asyncio
async def test_announce_skips_when_no_active_members(db_session, dispatcher, email_provider):
    _add_member(db_session, "Dev", "dev@x.com", status="inactive")
    event = _add_event(db_session)

    delivery = await AnnouncementService(db_session, dispatcher).announce("event", event)

    assert delivery.status == "skipped"
    assert email_provider.requests == []


@pytest.mark.asyncio
async def test_announce_failure_keeps_the_record(db_session, unconfigured_dispatcher, email_provider):
    _add_member(db_session, "Asha", "asha@x.com")
    meeting = RecordStore(db_session, Meeting).insert(
        {"title": "Budget review", "date": datetime(2025, 4, 2)}
    )

    delivery = await AnnouncementService(db_session, unconfigured_dispatcher).announce("meeting", meeting)

    assert delivery.status == "failed"
    assert delivery.error == "Email service not configured"
    assert email_provider.requests == []
    assert [m.title for m in RecordStore(db_session, Meeting).list()] == ["Budget review"]


@pytest.mark.asyncio
async def test_announce_reports_partial_delivery(db_session, dispatcher, email_provider):
    _add_member(db_session, "Asha", "asha@x.com")
    _add_member(db_session, "Ben", "ben@x.com")
    email_provider.reject("ben@x.com")
    event = _add_event(db_session)

    delivery = await AnnouncementService(db_session, dispatcher).announce("event", event)

    assert delivery.status == "sent"
    assert delivery.summary.model_dump() == {"total": 2, "sent": 1, "failed": 1}


@pytest.mark.asyncio
async def test_announce_records_one_notification_whatever_the_outcome(
    db_session, dispatcher, unconfigured_dispatcher
):
    event = _add_event(db_session)
    await AnnouncementService(db_session, dispatcher).announce("event", event)

    _add_member(db_session, "Asha", "asha@x.com")
    other = _add_event(db_session, title="Photo walk")
    await AnnouncementService(db_session, unconfigured_dispatcher).announce("event", other)

    notifications = RecordStore(db_session, Notification).list(order_by="created_at")
    assert [n.title for n in notifications] == ["New Event: Spring Showcase", "New Event: Photo walk"]
    assert all(n.type == "event" and not n.is_read for n in notifications)
    assert notifications[0].message.startswith("A new event has been scheduled!")


@pytest.mark.asyncio
async def test_announce_reports_failure_when_roster_cannot_be_read(
    db_session, dispatcher, email_provider, monkeypatch: pytest.MonkeyPatch
):
    event = _add_event(db_session)

    def broken_roster(self):
        raise OperationalError("SELECT members", {}, Exception("database is locked"))

    monkeypatch.setattr(AnnouncementService, "active_member_emails", broken_roster)

    delivery = await AnnouncementService(db_session, dispatcher).announce("event", event)

    assert delivery.status == "failed"
    assert "database is locked" in delivery.error
    assert email_provider.requests == []
    assert [e.title for e in RecordStore(db_session, Event).list()] == ["Spring Showcase"]
