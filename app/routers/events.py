"""Event API endpoints. Creating an event emails every active member."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_dispatcher, require_admin
from app.models.database_models import Event
from app.models.schemas import AnnouncementResponse, EventCreate, EventCreatedResponse
from app.services.announcements import AnnouncementService, describe_outcome
from app.services.formatting import combine_date_time, matches_search
from app.services.notification_service import NotificationDispatcher
from app.services.record_store import RecordStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[AnnouncementResponse])
async def list_events(
    db: Annotated[Session, Depends(get_db)],
    search: str | None = None,
):
    """List events in date order, optionally filtered by title, description or location."""
    events = RecordStore(db, Event).list(order_by="date")
    return [e for e in events if matches_search(search, e.title, e.description, e.location)]


@router.post(
    "",
    response_model=EventCreatedResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_event(
    event: EventCreate,
    db: Annotated[Session, Depends(get_db)],
    dispatcher: Annotated[NotificationDispatcher, Depends(get_dispatcher)],
):
    """
    Create an event, then notify active members.

    The event is committed before any email is attempted and stays saved
    even when every notification fails.

    Returns:
        EventCreatedResponse: the saved event, the notification outcome and a user message
    """
    record = RecordStore(db, Event).insert(
        {
            "title": event.title,
            "date": combine_date_time(event.date, event.time),
            "time": event.time,
            "location": event.location,
            "description": event.description,
        }
    )

    saved = AnnouncementResponse.model_validate(record)
    delivery = await AnnouncementService(db, dispatcher).announce("event", record)
    logger.info("Created event id=%s | notification=%s", saved.id, delivery.status)

    return EventCreatedResponse(
        event=saved,
        notification=delivery,
        message=describe_outcome("event", delivery),
    )


@router.delete("/{event_id}", dependencies=[Depends(require_admin)])
async def delete_event(
    event_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> dict:
    RecordStore(db, Event).delete(event_id)
    return {"message": f"Event {event_id} deleted successfully"}
