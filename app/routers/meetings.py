"""Meeting API endpoints."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_dispatcher, require_admin
from app.models.database_models import Meeting
from app.models.schemas import AnnouncementResponse, MeetingCreate, MeetingCreatedResponse
from app.services.announcements import AnnouncementService, describe_outcome
from app.services.formatting import combine_date_time, matches_search
from app.services.notification_service import NotificationDispatcher
from app.services.record_store import RecordStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/meetings", tags=["meetings"])


@router.get("", response_model=list[AnnouncementResponse])
async def list_meetings(
    db: Annotated[Session, Depends(get_db)],
    search: str | None = None,
):
    meetings = RecordStore(db, Meeting).list(order_by="date")
    return [m for m in meetings if matches_search(search, m.title, m.description, m.location)]


@router.post(
    "",
    response_model=MeetingCreatedResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_meeting(
    meeting: MeetingCreate,
    db: Annotated[Session, Depends(get_db)],
    dispatcher: Annotated[NotificationDispatcher, Depends(get_dispatcher)],
):
    """Create a meeting and email active members; email failures never undo the meeting."""
    record = RecordStore(db, Meeting).insert(
        {
            "title": meeting.title,
            "date": combine_date_time(meeting.date, meeting.time),
            "time": meeting.time,
            "location": meeting.location,
            "description": meeting.description,
        }
    )

    saved = AnnouncementResponse.model_validate(record)
    delivery = await AnnouncementService(db, dispatcher).announce("meeting", record)
    logger.info("Created meeting id=%s | notification=%s", saved.id, delivery.status)

    return MeetingCreatedResponse(
        meeting=saved,
        notification=delivery,
        message=describe_outcome("meeting", delivery),
    )


@router.delete("/{meeting_id}", dependencies=[Depends(require_admin)])
async def delete_meeting(
    meeting_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> dict:
    RecordStore(db, Meeting).delete(meeting_id)
    return {"message": f"Meeting {meeting_id} deleted successfully"}
