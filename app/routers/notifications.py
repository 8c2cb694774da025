"""In-app notification endpoints and the email dispatch endpoint."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_dispatcher, require_admin
from app.models.database_models import Notification
from app.models.schemas import NotificationListResponse, NotificationResponse
from app.services.errors import EmailNotConfiguredError, NotificationValidationError
from app.services.notification_service import NotificationDispatcher
from app.services.record_store import RecordStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@router.get("", response_model=NotificationListResponse)
async def list_notifications(db: Annotated[Session, Depends(get_db)]):
    """List notifications newest first along with the unread count."""
    notifications = RecordStore(db, Notification).list(order_by="created_at", descending=True)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=sum(1 for n in notifications if not n.is_read),
    )


@router.post(
    "/send",
    dependencies=[Depends(require_admin)],
    responses={400: {"description": "Malformed request"}, 500: {"description": "Email service not configured"}},
)
async def send_notifications(
    request: Request,
    dispatcher: Annotated[NotificationDispatcher, Depends(get_dispatcher)],
) -> JSONResponse:
    """
    Email one message to each address in ``emails``.

    Body: ``{"emails": [...], "subject": str, "message": str, "type": str}``

    Returns 200 with per-recipient ``results`` and a ``summary`` whenever the
    request was well formed, even if some sends failed. Returns 400 for
    malformed input and 500 when the email provider is not configured; in
    both cases nothing was sent.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Rejected dispatch request with unparseable body")
        return _error(400, "Invalid request body")

    if not isinstance(payload, dict):
        return _error(400, "Invalid request body")

    try:
        result = await dispatcher.dispatch(
            payload.get("emails"),
            payload.get("subject"),
            payload.get("message"),
            payload.get("type"),
        )
    except NotificationValidationError as exc:
        logger.warning("Rejected dispatch request: %s", exc)
        return _error(400, str(exc))
    except EmailNotConfiguredError as exc:
        return _error(500, str(exc))
    except Exception:
        logger.exception("Error in send-notifications endpoint")
        return _error(500, "Internal server error")

    return JSONResponse(status_code=200, content=result.model_dump(mode="json", by_alias=True, exclude_none=True))


@router.post("/read-all", dependencies=[Depends(require_admin)])
async def mark_all_read(db: Annotated[Session, Depends(get_db)]) -> dict:
    """Mark every unread notification as read; a no-op when none are unread."""
    store = RecordStore(db, Notification)
    unread_ids = [n.id for n in store.list(filters={"is_read": False})]
    updated = store.update_many(unread_ids, {"is_read": True})
    return {"updated": updated}


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    dependencies=[Depends(require_admin)],
)
async def mark_read(
    notification_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    return RecordStore(db, Notification).update(notification_id, {"is_read": True})


@router.delete("/{notification_id}", dependencies=[Depends(require_admin)])
async def delete_notification(
    notification_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> dict:
    RecordStore(db, Notification).delete(notification_id)
    return {"message": f"Notification {notification_id} deleted successfully"}
