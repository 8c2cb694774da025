"""Gallery API endpoints."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.models.database_models import GalleryItem
from app.models.schemas import GalleryItemCreate, GalleryItemResponse
from app.services.announcements import record_notification
from app.services.formatting import matches_search
from app.services.record_store import RecordStore


router = APIRouter(prefix="/api/gallery", tags=["gallery"])


@router.get("", response_model=list[GalleryItemResponse])
async def list_gallery(
    db: Annotated[Session, Depends(get_db)],
    search: str | None = None,
):
    items = RecordStore(db, GalleryItem).list(order_by="created_at", descending=True)
    return [i for i in items if matches_search(search, i.title, i.image_url)]


@router.post(
    "",
    response_model=GalleryItemResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def add_gallery_item(
    item: GalleryItemCreate,
    db: Annotated[Session, Depends(get_db)],
):
    record = RecordStore(db, GalleryItem).insert(item.model_dump())
    record_notification(
        db,
        "gallery",
        f"New Photo: {record.title or 'Untitled'}",
        "A new image has been added to the gallery.",
    )
    return record


@router.delete("/{item_id}", dependencies=[Depends(require_admin)])
async def delete_gallery_item(
    item_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> dict:
    RecordStore(db, GalleryItem).delete(item_id)
    return {"message": f"Gallery item {item_id} deleted successfully"}
