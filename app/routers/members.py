"""Member management API endpoints (admin only)."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.models.database_models import Member
from app.models.schemas import MemberCreate, MemberResponse
from app.services.errors import DuplicateRecordError
from app.services.formatting import matches_search
from app.services.record_store import RecordStore


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/members",
    tags=["members"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=list[MemberResponse])
async def list_members(
    db: Annotated[Session, Depends(get_db)],
    search: str | None = None,
    status: str | None = None,
):
    """
    List members, newest first.

    Args:
        search: Case-insensitive match on name, email, role, phone, year or department
        status: Optional exact status filter (e.g. "active")

    Returns:
        list[MemberResponse]: Matching members
    """
    filters = {"status": status} if status else None
    members = RecordStore(db, Member).list(filters=filters, order_by="created_at", descending=True)
    return [
        m for m in members
        if matches_search(
            search,
            m.name,
            m.email,
            m.role,
            m.phone_number,
            m.academic_year,
            m.department,
        )
    ]


@router.post("", response_model=MemberResponse, status_code=201)
async def add_member(
    member: MemberCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Add a member.

    Raises:
        HTTPException: 409 if a member with the same email already exists
    """
    try:
        record = RecordStore(db, Member).insert(member.model_dump())
    except DuplicateRecordError:
        logger.info("Rejected duplicate member email: %s", member.email)
        raise HTTPException(status_code=409, detail="A member with this email already exists.")

    logger.info("Added member: id=%s", record.id)
    return record


@router.delete("/{member_id}")
async def delete_member(
    member_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> dict:
    RecordStore(db, Member).delete(member_id)
    return {"message": f"Member {member_id} deleted successfully"}
