"""Router exposing basic system endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import func

from app.config import get_settings
from app.database import SessionLocal
from app.models.database_models import Member


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/status")
async def get_status() -> dict[str, str]:
    """Return a minimal status payload."""
    return {"status": "online"}


@router.get("/readiness")
async def get_readiness() -> dict:
    """
    Check the database connection and email configuration.

    Returns:
        dict: {
            "database": "ok",
            "members": int,
            "active_members": int,
            "email_configured": bool
        }
    """
    db = SessionLocal()  # Let it fail naturally - FastAPI will handle connection errors

    try:
        total = db.query(func.count(Member.id)).scalar() or 0
        active = (
            db.query(func.count(Member.id))
            .filter(Member.status == "active")
            .scalar()
            or 0
        )
        return {
            "database": "ok",
            "members": total,
            "active_members": active,
            "email_configured": get_settings().resend_api_key is not None,
        }

    except Exception:
        logger.exception("Readiness check failed")
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to check readiness")
    finally:
        db.close()
