"""Expense tracking API endpoints (admin only)."""
from __future__ import annotations

import logging
import math
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.models.database_models import Expense
from app.models.schemas import EXPENSE_CATEGORIES, ExpenseCreate, ExpenseResponse, ExpenseSummary
from app.services.announcements import record_notification
from app.services.formatting import combine_date_time, format_short_date, matches_search
from app.services.record_store import RecordStore


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/expenses",
    tags=["expenses"],
    dependencies=[Depends(require_admin)],
)


def summarize_expenses(expenses: list[Expense]) -> ExpenseSummary:
    """Total, count and average amount rounded half up."""

    total = sum(e.amount for e in expenses)
    count = len(expenses)
    average = math.floor(total / count + 0.5) if count else 0
    return ExpenseSummary(total=total, count=count, average=average)


@router.get("", response_model=list[ExpenseResponse])
async def list_expenses(
    db: Annotated[Session, Depends(get_db)],
    search: str | None = None,
    category: str | None = None,
):
    """
    List expenses, most recent first.

    Args:
        search: Case-insensitive match on item or category
        category: Exact category filter

    Returns:
        list[ExpenseResponse]: Matching expenses
    """
    if category and category not in EXPENSE_CATEGORIES:
        raise HTTPException(
            status_code=400,
            detail=f"category must be one of: {', '.join(EXPENSE_CATEGORIES)}",
        )

    filters = {"category": category} if category else None
    expenses = RecordStore(db, Expense).list(filters=filters, order_by="date", descending=True)
    return [e for e in expenses if matches_search(search, e.item, e.category)]


@router.get("/summary", response_model=ExpenseSummary)
async def expense_summary(db: Annotated[Session, Depends(get_db)]):
    return summarize_expenses(RecordStore(db, Expense).list())


@router.post("", response_model=ExpenseResponse, status_code=201)
async def add_expense(
    expense: ExpenseCreate,
    db: Annotated[Session, Depends(get_db)],
):
    record = RecordStore(db, Expense).insert(
        {
            "item": expense.item,
            "amount": expense.amount,
            "category": expense.category,
            "date": combine_date_time(expense.date, None),
        }
    )
    record_notification(
        db,
        "expense",
        f"New Expense: {record.item}",
        f"{record.item} ({record.category}) for ₹{record.amount:,.2f} on {format_short_date(record.date)}",
    )
    logger.info("Added expense id=%s | category=%s", record.id, record.category)
    return record


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> dict:
    RecordStore(db, Expense).delete(expense_id)
    return {"message": f"Expense {expense_id} deleted successfully"}
