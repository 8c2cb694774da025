"""Generic table access shared by the section routers."""
from __future__ import annotations

import logging
from typing import Any, Generic, Iterable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import Base
from app.services.errors import DuplicateRecordError, RecordNotFoundError, RecordStoreError


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# PostgreSQL unique_violation
_UNIQUE_VIOLATION_CODE = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "pgcode", None) == _UNIQUE_VIOLATION_CODE:
        return True
    text = str(orig).lower()
    return "unique constraint" in text or "duplicate key" in text


class RecordStore(Generic[ModelT]):
    """Select, insert, update and delete rows of a single table.

    Every mutating call commits on success and rolls back on failure, so a
    caller never sees a half-applied write.
    """

    def __init__(self, db: Session, model: type[ModelT]) -> None:
        self.db = db
        self.model = model

    @property
    def table(self) -> str:
        return self.model.__tablename__

    def list(
        self,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[ModelT]:
        """Return rows matching equality ``filters`` sorted by ``order_by``."""

        query = self.db.query(self.model)
        for column, value in (filters or {}).items():
            query = query.filter(getattr(self.model, column) == value)
        if order_by:
            column = getattr(self.model, order_by)
            query = query.order_by(column.desc() if descending else column.asc())
        return query.all()

    def get(self, record_id: int) -> ModelT:
        record = self.db.get(self.model, record_id)
        if record is None:
            raise RecordNotFoundError(self.table, record_id)
        return record

    def insert(self, values: dict[str, Any]) -> ModelT:
        """Insert one row and return it with generated fields populated."""

        record = self.model(**values)
        self.db.add(record)
        self._commit("insert")
        self.db.refresh(record)
        logger.info("Inserted %s row id=%s", self.table, record.id)
        return record

    def update(self, record_id: int, values: dict[str, Any]) -> ModelT:
        record = self.get(record_id)
        for column, value in values.items():
            setattr(record, column, value)
        self._commit("update")
        self.db.refresh(record)
        return record

    def update_many(self, record_ids: Iterable[int], values: dict[str, Any]) -> int:
        """Apply ``values`` to every row in ``record_ids``; returns the row count."""

        ids = list(record_ids)
        if not ids:
            return 0
        count = (
            self.db.query(self.model)
            .filter(self.model.id.in_(ids))
            .update(values, synchronize_session=False)
        )
        self._commit("update")
        return count

    def delete(self, record_id: int) -> None:
        record = self.get(record_id)
        self.db.delete(record)
        self._commit("delete")
        logger.info("Deleted %s row id=%s", self.table, record_id)

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if _is_unique_violation(exc):
                logger.warning("Duplicate %s on %s: %s", operation, self.table, exc.orig)
                raise DuplicateRecordError(
                    f"Duplicate {self.table} record",
                    table=self.table,
                    details=str(exc.orig),
                ) from exc
            logger.exception("Integrity error during %s on %s", operation, self.table)
            raise RecordStoreError(
                f"Failed to {operation} {self.table} record",
                table=self.table,
                details=str(exc.orig),
            ) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Database error during %s on %s", operation, self.table)
            raise RecordStoreError(
                f"Failed to {operation} {self.table} record",
                table=self.table,
                details=str(exc),
            ) from exc
