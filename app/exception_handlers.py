"""Translate service errors into JSON responses."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.services.errors import DuplicateRecordError, RecordNotFoundError, RecordStoreError


logger = logging.getLogger(__name__)


async def record_not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def duplicate_record_handler(request: Request, exc: DuplicateRecordError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def record_store_error_handler(request: Request, exc: RecordStoreError) -> JSONResponse:
    logger.error("Record store failure in %s %s: %s", request.method, request.url.path, exc.details)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception in %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_type": type(exc).__name__},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the JSON error handlers on ``app``."""

    app.add_exception_handler(RecordNotFoundError, record_not_found_handler)
    app.add_exception_handler(DuplicateRecordError, duplicate_record_handler)
    app.add_exception_handler(RecordStoreError, record_store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
