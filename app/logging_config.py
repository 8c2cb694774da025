"""Central logging configuration for the club portal.

Everything goes to the console and ``club_portal.log``. Email fan-out
records are also written to ``email_dispatch.log`` so a failed batch can be
traced per recipient without wading through request logs.
"""
from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path

from pydantic import ValidationError

from app.config import get_settings

_configured = False

DISPATCH_LOGGERS = (
    "app.services.notification_service",
    "app.services.announcements",
)


def build_logging_config(log_dir: Path, level: str) -> dict:
    """Return the ``dictConfig`` mapping for ``log_dir`` at ``level``."""

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    loggers: dict[str, dict] = {
        # httpx logs every provider request at INFO.
        "httpx": {"level": "WARNING"},
        "uvicorn.access": {"level": "WARNING"},
    }
    for name in DISPATCH_LOGGERS:
        loggers[name] = {"handlers": ["dispatch"], "level": level}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": fmt},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
            "file": {
                "class": "logging.FileHandler",
                "filename": str(log_dir / "club_portal.log"),
                "encoding": "utf-8",
                "formatter": "standard",
                "level": level,
            },
            "dispatch": {
                "class": "logging.FileHandler",
                "filename": str(log_dir / "email_dispatch.log"),
                "encoding": "utf-8",
                "formatter": "standard",
                "level": level,
            },
        },
        "loggers": loggers,
        "root": {
            "level": level,
            "handlers": ["console", "file"],
        },
    }


def configure_logging() -> None:
    """Configure application logging once per process."""

    global _configured
    if _configured:
        return

    try:
        settings = get_settings()
        log_dir, level = settings.log_dir, settings.log_level
    except ValidationError:
        # A bad LOG_LEVEL or ADMIN_PASSWORD is reported by the app itself.
        log_dir, level = Path("logs"), "INFO"
    log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(build_logging_config(log_dir, level))
    _configured = True
