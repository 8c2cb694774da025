"""Application configuration management."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised application settings derived from environment variables."""

    database_url: str = Field(
        default="sqlite:///./data/club_portal.db",
        description="SQLAlchemy-compatible database URL.",
    )
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000, ge=1, le=65535)

    debug: bool = Field(default=False)

    # Shared admin password. This is a convenience gate for the admin screens,
    # not an authentication system.
    admin_password: str = Field(default="08092005")

    resend_api_key: str | None = Field(
        default=None,
        description="Resend API key. Email dispatch is refused when unset.",
    )
    resend_api_url: str = Field(default="https://api.resend.com/emails")
    email_sender: str = Field(default="Fashion Walk Club <noreply@resend.dev>")
    club_name: str = Field(default="Fashion Walk Club")
    email_timeout_seconds: float = Field(default=15.0, ge=10, le=30)

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("admin_password")
    @classmethod
    def validate_admin_password(cls, value: str) -> str:
        """Reject an empty admin password, which would unlock the admin area for anyone."""

        if not value.strip():
            raise ValueError("ADMIN_PASSWORD must not be empty.")
        return value

    @field_validator("resend_api_key")
    @classmethod
    def blank_key_is_missing(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the app."""

    settings = Settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings
