from datetime import date
from typing import Literal, Self

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Leave Rollover"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    database_url: str = "postgresql+asyncpg://leave_rollover:leave_rollover@db:5432/leave_rollover"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]
    log_level: str = "INFO"

    # Yearly rollover trigger, in UTC.
    year_end_notifications_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("year_end_notifications_enabled", "enable_year_end_notifications"),
    )
    year_end_reset_month: int = Field(default=12, ge=1, le=12)
    year_end_reset_day: int = Field(default=31, ge=1, le=31)
    year_end_reset_hour: int = Field(default=23, ge=0, le=23)
    year_end_reset_minute: int = Field(default=30, ge=0, le=59)

    @model_validator(mode="after")
    def _validate_reset_date(self) -> Self:
        try:
            # Checked against a non-leap year, so Feb 29 is rejected.
            date(2001, self.year_end_reset_month, self.year_end_reset_day)
        except ValueError:
            msg = "year_end_reset_month/year_end_reset_day is not a valid calendar date"
            raise ValueError(msg) from None
        return self


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
