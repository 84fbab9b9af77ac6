"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key used to verify bearer tokens", min_length=1
    )
    app_timezone: str = Field(
        default="America/Denver",
        description="IANA timezone used for naive datetimes stored in the database",
    )
    environment: str = Field(
        default="development",
        description="Deployment environment; webhook signatures are enforced in production",
    )
    cron_secret: str | None = Field(
        default=None,
        description="Bearer secret required by the notification processing trigger",
    )
    public_base_url: str | None = Field(
        default=None,
        description="Public origin used to build the carrier status callback URL",
    )
    twilio_account_sid: str | None = Field(
        default=None, description="Twilio account SID used to send SMS reminders"
    )
    twilio_auth_token: str | None = Field(
        default=None, description="Twilio auth token, also used to verify webhooks"
    )
    twilio_phone_number: str | None = Field(
        default=None, description="Sender phone number registered with Twilio"
    )
    max_pending_notifications_per_event: int = Field(
        default=5,
        description="Maximum number of pending or processing notifications per event",
        gt=0,
    )
    reminder_evening_hour: int = Field(
        default=18,
        description="Local hour used by the day-before reminder slot",
        ge=0,
        le=23,
    )

    @model_validator(mode="after")
    def _validate_twilio_credentials(self) -> "Settings":
        values = (
            self.twilio_account_sid,
            self.twilio_auth_token,
            self.twilio_phone_number,
        )
        if any(values) and not all(values):
            raise ValueError(
                "TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER "
                "must all be provided to enable SMS"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def sms_enabled(self) -> bool:
        return bool(self.twilio_account_sid)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
