from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    LIBRARY_LOG_LEVEL: str = "WARNING"
    BUSINESS_TIMEZONE: str = "America/Los_Angeles"

    SLOT_GRANULARITY_MINUTES: int = 15
    INITIAL_BOOKING_STATUS: str = "confirmed"
    BOOKING_HORIZON_DAYS: int = 90
    CANCELLATION_MIN_NOTICE_MINUTES: int | None = None
    SCHEDULE_LOCK_TIMEOUT_SECONDS: float = 5.0

    STORE_PROVIDER: str = "memory"
    STORE_DATA_DIR: str = "./data/schedules"

    NOTIFY_WEBHOOK_URL: str | None = None
    NOTIFY_WEBHOOK_SECRET: str | None = None

    @field_validator("SLOT_GRANULARITY_MINUTES", "BOOKING_HORIZON_DAYS")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("INITIAL_BOOKING_STATUS")
    @classmethod
    def _initial_status(cls, value: str) -> str:
        normalized = value.lower().strip()
        if normalized not in {"pending", "confirmed"}:
            raise ValueError("must be 'pending' or 'confirmed'")
        return normalized


settings = Settings()
