import logging

from fastapi import FastAPI

from booking_engine.api.v1.schedule import router as schedule_router
from booking_engine.core.config import settings

CONTEXT_KEYS = ("provider_id", "booking_id", "date", "start_time", "status", "event_type", "reason")


class ContextFormatter(logging.Formatter):
    """Append booking context passed through `extra=` as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{base} | {' '.join(extras)}" if extras else base


def _level(name: str, default: int) -> int:
    return getattr(logging, name.upper(), default)


def configure_logging(level: str, library_level: str = "WARNING") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(_level(library_level, logging.WARNING))
    root.handlers.clear()
    root.addHandler(handler)

    # Booking outcomes are logged at INFO; third-party loggers follow the root level.
    logging.getLogger("booking_engine").setLevel(_level(level, logging.INFO))


configure_logging(settings.LOG_LEVEL, settings.LIBRARY_LOG_LEVEL)

app = FastAPI(title="Provider Availability & Booking Engine", version="1.0.0")

app.include_router(schedule_router, prefix="/api/v1", tags=["scheduling"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
