from functools import lru_cache
import logging

from booking_engine.application.ports.event_publisher import BookingEventPublisherPort
from booking_engine.application.ports.schedule_store import ScheduleStorePort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.application.use_cases.availability import AvailabilityUseCase
from booking_engine.application.use_cases.cancel_booking import CancelBookingUseCase
from booking_engine.application.use_cases.confirm_booking import ConfirmBookingUseCase
from booking_engine.application.use_cases.create_booking import CreateBookingUseCase
from booking_engine.application.use_cases.schedule import ScheduleUseCase
from booking_engine.application.utils.booking_window import safe_timezone
from booking_engine.application.utils.cancellation_rules import build_cancellation_rules
from booking_engine.core.config import settings
from booking_engine.domain.entities.booking import BookingStatus
from booking_engine.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from booking_engine.infrastructure.notifications.mock_publisher import MockEventPublisher
from booking_engine.infrastructure.notifications.webhook_client import WebhookClient
from booking_engine.infrastructure.notifications.webhook_publisher import WebhookEventPublisher
from booking_engine.infrastructure.store.json_store import JsonScheduleStore
from booking_engine.infrastructure.store.memory_store import MemoryScheduleStore


_schedule_store: ScheduleStorePort | None = None


def get_schedule_store() -> ScheduleStorePort:
    global _schedule_store
    if _schedule_store is None:
        if settings.STORE_PROVIDER.lower() == "json":
            _schedule_store = JsonScheduleStore(data_dir=settings.STORE_DATA_DIR)
        else:
            _schedule_store = MemoryScheduleStore()
    return _schedule_store


def reset_schedule_store(store: ScheduleStorePort | None = None) -> None:
    global _schedule_store
    _schedule_store = store


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


@lru_cache
def get_event_publisher() -> BookingEventPublisherPort:
    logger = logging.getLogger(__name__)
    if not settings.NOTIFY_WEBHOOK_URL:
        if settings.ENV.lower() not in {"dev", "local"}:
            logger.warning("NOTIFY_WEBHOOK_URL not set; booking events are only logged")
        return MockEventPublisher()

    logger.info("Using webhook event publisher", extra={"reason": settings.NOTIFY_WEBHOOK_URL})
    client = WebhookClient(endpoint=settings.NOTIFY_WEBHOOK_URL, secret=settings.NOTIFY_WEBHOOK_SECRET)
    return WebhookEventPublisher(client=client)


def get_availability_use_case() -> AvailabilityUseCase:
    return AvailabilityUseCase(
        store=get_schedule_store(),
        catalog=get_service_catalog(),
        timezone=safe_timezone(settings.BUSINESS_TIMEZONE),
        granularity_minutes=settings.SLOT_GRANULARITY_MINUTES,
        horizon_days=settings.BOOKING_HORIZON_DAYS,
    )


def get_create_booking_use_case() -> CreateBookingUseCase:
    return CreateBookingUseCase(
        store=get_schedule_store(),
        catalog=get_service_catalog(),
        timezone=safe_timezone(settings.BUSINESS_TIMEZONE),
        publisher=get_event_publisher(),
        initial_status=BookingStatus(settings.INITIAL_BOOKING_STATUS),
        horizon_days=settings.BOOKING_HORIZON_DAYS,
        lock_timeout_seconds=settings.SCHEDULE_LOCK_TIMEOUT_SECONDS,
    )


def get_confirm_booking_use_case() -> ConfirmBookingUseCase:
    return ConfirmBookingUseCase(
        store=get_schedule_store(),
        timezone=safe_timezone(settings.BUSINESS_TIMEZONE),
        publisher=get_event_publisher(),
    )


def get_cancel_booking_use_case() -> CancelBookingUseCase:
    return CancelBookingUseCase(
        store=get_schedule_store(),
        timezone=safe_timezone(settings.BUSINESS_TIMEZONE),
        publisher=get_event_publisher(),
        rules=build_cancellation_rules(settings.CANCELLATION_MIN_NOTICE_MINUTES),
    )


def get_schedule_use_case() -> ScheduleUseCase:
    return ScheduleUseCase(store=get_schedule_store())
