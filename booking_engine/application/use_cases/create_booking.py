from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time
from typing import Callable
from zoneinfo import ZoneInfo

from booking_engine.application.exceptions import (
    OutOfWorkingHours,
    OutsideBookingHorizon,
    ProviderNotFound,
    ProviderNotWorking,
    ScheduleBusy,
    SlotConflict,
)
from booking_engine.application.ports.event_publisher import BookingEventPublisherPort
from booking_engine.application.ports.schedule_store import ScheduleStorePort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.application.use_cases.availability import resolve_service
from booking_engine.application.utils.booking_window import business_now, check_horizon, earliest_start
from booking_engine.application.utils.event_dispatch import publish_after_commit
from booking_engine.application.utils.time_ranges import add_minutes, intervals_overlap, to_minutes
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.booking_event import BOOKING_CREATED, BookingEvent


class CreateBookingUseCase:
    """
    Check-then-create under mutual exclusion scoped to (provider_id, date).

    Validation runs before the lock. Inside the critical section the active
    bookings are re-read and the new interval is checked against them, so of
    several concurrent requests for overlapping intervals exactly one is
    inserted and the others get SlotConflict. Logging and event delivery
    happen after the lock is released.
    """

    def __init__(
        self,
        store: ScheduleStorePort,
        catalog: ServiceCatalogPort,
        timezone: ZoneInfo,
        publisher: BookingEventPublisherPort | None = None,
        initial_status: BookingStatus = BookingStatus.confirmed,
        horizon_days: int = 90,
        lock_timeout_seconds: float | None = 5.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if initial_status == BookingStatus.cancelled:
            raise ValueError("bookings cannot be created cancelled")
        self._store = store
        self._catalog = catalog
        self._timezone = timezone
        self._publisher = publisher
        self._initial_status = initial_status
        self._horizon_days = horizon_days
        self._lock_timeout_seconds = lock_timeout_seconds
        self._clock = clock or (lambda: business_now(self._timezone))
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        provider_id: str,
        service_id: str,
        day: date,
        start_time: time,
        customer_ref: str | None = None,
    ) -> Booking:
        booking = self._validated_booking(provider_id, service_id, day, start_time, customer_ref)

        conflicting: list[str] = []
        with self._store.lock_schedule(provider_id, day, timeout=self._lock_timeout_seconds) as acquired:
            if acquired:
                new_start, new_end = to_minutes(booking.start_time), to_minutes(booking.end_time)
                conflicting = [
                    existing.booking_id
                    for existing in self._store.list_active_bookings(provider_id, day)
                    if intervals_overlap(new_start, new_end, to_minutes(existing.start_time), to_minutes(existing.end_time))
                ]
                if not conflicting:
                    self._store.insert_booking(booking)

        context = {
            "provider_id": provider_id,
            "date": day.isoformat(),
            "start_time": start_time.strftime("%H:%M"),
        }
        if not acquired:
            self._logger.warning("Schedule busy, booking not attempted", extra=context)
            raise ScheduleBusy(f"schedule for provider {provider_id!r} on {day.isoformat()} is busy, try again")
        if conflicting:
            self._logger.info(
                "Slot conflict",
                extra={**context, "reason": "overlaps " + ",".join(conflicting)},
            )
            raise SlotConflict(
                f"{start_time.strftime('%H:%M')} on {day.isoformat()} is no longer available"
            )

        self._logger.info(
            "Booking created",
            extra={**context, "booking_id": booking.booking_id, "status": booking.status.value},
        )
        publish_after_commit(
            self._publisher,
            BookingEvent(
                event_type=BOOKING_CREATED,
                booking=booking,
                occurred_at=booking.created_at,
                actor_ref=customer_ref,
            ),
            self._logger,
        )
        return booking

    def _validated_booking(
        self,
        provider_id: str,
        service_id: str,
        day: date,
        start_time: time,
        customer_ref: str | None,
    ) -> Booking:
        if start_time.tzinfo is not None:
            raise ValueError("start_time must be a local wall-clock time without a UTC offset")
        if start_time.second or start_time.microsecond:
            raise ValueError("start_time must fall on a whole minute")

        service = resolve_service(self._catalog, service_id)
        duration = service.duration_minutes
        if not self._store.has_provider(provider_id):
            raise ProviderNotFound(f"unknown provider {provider_id!r}")

        now = self._clock()
        check_horizon(day, now, self._horizon_days)

        working_hours = self._store.get_working_hours_for(provider_id, day.weekday())
        if working_hours is None or not working_hours.is_working:
            raise ProviderNotWorking(f"provider {provider_id!r} does not work on {day.strftime('%A')}")

        end_time = add_minutes(start_time, duration)
        if (
            end_time is None
            or start_time < working_hours.start_time
            or end_time > working_hours.end_time
        ):
            raise OutOfWorkingHours(
                f"{start_time.strftime('%H:%M')} + {duration} min is outside "
                f"{working_hours.start_time.strftime('%H:%M')}-{working_hours.end_time.strftime('%H:%M')}"
            )

        not_before = earliest_start(day, now)
        if not_before is not None and start_time < not_before:
            raise OutsideBookingHorizon(f"{start_time.strftime('%H:%M')} today has already passed")

        return Booking(
            booking_id=uuid.uuid4().hex,
            provider_id=provider_id,
            service_id=service.service_id,
            date=day,
            start_time=start_time,
            end_time=end_time,
            status=self._initial_status,
            created_at=now,
            customer_ref=customer_ref,
        )
