from __future__ import annotations

import logging
from datetime import date

from booking_engine.application.exceptions import BookingNotFound, ProviderNotFound
from booking_engine.application.ports.schedule_store import ScheduleStorePort
from booking_engine.domain.entities.booking import Booking
from booking_engine.domain.entities.working_hours import WorkingHours, validate_weekly_schedule


class ScheduleUseCase:
    def __init__(self, store: ScheduleStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def set_working_hours(self, provider_id: str, entries: list[WorkingHours]) -> list[WorkingHours]:
        """Replace the weekly schedule. Existing bookings are kept as they are."""
        schedule = validate_weekly_schedule(entries)
        self._store.set_working_hours(provider_id, schedule)
        self._logger.info(
            "Working hours updated",
            extra={"provider_id": provider_id, "reason": f"{len(schedule)} weekday entries"},
        )
        return schedule

    def get_working_hours(self, provider_id: str) -> list[WorkingHours]:
        if not self._store.has_provider(provider_id):
            raise ProviderNotFound(f"unknown provider {provider_id!r}")
        return self._store.get_working_hours(provider_id)

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise BookingNotFound(f"booking {booking_id!r} not found")
        return booking

    def list_bookings(self, provider_id: str, day: date, include_cancelled: bool = False) -> list[Booking]:
        if not self._store.has_provider(provider_id):
            raise ProviderNotFound(f"unknown provider {provider_id!r}")
        return self._store.list_bookings(provider_id, day, include_cancelled=include_cancelled)
