from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Iterable
from zoneinfo import ZoneInfo

from booking_engine.application.exceptions import InvalidService, ProviderNotFound
from booking_engine.application.ports.schedule_store import ScheduleStorePort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.application.utils.booking_window import business_now, check_horizon, earliest_start
from booking_engine.application.utils.time_ranges import from_minutes, intervals_overlap, to_minutes
from booking_engine.domain.entities.booking import Booking
from booking_engine.domain.entities.service_catalog import ServiceCatalogEntry
from booking_engine.domain.entities.working_hours import WorkingHours


def compute_available_slots(
    working_hours: WorkingHours | None,
    active_bookings: Iterable[Booking],
    duration_minutes: int,
    granularity_minutes: int,
    not_before: time | None = None,
) -> list[time]:
    """
    Bookable start times for one provider on one day.

    Candidates start at the opening time and advance by `granularity_minutes`;
    a candidate survives when the whole service fits before closing time and
    its [start, start + duration) interval touches no active booking.
    Cancelled bookings passed in are ignored.
    """
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")
    if granularity_minutes <= 0:
        raise ValueError("granularity_minutes must be positive")
    if working_hours is None or not working_hours.is_working:
        return []

    day_start = to_minutes(working_hours.start_time)
    day_end = to_minutes(working_hours.end_time)
    busy = [
        (to_minutes(b.start_time), to_minutes(b.end_time))
        for b in active_bookings
        if b.is_active
    ]

    slots: list[time] = []
    current = day_start
    while current + duration_minutes <= day_end:
        slot_end = current + duration_minutes
        if not any(intervals_overlap(current, slot_end, b_start, b_end) for b_start, b_end in busy):
            slot = from_minutes(current)
            if not_before is None or slot >= not_before:
                slots.append(slot)
        current += granularity_minutes

    return slots


def resolve_service(catalog: ServiceCatalogPort, service_id: str) -> ServiceCatalogEntry:
    entry = catalog.get_service(service_id)
    if entry is None:
        raise InvalidService(f"unknown service {service_id!r}")
    if entry.duration_minutes <= 0:
        raise InvalidService(f"service {service_id!r} has non-positive duration {entry.duration_minutes}")
    return entry


def resolve_service_duration(catalog: ServiceCatalogPort, service_id: str) -> int:
    return resolve_service(catalog, service_id).duration_minutes


class AvailabilityUseCase:
    def __init__(
        self,
        store: ScheduleStorePort,
        catalog: ServiceCatalogPort,
        timezone: ZoneInfo,
        granularity_minutes: int = 15,
        horizon_days: int = 90,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._timezone = timezone
        self._granularity_minutes = granularity_minutes
        self._horizon_days = horizon_days
        self._clock = clock or (lambda: business_now(self._timezone))
        self._logger = logging.getLogger(__name__)

    def get_available_slots(self, provider_id: str, service_id: str, day: date) -> list[time]:
        duration = resolve_service_duration(self._catalog, service_id)
        return self.compute(provider_id, day, duration)

    def compute(self, provider_id: str, day: date, duration_minutes: int) -> list[time]:
        """Slots for an explicit duration; stateless and safe to call repeatedly."""
        if duration_minutes <= 0:
            raise InvalidService(f"non-positive duration {duration_minutes}")
        if not self._store.has_provider(provider_id):
            raise ProviderNotFound(f"unknown provider {provider_id!r}")

        now = self._clock()
        check_horizon(day, now, self._horizon_days)

        working_hours = self._store.get_working_hours_for(provider_id, day.weekday())
        if working_hours is None or not working_hours.is_working:
            self._logger.debug(
                "Provider not working",
                extra={"provider_id": provider_id, "date": day.isoformat()},
            )
            return []

        active = self._store.list_active_bookings(provider_id, day)
        return compute_available_slots(
            working_hours,
            active,
            duration_minutes,
            self._granularity_minutes,
            not_before=earliest_start(day, now),
        )
