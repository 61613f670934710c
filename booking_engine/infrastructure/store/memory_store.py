from __future__ import annotations

import threading
from contextlib import AbstractContextManager
from datetime import date, datetime

from booking_engine.application.ports.schedule_store import ScheduleStorePort
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.working_hours import WorkingHours
from booking_engine.infrastructure.store.key_locks import KeyedLocks


class MemoryScheduleStore(ScheduleStorePort):
    def __init__(self) -> None:
        self._working_hours: dict[str, dict[int, WorkingHours]] = {}
        self._bookings: dict[str, Booking] = {}
        self._by_day: dict[tuple[str, date], list[str]] = {}
        # Short-lived, guards the dicts above; never held while waiting on a schedule lock.
        self._data_lock = threading.RLock()
        self._schedule_locks = KeyedLocks()

    def has_provider(self, provider_id: str) -> bool:
        with self._data_lock:
            return provider_id in self._working_hours

    def get_working_hours(self, provider_id: str) -> list[WorkingHours]:
        with self._data_lock:
            entries = self._working_hours.get(provider_id, {})
            return [entries[day] for day in sorted(entries)]

    def get_working_hours_for(self, provider_id: str, weekday: int) -> WorkingHours | None:
        with self._data_lock:
            return self._working_hours.get(provider_id, {}).get(weekday)

    def set_working_hours(self, provider_id: str, entries: list[WorkingHours]) -> None:
        with self._data_lock:
            self._working_hours[provider_id] = {entry.weekday: entry for entry in entries}

    def lock_schedule(self, provider_id: str, day: date, timeout: float | None = None) -> AbstractContextManager[bool]:
        return self._schedule_locks.hold((provider_id, day), timeout=timeout)

    def list_bookings(self, provider_id: str, day: date, include_cancelled: bool = False) -> list[Booking]:
        with self._data_lock:
            bookings = [self._bookings[booking_id] for booking_id in self._by_day.get((provider_id, day), [])]
        if not include_cancelled:
            bookings = [b for b in bookings if b.is_active]
        return sorted(bookings, key=lambda b: (b.start_time, b.created_at))

    def insert_booking(self, booking: Booking) -> None:
        with self._data_lock:
            if booking.booking_id in self._bookings:
                raise ValueError(f"booking {booking.booking_id!r} already exists")
            self._bookings[booking.booking_id] = booking
            self._by_day.setdefault((booking.provider_id, booking.date), []).append(booking.booking_id)

    def get_booking(self, booking_id: str) -> Booking | None:
        with self._data_lock:
            return self._bookings.get(booking_id)

    def update_status(
        self,
        booking_id: str,
        expected: BookingStatus,
        status: BookingStatus,
        at: datetime,
        actor_ref: str | None = None,
    ) -> Booking | None:
        with self._data_lock:
            current = self._bookings.get(booking_id)
            if current is None or current.status != expected:
                return None
            updated = current.transitioned(status, at, actor_ref)
            self._bookings[booking_id] = updated
            return updated
