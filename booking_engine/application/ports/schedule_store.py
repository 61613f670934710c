from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime

from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.working_hours import WorkingHours


class ScheduleStorePort(ABC):
    """Durable record of working hours and bookings. No business rules live here."""

    @abstractmethod
    def has_provider(self, provider_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_working_hours(self, provider_id: str) -> list[WorkingHours]:
        """All weekday entries of a provider, ordered by weekday."""
        raise NotImplementedError

    @abstractmethod
    def get_working_hours_for(self, provider_id: str, weekday: int) -> WorkingHours | None:
        raise NotImplementedError

    @abstractmethod
    def set_working_hours(self, provider_id: str, entries: list[WorkingHours]) -> None:
        """Replace the weekly schedule of a provider."""
        raise NotImplementedError

    @abstractmethod
    def lock_schedule(self, provider_id: str, day: date, timeout: float | None = None) -> AbstractContextManager[bool]:
        """
        Exclusive access scoped to (provider_id, day).
        Yields True when acquired, False if the timeout elapsed first.
        """
        raise NotImplementedError

    @abstractmethod
    def list_bookings(self, provider_id: str, day: date, include_cancelled: bool = False) -> list[Booking]:
        """Bookings for (provider_id, day) ordered by start time. Active ones only by default."""
        raise NotImplementedError

    def list_active_bookings(self, provider_id: str, day: date) -> list[Booking]:
        return self.list_bookings(provider_id, day, include_cancelled=False)

    @abstractmethod
    def insert_booking(self, booking: Booking) -> None:
        """Persist a new booking. Callers hold lock_schedule for its key."""
        raise NotImplementedError

    @abstractmethod
    def get_booking(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def update_status(
        self,
        booking_id: str,
        expected: BookingStatus,
        status: BookingStatus,
        at: datetime,
        actor_ref: str | None = None,
    ) -> Booking | None:
        """
        Atomically move a booking from `expected` to `status`.
        Returns the updated booking, or None if the booking is missing or no longer in `expected`.
        """
        raise NotImplementedError
