from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from enum import Enum


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"


ACTIVE_STATUSES = frozenset({BookingStatus.pending, BookingStatus.confirmed})


@dataclass(frozen=True)
class Booking:
    booking_id: str
    provider_id: str
    service_id: str
    date: date
    start_time: time
    end_time: time  # fixed at creation from the service duration of that moment
    status: BookingStatus
    created_at: datetime
    customer_ref: str | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    confirmed_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, self.start_time)

    def transitioned(self, status: BookingStatus, at: datetime, actor_ref: str | None = None) -> Booking:
        if self.status == BookingStatus.cancelled:
            raise ValueError(f"booking {self.booking_id} is cancelled and cannot change")
        if status == BookingStatus.cancelled:
            return replace(self, status=status, cancelled_at=at, cancelled_by=actor_ref)
        if status == BookingStatus.confirmed:
            return replace(self, status=status, confirmed_at=at)
        return replace(self, status=status)
