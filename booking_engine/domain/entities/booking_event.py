from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from booking_engine.domain.entities.booking import Booking


BOOKING_CREATED = "booking.created"
BOOKING_CONFIRMED = "booking.confirmed"
BOOKING_CANCELLED = "booking.cancelled"


@dataclass(frozen=True)
class BookingEvent:
    event_type: str
    booking: Booking
    occurred_at: datetime
    actor_ref: str | None = None

    def to_payload(self) -> dict[str, Any]:
        booking = self.booking
        return {
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "actor_ref": self.actor_ref,
            "booking": {
                "booking_id": booking.booking_id,
                "provider_id": booking.provider_id,
                "service_id": booking.service_id,
                "customer_ref": booking.customer_ref,
                "date": booking.date.isoformat(),
                "start_time": booking.start_time.strftime("%H:%M"),
                "end_time": booking.end_time.strftime("%H:%M"),
                "status": booking.status.value,
            },
        }
