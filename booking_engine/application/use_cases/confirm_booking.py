from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from booking_engine.application.exceptions import AlreadyCancelled, BookingNotFound, BookingNotPending
from booking_engine.application.ports.event_publisher import BookingEventPublisherPort
from booking_engine.application.ports.schedule_store import ScheduleStorePort
from booking_engine.application.utils.booking_window import business_now
from booking_engine.application.utils.event_dispatch import publish_after_commit
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.booking_event import BOOKING_CONFIRMED, BookingEvent


class ConfirmBookingUseCase:
    """pending -> confirmed, driven by an external approval or payment step."""

    def __init__(
        self,
        store: ScheduleStorePort,
        timezone: ZoneInfo,
        publisher: BookingEventPublisherPort | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._timezone = timezone
        self._publisher = publisher
        self._clock = clock or (lambda: business_now(self._timezone))
        self._logger = logging.getLogger(__name__)

    def execute(self, booking_id: str, actor_ref: str | None = None) -> Booking:
        now = self._clock()
        updated = self._store.update_status(
            booking_id,
            expected=BookingStatus.pending,
            status=BookingStatus.confirmed,
            at=now,
            actor_ref=actor_ref,
        )
        if updated is None:
            current = self._store.get_booking(booking_id)
            if current is None:
                raise BookingNotFound(f"booking {booking_id!r} not found")
            if current.status == BookingStatus.cancelled:
                raise AlreadyCancelled(f"booking {booking_id!r} is cancelled")
            raise BookingNotPending(f"booking {booking_id!r} is {current.status.value}")

        self._logger.info("Booking confirmed", extra={"booking_id": booking_id, "status": updated.status.value})
        publish_after_commit(
            self._publisher,
            BookingEvent(event_type=BOOKING_CONFIRMED, booking=updated, occurred_at=now, actor_ref=actor_ref),
            self._logger,
        )
        return updated
