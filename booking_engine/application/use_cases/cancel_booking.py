from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable
from zoneinfo import ZoneInfo

from booking_engine.application.exceptions import AlreadyCancelled, BookingNotFound, NotCancellable
from booking_engine.application.ports.event_publisher import BookingEventPublisherPort
from booking_engine.application.ports.schedule_store import ScheduleStorePort
from booking_engine.application.utils.booking_window import business_now
from booking_engine.application.utils.cancellation_rules import CancellationRule
from booking_engine.application.utils.event_dispatch import publish_after_commit
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.booking_event import BOOKING_CANCELLED, BookingEvent

# A concurrent pending -> confirmed transition can move the status under us.
_MAX_ATTEMPTS = 3


class CancelBookingUseCase:
    def __init__(
        self,
        store: ScheduleStorePort,
        timezone: ZoneInfo,
        publisher: BookingEventPublisherPort | None = None,
        rules: Iterable[CancellationRule] = (),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._timezone = timezone
        self._publisher = publisher
        self._rules = list(rules)
        self._clock = clock or (lambda: business_now(self._timezone))
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        booking_id: str,
        actor_ref: str | None = None,
        extra_rules: Iterable[CancellationRule] = (),
    ) -> Booking:
        """
        Cancel a booking. No schedule lock is taken: the store flips the
        status in one atomic update, and availability is derived from status,
        so the slot frees up on the very next computation.
        """
        rules = [*self._rules, *extra_rules]
        now = self._clock()

        for _ in range(_MAX_ATTEMPTS):
            booking = self._store.get_booking(booking_id)
            if booking is None:
                raise BookingNotFound(f"booking {booking_id!r} not found")
            if booking.status == BookingStatus.cancelled:
                raise AlreadyCancelled(f"booking {booking_id!r} is already cancelled")

            for rule in rules:
                reason = rule(booking, now)
                if reason:
                    self._logger.info(
                        "Cancellation rejected",
                        extra={"booking_id": booking_id, "reason": reason},
                    )
                    raise NotCancellable(reason)

            updated = self._store.update_status(
                booking_id,
                expected=booking.status,
                status=BookingStatus.cancelled,
                at=now,
                actor_ref=actor_ref,
            )
            if updated is not None:
                break
        else:
            raise AlreadyCancelled(f"booking {booking_id!r} changed concurrently, re-read it")

        self._logger.info(
            "Booking cancelled",
            extra={
                "booking_id": booking_id,
                "provider_id": updated.provider_id,
                "date": updated.date.isoformat(),
                "start_time": updated.start_time.strftime("%H:%M"),
            },
        )
        publish_after_commit(
            self._publisher,
            BookingEvent(event_type=BOOKING_CANCELLED, booking=updated, occurred_at=now, actor_ref=actor_ref),
            self._logger,
        )
        return updated
