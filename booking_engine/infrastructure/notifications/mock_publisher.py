from __future__ import annotations

import logging

from booking_engine.application.ports.event_publisher import BookingEventPublisherPort
from booking_engine.domain.entities.booking_event import BookingEvent


class MockEventPublisher(BookingEventPublisherPort):
    def __init__(self) -> None:
        self.published: list[BookingEvent] = []
        self._logger = logging.getLogger(__name__)

    def publish(self, event: BookingEvent) -> None:
        self.published.append(event)
        self._logger.info(
            "Mock booking event",
            extra={
                "event_type": event.event_type,
                "booking_id": event.booking.booking_id,
                "status": event.booking.status.value,
            },
        )
