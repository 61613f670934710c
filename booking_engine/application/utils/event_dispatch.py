from __future__ import annotations

import logging

from booking_engine.application.ports.event_publisher import BookingEventPublisherPort
from booking_engine.domain.entities.booking_event import BookingEvent


def publish_after_commit(
    publisher: BookingEventPublisherPort | None,
    event: BookingEvent,
    logger: logging.Logger,
) -> bool:
    """
    Hand a committed booking change to the notification/payment collaborators.
    Delivery failures are logged and never undo the booking change.
    """
    if publisher is None:
        return False
    try:
        publisher.publish(event)
        return True
    except Exception as e:
        logger.exception(
            "Booking event delivery failed",
            extra={
                "event_type": event.event_type,
                "booking_id": event.booking.booking_id,
                "reason": str(e),
            },
        )
        return False
