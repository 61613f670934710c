from __future__ import annotations

from booking_engine.application.ports.event_publisher import BookingEventPublisherPort
from booking_engine.domain.entities.booking_event import BookingEvent
from booking_engine.infrastructure.notifications.webhook_client import WebhookClient


class WebhookEventPublisher(BookingEventPublisherPort):
    def __init__(self, client: WebhookClient) -> None:
        self._client = client

    def publish(self, event: BookingEvent) -> None:
        self._client.post_event(event.to_payload())
