from abc import ABC, abstractmethod

from booking_engine.domain.entities.booking_event import BookingEvent


class BookingEventPublisherPort(ABC):
    @abstractmethod
    def publish(self, event: BookingEvent) -> None:
        raise NotImplementedError
