from datetime import date, datetime, time

from pydantic import BaseModel, Field

from booking_engine.domain.entities.booking import Booking
from booking_engine.domain.entities.working_hours import WorkingHours


class WorkingHoursEntrySchema(BaseModel):
    weekday: int = Field(ge=0, le=6, description="0 = Monday")
    start_time: time | None = None
    end_time: time | None = None
    is_working: bool = True

    def to_entity(self) -> WorkingHours:
        return WorkingHours(
            weekday=self.weekday,
            start_time=self.start_time,
            end_time=self.end_time,
            is_working=self.is_working,
        )

    @classmethod
    def from_entity(cls, entry: WorkingHours) -> "WorkingHoursEntrySchema":
        return cls(
            weekday=entry.weekday,
            start_time=entry.start_time,
            end_time=entry.end_time,
            is_working=entry.is_working,
        )


class WorkingHoursRequestSchema(BaseModel):
    entries: list[WorkingHoursEntrySchema] = Field(min_length=1)


class WorkingHoursResponseSchema(BaseModel):
    provider_id: str
    entries: list[WorkingHoursEntrySchema]


class AvailabilityResponseSchema(BaseModel):
    provider_id: str
    service_id: str
    date: date
    granularity_minutes: int
    slots: list[str]


class CreateBookingRequestSchema(BaseModel):
    provider_id: str = Field(min_length=1)
    service_id: str = Field(min_length=1)
    date: date
    start_time: time
    customer_ref: str | None = None


class BookingActionRequestSchema(BaseModel):
    actor_ref: str | None = None


class BookingSchema(BaseModel):
    booking_id: str
    provider_id: str
    service_id: str
    customer_ref: str | None = None
    date: date
    start_time: str
    end_time: str
    status: str
    created_at: datetime
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingSchema":
        return cls(
            booking_id=booking.booking_id,
            provider_id=booking.provider_id,
            service_id=booking.service_id,
            customer_ref=booking.customer_ref,
            date=booking.date,
            start_time=booking.start_time.strftime("%H:%M"),
            end_time=booking.end_time.strftime("%H:%M"),
            status=booking.status.value,
            created_at=booking.created_at,
            confirmed_at=booking.confirmed_at,
            cancelled_at=booking.cancelled_at,
            cancelled_by=booking.cancelled_by,
        )


class BookingListResponseSchema(BaseModel):
    provider_id: str
    date: date
    bookings: list[BookingSchema]
