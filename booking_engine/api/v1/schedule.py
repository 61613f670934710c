from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from booking_engine.api.v1.schemas import (
    AvailabilityResponseSchema,
    BookingActionRequestSchema,
    BookingListResponseSchema,
    BookingSchema,
    CreateBookingRequestSchema,
    WorkingHoursEntrySchema,
    WorkingHoursRequestSchema,
    WorkingHoursResponseSchema,
)
from booking_engine.application.exceptions import (
    AlreadyCancelled,
    BookingNotFound,
    BookingNotPending,
    InvalidService,
    NotCancellable,
    OutOfWorkingHours,
    OutsideBookingHorizon,
    ProviderNotFound,
    ProviderNotWorking,
    ScheduleBusy,
    SchedulingError,
    SlotConflict,
)
from booking_engine.application.use_cases.availability import AvailabilityUseCase
from booking_engine.application.use_cases.cancel_booking import CancelBookingUseCase
from booking_engine.application.use_cases.confirm_booking import ConfirmBookingUseCase
from booking_engine.application.use_cases.create_booking import CreateBookingUseCase
from booking_engine.application.use_cases.schedule import ScheduleUseCase
from booking_engine.core.config import settings
from booking_engine.wiring.dependencies import (
    get_availability_use_case,
    get_cancel_booking_use_case,
    get_confirm_booking_use_case,
    get_create_booking_use_case,
    get_schedule_use_case,
)

router = APIRouter()
logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    ProviderNotFound: 404,
    BookingNotFound: 404,
    ProviderNotWorking: 422,
    OutOfWorkingHours: 422,
    OutsideBookingHorizon: 422,
    InvalidService: 422,
    NotCancellable: 422,
    SlotConflict: 409,
    AlreadyCancelled: 409,
    BookingNotPending: 409,
    ScheduleBusy: 503,
    ValueError: 400,
}


def _http_error(e: Exception) -> HTTPException:
    status_code = 500
    for cls in type(e).__mro__:
        if cls in _STATUS_BY_ERROR:
            status_code = _STATUS_BY_ERROR[cls]
            break
    headers = {"Retry-After": "1"} if isinstance(e, ScheduleBusy) else None
    return HTTPException(
        status_code=status_code,
        detail={"error": type(e).__name__, "message": str(e)},
        headers=headers,
    )


@router.put("/providers/{provider_id}/working-hours", response_model=WorkingHoursResponseSchema)
def set_working_hours(
    provider_id: str,
    req: WorkingHoursRequestSchema,
    uc: ScheduleUseCase = Depends(get_schedule_use_case),
):
    try:
        schedule = uc.set_working_hours(provider_id, [entry.to_entity() for entry in req.entries])
    except (SchedulingError, ValueError) as e:
        raise _http_error(e)
    return WorkingHoursResponseSchema(
        provider_id=provider_id,
        entries=[WorkingHoursEntrySchema.from_entity(entry) for entry in schedule],
    )


@router.get("/providers/{provider_id}/working-hours", response_model=WorkingHoursResponseSchema)
def get_working_hours(
    provider_id: str,
    uc: ScheduleUseCase = Depends(get_schedule_use_case),
):
    try:
        schedule = uc.get_working_hours(provider_id)
    except SchedulingError as e:
        raise _http_error(e)
    return WorkingHoursResponseSchema(
        provider_id=provider_id,
        entries=[WorkingHoursEntrySchema.from_entity(entry) for entry in schedule],
    )


@router.get("/providers/{provider_id}/availability", response_model=AvailabilityResponseSchema)
def get_availability(
    provider_id: str,
    service_id: str = Query(..., min_length=1),
    day: date = Query(..., alias="date"),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slots = uc.get_available_slots(provider_id, service_id, day)
    except (SchedulingError, ValueError) as e:
        raise _http_error(e)
    return AvailabilityResponseSchema(
        provider_id=provider_id,
        service_id=service_id,
        date=day,
        granularity_minutes=settings.SLOT_GRANULARITY_MINUTES,
        slots=[slot.strftime("%H:%M") for slot in slots],
    )


@router.get("/providers/{provider_id}/bookings", response_model=BookingListResponseSchema)
def list_bookings(
    provider_id: str,
    day: date = Query(..., alias="date"),
    include_cancelled: bool = False,
    uc: ScheduleUseCase = Depends(get_schedule_use_case),
):
    try:
        bookings = uc.list_bookings(provider_id, day, include_cancelled=include_cancelled)
    except SchedulingError as e:
        raise _http_error(e)
    return BookingListResponseSchema(
        provider_id=provider_id,
        date=day,
        bookings=[BookingSchema.from_entity(b) for b in bookings],
    )


@router.post("/bookings", response_model=BookingSchema, status_code=201)
def create_booking(
    req: CreateBookingRequestSchema,
    uc: CreateBookingUseCase = Depends(get_create_booking_use_case),
):
    try:
        booking = uc.execute(
            provider_id=req.provider_id,
            service_id=req.service_id,
            day=req.date,
            start_time=req.start_time,
            customer_ref=req.customer_ref,
        )
    except (SchedulingError, ValueError) as e:
        raise _http_error(e)
    return BookingSchema.from_entity(booking)


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: str,
    uc: ScheduleUseCase = Depends(get_schedule_use_case),
):
    try:
        booking = uc.get_booking(booking_id)
    except SchedulingError as e:
        raise _http_error(e)
    return BookingSchema.from_entity(booking)


@router.post("/bookings/{booking_id}/confirm", response_model=BookingSchema)
def confirm_booking(
    booking_id: str,
    req: BookingActionRequestSchema | None = None,
    uc: ConfirmBookingUseCase = Depends(get_confirm_booking_use_case),
):
    try:
        booking = uc.execute(booking_id, actor_ref=req.actor_ref if req else None)
    except SchedulingError as e:
        raise _http_error(e)
    return BookingSchema.from_entity(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(
    booking_id: str,
    req: BookingActionRequestSchema | None = None,
    uc: CancelBookingUseCase = Depends(get_cancel_booking_use_case),
):
    try:
        booking = uc.execute(booking_id, actor_ref=req.actor_ref if req else None)
    except SchedulingError as e:
        raise _http_error(e)
    return BookingSchema.from_entity(booking)
