"""
Tests for slot generation and the availability use case.
"""

from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from booking_engine.application.exceptions import InvalidService, OutsideBookingHorizon, ProviderNotFound
from booking_engine.application.use_cases.availability import AvailabilityUseCase, compute_available_slots
from booking_engine.application.use_cases.cancel_booking import CancelBookingUseCase
from booking_engine.application.utils.time_ranges import add_minutes
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.working_hours import WorkingHours
from booking_engine.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from booking_engine.infrastructure.store.memory_store import MemoryScheduleStore

TZ = ZoneInfo("America/Los_Angeles")
NOW = datetime(2025, 1, 13, 8, 0)  # Monday
WEDNESDAY = date(2025, 1, 15)
WED_HOURS = WorkingHours(weekday=2, start_time=time(9, 0), end_time=time(20, 0))


def _booking(booking_id: str, start: time, end: time, status: BookingStatus = BookingStatus.confirmed) -> Booking:
    return Booking(
        booking_id=booking_id,
        provider_id="p1",
        service_id="haircut",
        date=WEDNESDAY,
        start_time=start,
        end_time=end,
        status=status,
        created_at=NOW,
    )


def _use_case(store: MemoryScheduleStore, clock=lambda: NOW) -> AvailabilityUseCase:
    return AvailabilityUseCase(
        store=store,
        catalog=ServiceCatalogStore(),
        timezone=TZ,
        granularity_minutes=15,
        horizon_days=90,
        clock=clock,
    )


def _store() -> MemoryScheduleStore:
    store = MemoryScheduleStore()
    store.set_working_hours(
        "p1",
        [
            WorkingHours(weekday=0, start_time=time(9, 0), end_time=time(17, 0)),
            WED_HOURS,
            WorkingHours(weekday=6, is_working=False),
        ],
    )
    return store


def test_empty_day_slots_start_at_opening_and_stop_before_closing():
    """Wed 09:00-20:00, 30 min service, 15 min step: 09:00 ... 19:30."""
    slots = compute_available_slots(WED_HOURS, [], 30, 15)

    assert slots[:3] == [time(9, 0), time(9, 15), time(9, 30)]
    assert slots[-1] == time(19, 30)
    assert time(19, 45) not in slots
    assert len(slots) == 43


def test_active_booking_removes_overlapping_candidates():
    """A 10:00-10:30 booking blocks 09:45, 10:00 and 10:15 only."""
    slots = compute_available_slots(WED_HOURS, [_booking("b1", time(10, 0), time(10, 30))], 30, 15)

    for blocked in (time(9, 45), time(10, 0), time(10, 15)):
        assert blocked not in slots
    assert time(9, 30) in slots
    assert time(10, 30) in slots


def test_cancelled_bookings_do_not_block():
    slots = compute_available_slots(
        WED_HOURS,
        [_booking("b1", time(10, 0), time(10, 30), status=BookingStatus.cancelled)],
        30,
        15,
    )
    assert time(10, 0) in slots


def test_back_to_back_intervals_are_free():
    """Slots that end exactly when a booking starts, or start when it ends, stay available."""
    slots = compute_available_slots(WED_HOURS, [_booking("b1", time(11, 0), time(12, 0))], 60, 15)

    assert time(10, 0) in slots
    assert time(12, 0) in slots
    assert time(10, 15) not in slots
    assert time(11, 45) not in slots


def test_duration_longer_than_working_window_gives_no_slots():
    short_day = WorkingHours(weekday=2, start_time=time(9, 0), end_time=time(10, 0))
    assert compute_available_slots(short_day, [], 90, 15) == []


def test_non_working_day_gives_no_slots():
    assert compute_available_slots(WorkingHours(weekday=6, is_working=False), [], 30, 15) == []
    assert compute_available_slots(None, [], 30, 15) == []


@pytest.mark.parametrize("duration,granularity", [(15, 15), (30, 15), (45, 10), (60, 30), (90, 20)])
def test_slots_always_fit_working_hours(duration: int, granularity: int):
    bookings = [_booking("b1", time(13, 0), time(14, 0)), _booking("b2", time(16, 30), time(17, 15))]
    slots = compute_available_slots(WED_HOURS, bookings, duration, granularity)

    assert slots == sorted(slots)
    for slot in slots:
        end = add_minutes(slot, duration)
        assert slot >= WED_HOURS.start_time
        assert end is not None and end <= WED_HOURS.end_time
        for b in bookings:
            assert not (slot < b.end_time and b.start_time < end)


def test_not_before_drops_elapsed_candidates():
    slots = compute_available_slots(WED_HOURS, [], 30, 15, not_before=time(12, 7))
    assert slots[0] == time(12, 15)


def test_invalid_arguments_raise():
    with pytest.raises(ValueError):
        compute_available_slots(WED_HOURS, [], 0, 15)
    with pytest.raises(ValueError):
        compute_available_slots(WED_HOURS, [], 30, 0)


def test_use_case_resolves_service_duration():
    store = _store()
    slots = _use_case(store).get_available_slots("p1", "hair_coloring", WEDNESDAY)

    assert slots[0] == time(9, 0)
    assert slots[-1] == time(18, 30)


def test_use_case_returns_empty_for_day_off_and_missing_entry():
    store = _store()
    uc = _use_case(store)

    assert uc.get_available_slots("p1", "haircut", date(2025, 1, 19)) == []  # Sunday, off
    assert uc.get_available_slots("p1", "haircut", date(2025, 1, 17)) == []  # Friday, no entry


def test_use_case_rejects_unknown_service_and_provider():
    store = _store()
    uc = _use_case(store)

    with pytest.raises(InvalidService):
        uc.get_available_slots("p1", "tattoo", WEDNESDAY)
    with pytest.raises(ProviderNotFound):
        uc.get_available_slots("nobody", "haircut", WEDNESDAY)
    with pytest.raises(InvalidService):
        uc.compute("p1", WEDNESDAY, 0)


def test_use_case_enforces_booking_horizon():
    store = _store()
    uc = _use_case(store)

    with pytest.raises(OutsideBookingHorizon):
        uc.get_available_slots("p1", "haircut", date(2025, 1, 12))
    with pytest.raises(OutsideBookingHorizon):
        uc.get_available_slots("p1", "haircut", date(2025, 6, 4))


def test_same_day_slots_exclude_the_past():
    store = _store()
    uc = _use_case(store, clock=lambda: datetime(2025, 1, 15, 13, 20))

    slots = uc.get_available_slots("p1", "haircut", WEDNESDAY)
    assert slots[0] == time(13, 30)


def test_cancellation_frees_slot_on_next_computation():
    """Cancel the 10:00-10:30 booking and the same query immediately offers 09:45-10:15 again."""
    store = _store()
    store.insert_booking(_booking("b1", time(10, 0), time(10, 30)))
    uc = _use_case(store)

    before = uc.get_available_slots("p1", "haircut", WEDNESDAY)
    assert time(10, 0) not in before

    CancelBookingUseCase(store=store, timezone=TZ, clock=lambda: NOW).execute("b1", actor_ref="customer-1")

    after = uc.get_available_slots("p1", "haircut", WEDNESDAY)
    for freed in (time(9, 45), time(10, 0), time(10, 15)):
        assert freed in after
