"""
Tests for durable schedule persistence.
"""

from __future__ import annotations

import json
import tempfile
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, time
from pathlib import Path
from zoneinfo import ZoneInfo

from booking_engine.application.exceptions import SlotConflict
from booking_engine.application.use_cases.availability import AvailabilityUseCase
from booking_engine.application.use_cases.cancel_booking import CancelBookingUseCase
from booking_engine.application.use_cases.create_booking import CreateBookingUseCase
from booking_engine.domain.entities.booking import BookingStatus
from booking_engine.domain.entities.working_hours import WorkingHours
from booking_engine.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from booking_engine.infrastructure.store.json_store import JsonScheduleStore

TZ = ZoneInfo("America/Los_Angeles")
NOW = datetime(2025, 1, 13, 8, 0)
JAN_15 = date(2025, 1, 15)
HOURS = [
    WorkingHours(weekday=2, start_time=time(9, 0), end_time=time(20, 0)),
    WorkingHours(weekday=5, is_working=False),
]


def _create(store: JsonScheduleStore) -> CreateBookingUseCase:
    return CreateBookingUseCase(store=store, catalog=ServiceCatalogStore(), timezone=TZ, clock=lambda: NOW)


def test_working_hours_survive_restart():
    """Test that a new store instance reads the schedule written by a previous one."""
    with tempfile.TemporaryDirectory() as tmpdir:
        JsonScheduleStore(data_dir=tmpdir).set_working_hours("salon-1", HOURS)

        reopened = JsonScheduleStore(data_dir=tmpdir)
        assert reopened.has_provider("salon-1")
        assert reopened.get_working_hours("salon-1") == HOURS
        assert reopened.get_working_hours_for("salon-1", 5).is_working is False
        assert reopened.get_working_hours_for("salon-1", 0) is None
        assert not reopened.has_provider("salon-2")


def test_booking_and_cancellation_survive_restart():
    """Test that booking records, including cancellation fields, persist across instances."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonScheduleStore(data_dir=tmpdir)
        store.set_working_hours("salon-1", HOURS)
        booking = _create(store).execute("salon-1", "manicure", JAN_15, time(11, 0), customer_ref="c-9")
        CancelBookingUseCase(store=store, timezone=TZ, clock=lambda: NOW).execute(booking.booking_id, actor_ref="c-9")

        reopened = JsonScheduleStore(data_dir=tmpdir)
        stored = reopened.get_booking(booking.booking_id)

        assert stored.status == BookingStatus.cancelled
        assert stored.end_time == time(11, 45)
        assert stored.cancelled_at == NOW
        assert stored.cancelled_by == "c-9"
        assert stored.customer_ref == "c-9"
        assert reopened.list_active_bookings("salon-1", JAN_15) == []
        assert reopened.list_bookings("salon-1", JAN_15, include_cancelled=True) == [stored]


def test_json_store_file_shape():
    """Test the persisted document carries the booking and working-hours columns."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonScheduleStore(data_dir=tmpdir)
        store.set_working_hours("salon-1", HOURS)
        booking = _create(store).execute("salon-1", "haircut", JAN_15, time(9, 0))

        data = json.loads((Path(tmpdir) / "salon-1.json").read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert data["working_hours"][0] == {"weekday": 2, "start_time": "09:00", "end_time": "20:00", "is_working": True}
        record = data["bookings"][0]
        assert record["booking_id"] == booking.booking_id
        assert record["date"] == "2025-01-15"
        assert (record["start_time"], record["end_time"], record["status"]) == ("09:00", "09:30", "confirmed")
        assert record["cancelled_at"] is None


def test_provider_ids_are_safe_file_names():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonScheduleStore(data_dir=tmpdir)
        store.set_working_hours("team/anna", HOURS)

        assert store.has_provider("team/anna")
        assert [p.name for p in Path(tmpdir).iterdir()] == ["team%2Fanna.json"]


def test_missing_booking_lookups():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonScheduleStore(data_dir=tmpdir)
        assert store.get_booking("nope") is None
        assert store.update_status("nope", BookingStatus.confirmed, BookingStatus.cancelled, NOW) is None
        assert store.list_bookings("salon-1", JAN_15) == []


def test_concurrent_creates_against_json_store():
    """Test that the file-backed store also lets exactly one of several racing requests win."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonScheduleStore(data_dir=tmpdir)
        store.set_working_hours("salon-1", HOURS)
        uc = _create(store)
        callers = 6
        barrier = threading.Barrier(callers)

        def attempt(_: int) -> bool:
            barrier.wait()
            try:
                uc.execute("salon-1", "facial", JAN_15, time(16, 0))
                return True
            except SlotConflict:
                return False

        with ThreadPoolExecutor(max_workers=callers) as pool:
            results = list(pool.map(attempt, range(callers)))

        assert results.count(True) == 1
        assert len(JsonScheduleStore(data_dir=tmpdir).list_active_bookings("salon-1", JAN_15)) == 1


def test_availability_reads_json_store():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonScheduleStore(data_dir=tmpdir)
        store.set_working_hours("salon-1", HOURS)
        _create(store).execute("salon-1", "haircut", JAN_15, time(10, 0))

        slots = AvailabilityUseCase(
            store=store, catalog=ServiceCatalogStore(), timezone=TZ, clock=lambda: NOW
        ).get_available_slots("salon-1", "haircut", JAN_15)

        assert time(9, 30) in slots
        assert time(10, 0) not in slots
        assert time(10, 30) in slots
