from __future__ import annotations

import json
import logging
from contextlib import AbstractContextManager
from datetime import date, datetime, time
from pathlib import Path
from typing import Any
from urllib.parse import quote

from booking_engine.application.ports.schedule_store import ScheduleStorePort
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.working_hours import WorkingHours
from booking_engine.infrastructure.store.key_locks import KeyedLocks


class JsonScheduleStore(ScheduleStorePort):
    """
    One JSON document per provider holding its weekly schedule and bookings.

    Every write is a read-modify-write of that document under a per-provider
    I/O lock, finished by an atomic rename, so a status change is either
    fully on disk or not at all. The (provider, date) schedule locks used by
    booking creation are separate and coarser-grained in time.
    """

    def __init__(self, data_dir: str = "./data/schedules") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._io_locks = KeyedLocks()
        self._schedule_locks = KeyedLocks()
        self._logger = logging.getLogger(__name__)

    def _get_file_path(self, provider_id: str) -> Path:
        """Get the file path for a provider_id."""
        return self._data_dir / f"{quote(provider_id, safe='')}.json"

    def _load_provider_data(self, provider_id: str) -> dict[str, Any] | None:
        """Load provider document, None if it was never written."""
        file_path = self._get_file_path(provider_id)
        if not file_path.exists():
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.error(
                "Unreadable schedule file",
                extra={"provider_id": provider_id, "reason": str(e)},
            )
            raise
        if "version" not in data:
            data["version"] = 1
        data.setdefault("working_hours", [])
        data.setdefault("bookings", [])
        return data

    def _save_provider_data(self, provider_id: str, data: dict[str, Any]) -> None:
        """Save provider document atomically."""
        file_path = self._get_file_path(provider_id)
        temp_path = file_path.with_suffix(".json.tmp")

        try:
            # Write to temp file
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            # Atomic rename
            temp_path.replace(file_path)
        except Exception:
            # Clean up temp file on error
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def _empty_document(self, provider_id: str) -> dict[str, Any]:
        return {"provider_id": provider_id, "working_hours": [], "bookings": [], "version": 1}

    # Working hours

    def has_provider(self, provider_id: str) -> bool:
        with self._io_locks.hold(provider_id):
            data = self._load_provider_data(provider_id)
        return bool(data and data["working_hours"])

    def get_working_hours(self, provider_id: str) -> list[WorkingHours]:
        with self._io_locks.hold(provider_id):
            data = self._load_provider_data(provider_id)
        if data is None:
            return []
        entries = [_deserialize_working_hours(item) for item in data["working_hours"]]
        return sorted(entries, key=lambda e: e.weekday)

    def get_working_hours_for(self, provider_id: str, weekday: int) -> WorkingHours | None:
        for entry in self.get_working_hours(provider_id):
            if entry.weekday == weekday:
                return entry
        return None

    def set_working_hours(self, provider_id: str, entries: list[WorkingHours]) -> None:
        with self._io_locks.hold(provider_id):
            data = self._load_provider_data(provider_id) or self._empty_document(provider_id)
            data["working_hours"] = [_serialize_working_hours(entry) for entry in entries]
            self._save_provider_data(provider_id, data)

    # Bookings

    def lock_schedule(self, provider_id: str, day: date, timeout: float | None = None) -> AbstractContextManager[bool]:
        return self._schedule_locks.hold((provider_id, day), timeout=timeout)

    def list_bookings(self, provider_id: str, day: date, include_cancelled: bool = False) -> list[Booking]:
        with self._io_locks.hold(provider_id):
            data = self._load_provider_data(provider_id)
        if data is None:
            return []
        day_iso = day.isoformat()
        bookings = [_deserialize_booking(item) for item in data["bookings"] if item.get("date") == day_iso]
        if not include_cancelled:
            bookings = [b for b in bookings if b.is_active]
        return sorted(bookings, key=lambda b: (b.start_time, b.created_at))

    def insert_booking(self, booking: Booking) -> None:
        with self._io_locks.hold(booking.provider_id):
            data = self._load_provider_data(booking.provider_id) or self._empty_document(booking.provider_id)
            if any(item.get("booking_id") == booking.booking_id for item in data["bookings"]):
                raise ValueError(f"booking {booking.booking_id!r} already exists")
            data["bookings"].append(_serialize_booking(booking))
            self._save_provider_data(booking.provider_id, data)

    def get_booking(self, booking_id: str) -> Booking | None:
        provider_id = self._find_provider_of(booking_id)
        if provider_id is None:
            return None
        with self._io_locks.hold(provider_id):
            data = self._load_provider_data(provider_id)
        for item in (data or {}).get("bookings", []):
            if item.get("booking_id") == booking_id:
                return _deserialize_booking(item)
        return None

    def update_status(
        self,
        booking_id: str,
        expected: BookingStatus,
        status: BookingStatus,
        at: datetime,
        actor_ref: str | None = None,
    ) -> Booking | None:
        provider_id = self._find_provider_of(booking_id)
        if provider_id is None:
            return None
        with self._io_locks.hold(provider_id):
            data = self._load_provider_data(provider_id)
            if data is None:
                return None
            for index, item in enumerate(data["bookings"]):
                if item.get("booking_id") != booking_id:
                    continue
                current = _deserialize_booking(item)
                if current.status != expected:
                    return None
                updated = current.transitioned(status, at, actor_ref)
                data["bookings"][index] = _serialize_booking(updated)
                self._save_provider_data(provider_id, data)
                return updated
        return None

    def _find_provider_of(self, booking_id: str) -> str | None:
        # Scans every provider document; booking ids are not indexed separately.
        for file_path in sorted(self._data_dir.glob("*.json")):
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                self._logger.warning("Skipping unreadable schedule file", extra={"reason": f"{file_path.name}: {e}"})
                continue
            for item in data.get("bookings", []):
                if item.get("booking_id") == booking_id:
                    return data.get("provider_id")
        return None


def _format_time(value: time | None) -> str | None:
    return value.strftime("%H:%M") if value is not None else None


def _parse_time(value: str | None) -> time | None:
    return time.fromisoformat(value) if value else None


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _serialize_working_hours(entry: WorkingHours) -> dict[str, Any]:
    return {
        "weekday": entry.weekday,
        "start_time": _format_time(entry.start_time),
        "end_time": _format_time(entry.end_time),
        "is_working": entry.is_working,
    }


def _deserialize_working_hours(data: dict[str, Any]) -> WorkingHours:
    return WorkingHours(
        weekday=int(data["weekday"]),
        start_time=_parse_time(data.get("start_time")),
        end_time=_parse_time(data.get("end_time")),
        is_working=bool(data.get("is_working", True)),
    )


def _serialize_booking(booking: Booking) -> dict[str, Any]:
    return {
        "booking_id": booking.booking_id,
        "provider_id": booking.provider_id,
        "service_id": booking.service_id,
        "customer_ref": booking.customer_ref,
        "date": booking.date.isoformat(),
        "start_time": _format_time(booking.start_time),
        "end_time": _format_time(booking.end_time),
        "status": booking.status.value,
        "created_at": booking.created_at.isoformat(),
        "confirmed_at": booking.confirmed_at.isoformat() if booking.confirmed_at else None,
        "cancelled_at": booking.cancelled_at.isoformat() if booking.cancelled_at else None,
        "cancelled_by": booking.cancelled_by,
    }


def _deserialize_booking(data: dict[str, Any]) -> Booking:
    return Booking(
        booking_id=data["booking_id"],
        provider_id=data["provider_id"],
        service_id=data["service_id"],
        customer_ref=data.get("customer_ref"),
        date=date.fromisoformat(data["date"]),
        start_time=time.fromisoformat(data["start_time"]),
        end_time=time.fromisoformat(data["end_time"]),
        status=BookingStatus(data["status"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        confirmed_at=_parse_datetime(data.get("confirmed_at")),
        cancelled_at=_parse_datetime(data.get("cancelled_at")),
        cancelled_by=data.get("cancelled_by"),
    )
