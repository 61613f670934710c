from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from booking_engine.application.exceptions import OutsideBookingHorizon


def safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except Exception:
        return ZoneInfo("UTC")


def business_now(timezone: ZoneInfo) -> datetime:
    """Wall-clock now in the business timezone, without tzinfo (bookings store naive local times)."""
    return datetime.now(timezone).replace(tzinfo=None, microsecond=0)


def check_horizon(day: date, now: datetime, horizon_days: int) -> None:
    today = now.date()
    if day < today:
        raise OutsideBookingHorizon(f"{day.isoformat()} is in the past")
    if day > today + timedelta(days=horizon_days):
        raise OutsideBookingHorizon(f"{day.isoformat()} is more than {horizon_days} days ahead")


def earliest_start(day: date, now: datetime) -> time | None:
    """Earliest start time still bookable on `day`; None when the whole day is open."""
    if day != now.date():
        return None
    return now.time()
