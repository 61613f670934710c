from __future__ import annotations

from datetime import time

MINUTES_PER_DAY = 24 * 60


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single day")
    return time(hour=minutes // 60, minute=minutes % 60)


def add_minutes(value: time, minutes: int) -> time | None:
    """Shift a time of day. Returns None if the result would cross midnight."""
    total = to_minutes(value) + minutes
    if total >= MINUTES_PER_DAY:
        return None
    return from_minutes(total)


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open [start, end) overlap; touching intervals do not overlap."""
    return a_start < b_end and b_start < a_end


def parse_hhmm(text: str) -> time:
    """Parse 'HH:MM' (24h). Seconds are not accepted."""
    try:
        hour_str, minute_str = text.strip().split(":")
        return time(hour=int(hour_str), minute=int(minute_str))
    except (ValueError, AttributeError) as exc:
        raise ValueError(f"invalid time {text!r}, expected HH:MM") from exc
