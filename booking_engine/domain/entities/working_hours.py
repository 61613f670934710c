from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Iterable


WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class WorkingHours:
    weekday: int  # 0 = Monday, same as date.weekday()
    start_time: time | None = None
    end_time: time | None = None
    is_working: bool = True

    def __post_init__(self) -> None:
        if not 0 <= self.weekday <= 6:
            raise ValueError(f"weekday must be between 0 and 6, got {self.weekday}")
        if self.is_working:
            if self.start_time is None or self.end_time is None:
                raise ValueError(f"{WEEKDAY_NAMES[self.weekday]}: working day needs start_time and end_time")
            for value in (self.start_time, self.end_time):
                if value.tzinfo is not None:
                    raise ValueError(f"{WEEKDAY_NAMES[self.weekday]}: working hours are local times without a UTC offset")
                if value.second or value.microsecond:
                    raise ValueError(f"{WEEKDAY_NAMES[self.weekday]}: working hours must fall on whole minutes")
            if self.start_time >= self.end_time:
                raise ValueError(f"{WEEKDAY_NAMES[self.weekday]}: start_time must be before end_time")


def validate_weekly_schedule(entries: Iterable[WorkingHours]) -> list[WorkingHours]:
    """Return entries sorted by weekday, rejecting duplicate weekdays."""
    by_weekday: dict[int, WorkingHours] = {}
    for entry in entries:
        if entry.weekday in by_weekday:
            raise ValueError(f"duplicate working hours for {WEEKDAY_NAMES[entry.weekday]}")
        by_weekday[entry.weekday] = entry
    return [by_weekday[day] for day in sorted(by_weekday)]
