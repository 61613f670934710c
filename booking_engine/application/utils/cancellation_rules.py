from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

from booking_engine.domain.entities.booking import Booking

# A rule returns a rejection reason, or None to allow the cancellation.
CancellationRule = Callable[[Booking, datetime], str | None]


class MinimumNoticeRule:
    def __init__(self, minutes: int) -> None:
        if minutes < 0:
            raise ValueError("minimum notice cannot be negative")
        self._notice = timedelta(minutes=minutes)

    def __call__(self, booking: Booking, now: datetime) -> str | None:
        if booking.starts_at - now < self._notice:
            minutes = int(self._notice.total_seconds() // 60)
            return f"cancellations need at least {minutes} minutes notice"
        return None


def build_cancellation_rules(min_notice_minutes: int | None) -> list[CancellationRule]:
    if min_notice_minutes is None:
        return []
    return [MinimumNoticeRule(min_notice_minutes)]
