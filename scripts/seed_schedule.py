#!/usr/bin/env python3
"""
Seed a provider's weekly schedule into the JSON schedule store.

Usage:
  python3 scripts/seed_schedule.py --provider 1 --hours 09:00-20:00 --days mon,tue,wed,thu,fri
  python3 scripts/seed_schedule.py --provider 1 --data-dir ./data/schedules --off sun

Days not listed in --days or --off get no entry (the provider is not bookable on them).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from booking_engine.application.use_cases.schedule import ScheduleUseCase  # noqa: E402
from booking_engine.application.utils.time_ranges import parse_hhmm  # noqa: E402
from booking_engine.core.config import settings  # noqa: E402
from booking_engine.domain.entities.working_hours import WEEKDAY_NAMES, WorkingHours  # noqa: E402
from booking_engine.infrastructure.store.json_store import JsonScheduleStore  # noqa: E402


def _parse_days(value: str) -> list[int]:
    days: list[int] = []
    for token in filter(None, (part.strip().lower() for part in value.split(","))):
        matches = [i for i, name in enumerate(WEEKDAY_NAMES) if name.startswith(token)]
        if len(matches) != 1:
            raise argparse.ArgumentTypeError(f"unknown or ambiguous day {token!r}")
        days.append(matches[0])
    return days


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--provider", required=True)
    parser.add_argument("--hours", default="09:00-17:00", help="HH:MM-HH:MM")
    parser.add_argument("--days", type=_parse_days, default=_parse_days("mon,tue,wed,thu,fri"))
    parser.add_argument("--off", type=_parse_days, default=[])
    parser.add_argument("--data-dir", default=settings.STORE_DATA_DIR)
    args = parser.parse_args()

    start_text, _, end_text = args.hours.partition("-")
    start, end = parse_hhmm(start_text), parse_hhmm(end_text)

    entries = [WorkingHours(weekday=day, start_time=start, end_time=end) for day in args.days]
    entries += [WorkingHours(weekday=day, is_working=False) for day in args.off if day not in args.days]

    store = JsonScheduleStore(data_dir=args.data_dir)
    schedule = ScheduleUseCase(store=store).set_working_hours(args.provider, entries)

    print(f"Provider {args.provider} -> {args.data_dir}")
    for entry in schedule:
        if entry.is_working:
            print(f"  {WEEKDAY_NAMES[entry.weekday]:<10} {entry.start_time:%H:%M}-{entry.end_time:%H:%M}")
        else:
            print(f"  {WEEKDAY_NAMES[entry.weekday]:<10} off")
    return 0


if __name__ == "__main__":
    sys.exit(main())
