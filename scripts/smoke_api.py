#!/usr/bin/env python3
"""Smoke test for a running booking engine (uvicorn booking_engine.main:app --port 8001)."""

import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

import httpx


BASE_URL = "http://127.0.0.1:8001"
PROVIDER_ID = "smoke-provider"


def _next_weekday(weekday: int) -> date:
    today = date.today()
    days_ahead = (weekday - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


def setup_provider() -> None:
    print("=" * 60)
    print("PUT working hours")
    print("=" * 60)
    entries = [{"weekday": day, "start_time": "09:00", "end_time": "20:00"} for day in range(6)]
    entries.append({"weekday": 6, "is_working": False})
    response = httpx.put(f"{BASE_URL}/api/v1/providers/{PROVIDER_ID}/working-hours", json={"entries": entries})
    response.raise_for_status()
    print("✅ Working hours stored")


def check_availability(day: date) -> list[str]:
    response = httpx.get(
        f"{BASE_URL}/api/v1/providers/{PROVIDER_ID}/availability",
        params={"service_id": "haircut", "date": day.isoformat()},
    )
    response.raise_for_status()
    slots = response.json()["slots"]
    print(f"✅ {len(slots)} slots on {day}: {', '.join(slots[:6])} ...")
    return slots


def race_for_slot(day: date, start: str, callers: int = 5) -> str | None:
    print("\n" + "=" * 60)
    print(f"Racing {callers} bookings for {start}")
    print("=" * 60)
    payload = {"provider_id": PROVIDER_ID, "service_id": "haircut", "date": day.isoformat(), "start_time": start}

    def attempt(i: int) -> httpx.Response:
        return httpx.post(f"{BASE_URL}/api/v1/bookings", json={**payload, "customer_ref": f"smoke-{i}"}, timeout=10.0)

    with ThreadPoolExecutor(max_workers=callers) as pool:
        responses = list(pool.map(attempt, range(callers)))

    codes = sorted(r.status_code for r in responses)
    print(f"Status codes: {codes}")
    winners = [r.json() for r in responses if r.status_code == 201]
    if len(winners) != 1:
        print(f"❌ Expected exactly one winner, got {len(winners)}")
        return None
    print(f"✅ One winner: {winners[0]['booking_id']}")
    return winners[0]["booking_id"]


def cancel(booking_id: str) -> None:
    response = httpx.post(f"{BASE_URL}/api/v1/bookings/{booking_id}/cancel", json={"actor_ref": "smoke"})
    response.raise_for_status()
    print(f"✅ Cancelled {booking_id}")


if __name__ == "__main__":
    try:
        setup_provider()
        target = _next_weekday(2)
        before = check_availability(target)
        booking_id = race_for_slot(target, "14:00")
        if booking_id is None:
            sys.exit(1)
        during = check_availability(target)
        assert "14:00" not in during
        cancel(booking_id)
        after = check_availability(target)
        assert after == before
        print("\nAll smoke checks passed")
    except httpx.HTTPError as e:
        print(f"❌ HTTP error: {e}")
        sys.exit(1)
