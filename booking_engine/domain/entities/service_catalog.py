from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceCatalogEntry:
    service_id: str
    display_name: str
    duration_minutes: int
    category: str | None = None
