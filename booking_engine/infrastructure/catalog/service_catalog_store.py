from __future__ import annotations

from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.domain.entities.service_catalog import ServiceCatalogEntry
from booking_engine.infrastructure.catalog.service_catalog_data import SERVICE_CATALOG


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: dict[str, ServiceCatalogEntry] | None = None) -> None:
        self._catalog = SERVICE_CATALOG if catalog is None else catalog

    def get_service(self, service_id: str) -> ServiceCatalogEntry | None:
        normalized_id = service_id.lower().strip()
        return self._catalog.get(normalized_id)

    def get_duration_minutes(self, service_id: str) -> int | None:
        entry = self.get_service(service_id)
        if not entry:
            return None
        return entry.duration_minutes
