from __future__ import annotations

from abc import ABC, abstractmethod

from booking_engine.domain.entities.service_catalog import ServiceCatalogEntry


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_id: str) -> ServiceCatalogEntry | None:
        """Get service catalog entry by service id."""
        raise NotImplementedError

    @abstractmethod
    def get_duration_minutes(self, service_id: str) -> int | None:
        """Get service duration in minutes. Returns None if the service is unknown."""
        raise NotImplementedError
