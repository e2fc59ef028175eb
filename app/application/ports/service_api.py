from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.api_result import RemoteCallResult
from app.domain.entities.service import Service, ServiceCategory, ServiceSearchParams, ServiceStatus


class ServiceApiPort(ABC):
    @abstractmethod
    async def get_all(
        self,
        category: ServiceCategory | None = None,
        status: ServiceStatus | None = None,
    ) -> RemoteCallResult[list[Service]]:
        """List services, optionally filtered by category and status."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, service_id: str) -> RemoteCallResult[Service]:
        raise NotImplementedError

    @abstractmethod
    async def search(self, params: ServiceSearchParams) -> RemoteCallResult[list[Service]]:
        """Search services near a location."""
        raise NotImplementedError
