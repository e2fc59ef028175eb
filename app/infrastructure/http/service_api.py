from __future__ import annotations

from typing import Any

from app.application.ports.service_api import ServiceApiPort
from app.domain.entities.api_result import RemoteCallResult
from app.domain.entities.service import Service, ServiceCategory, ServiceSearchParams, ServiceStatus
from app.infrastructure.http.api_client import ApiClient
from app.infrastructure.http.schemas import ServiceSchema, unwrap_list


class HttpServiceApi(ServiceApiPort):
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def get_all(
        self,
        category: ServiceCategory | None = None,
        status: ServiceStatus | None = None,
    ) -> RemoteCallResult[list[Service]]:
        params = {
            "category": category.value if category else None,
            "status": status.value if status else None,
        }
        result = await self._client.call("GET", "/services", params=params)
        if result.error is not None:
            return result
        return RemoteCallResult.ok(_to_services(result.data))

    async def get_by_id(self, service_id: str) -> RemoteCallResult[Service]:
        result = await self._client.call("GET", f"/services/{service_id}")
        if result.error is not None:
            return result
        return RemoteCallResult.ok(ServiceSchema.model_validate(result.data).to_entity())

    async def search(self, params: ServiceSearchParams) -> RemoteCallResult[list[Service]]:
        query: dict[str, Any] = {
            "lat": params.lat,
            "lng": params.lng,
            "distance": params.distance,
            "category": params.category.value if params.category else None,
            "status": params.status.value if params.status else None,
        }
        result = await self._client.call("GET", "/services/search", params=query)
        if result.error is not None:
            return result
        return RemoteCallResult.ok(_to_services(result.data))


def _to_services(payload: Any) -> list[Service]:
    return [ServiceSchema.model_validate(item).to_entity() for item in unwrap_list(payload)]
