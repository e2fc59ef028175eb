from __future__ import annotations

from app.application.ports.service_api import ServiceApiPort
from app.domain.entities.api_result import ErrorEnvelope, RemoteCallResult
from app.domain.entities.service import (
    WEEKDAYS,
    OpeningHours,
    Service,
    ServiceCategory,
    ServiceSearchParams,
    ServiceStatus,
)

_WEEKDAY_HOURS = {day: OpeningHours(open="09:00", close="17:00") for day in WEEKDAYS[:5]}

DEFAULT_SERVICES = (
    Service(
        id="svc_ambulance",
        name="Emergency Ambulance",
        description="24x7 ambulance pickup within city limits.",
        category=ServiceCategory.ambulance,
        price=1500.0,
        provider_id="provider_1",
        provider_name="City Care",
        availability_hours={day: OpeningHours(open="00:00", close="23:30") for day in WEEKDAYS},
    ),
    Service(
        id="svc_consultation",
        name="General Physician Consultation",
        description="In-clinic consultation with a general physician.",
        category=ServiceCategory.doctor_consultation,
        price=500.0,
        provider_id="provider_2",
        provider_name="Sunrise Clinic",
        availability_hours=dict(_WEEKDAY_HOURS, saturday=OpeningHours(open="10:00", close="13:00")),
    ),
    Service(
        id="svc_physio",
        name="Home Physiotherapy",
        description="Physiotherapy session at home.",
        category=ServiceCategory.physiotherapy,
        price=800.0,
        status=ServiceStatus.coming_soon,
        provider_id="provider_2",
        provider_name="Sunrise Clinic",
        availability_hours=dict(_WEEKDAY_HOURS),
    ),
)


class MockServiceApi(ServiceApiPort):
    def __init__(self, services: list[Service] | tuple[Service, ...] | None = None) -> None:
        catalog = DEFAULT_SERVICES if services is None else services
        self._services: dict[str, Service] = {s.id: s for s in catalog}

    def find(self, service_id: str) -> Service | None:
        return self._services.get(service_id)

    def owned_by(self, provider_id: str) -> list[Service]:
        return [s for s in self._services.values() if s.provider_id == provider_id]

    async def get_all(
        self,
        category: ServiceCategory | None = None,
        status: ServiceStatus | None = None,
    ) -> RemoteCallResult[list[Service]]:
        return RemoteCallResult.ok(self._filter(category, status))

    async def get_by_id(self, service_id: str) -> RemoteCallResult[Service]:
        service = self.find(service_id)
        if service is None:
            return RemoteCallResult.failure(ErrorEnvelope(message="Service not found", status_code=404))
        return RemoteCallResult.ok(service)

    async def search(self, params: ServiceSearchParams) -> RemoteCallResult[list[Service]]:
        # no coordinates in the mock catalog; location filters are ignored
        return RemoteCallResult.ok(self._filter(params.category, params.status))

    def _filter(self, category: ServiceCategory | None, status: ServiceStatus | None) -> list[Service]:
        return [
            s
            for s in self._services.values()
            if (category is None or s.category == category) and (status is None or s.status == status)
        ]
