from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ServiceCategory(str, Enum):
    ambulance = "ambulance"
    doctor_consultation = "doctor_consultation"
    health_insurance = "health_insurance"
    medical_reimbursement = "medical_reimbursement"
    hospital = "hospital"
    diagnostic_center = "diagnostic_center"
    physiotherapy = "physiotherapy"
    pharmacy = "pharmacy"


class ServiceStatus(str, Enum):
    active = "active"
    coming_soon = "coming_soon"
    inactive = "inactive"


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class OpeningHours:
    open: str  # HH:MM
    close: str  # HH:MM


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    category: ServiceCategory
    price: float
    description: str = ""
    status: ServiceStatus = ServiceStatus.active
    provider_id: str | None = None
    provider_name: str | None = None
    image_url: str | None = None
    # weekday name (lowercase) -> opening hours; missing day means closed
    availability_hours: dict[str, OpeningHours] = field(default_factory=dict)

    def hours_for(self, weekday: str) -> OpeningHours | None:
        return self.availability_hours.get(weekday.lower())


@dataclass(frozen=True)
class ServiceSearchParams:
    lat: float | None = None
    lng: float | None = None
    distance: float | None = None
    category: ServiceCategory | None = None
    status: ServiceStatus | None = None
