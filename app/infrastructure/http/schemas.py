from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities.booking import (
    BookedService,
    Booking,
    BookingStatus,
    BookingUser,
    CreateBookingData,
    PaymentStatus,
    ProviderRef,
    UpdateBookingStatusData,
    UpdatePaymentStatusData,
    parse_booking_date,
)
from app.domain.entities.service import OpeningHours, Service, ServiceCategory, ServiceStatus


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProviderSchema(WireModel):
    id: str | None = Field(default=None, alias="_id")
    name: str = ""


class BookedServiceSchema(WireModel):
    id: str | None = Field(default=None, alias="_id")
    name: str = ""
    category: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    provider: ProviderSchema | str | None = None

    def to_entity(self) -> BookedService:
        return BookedService(
            id=self.id,
            name=self.name,
            category=self.category,
            image_url=self.image_url,
            provider=_provider_ref(self.provider),
        )


class BookingUserSchema(WireModel):
    id: str | None = Field(default=None, alias="_id")
    name: str | None = None
    mobile: str | None = None


class BookingSchema(WireModel):
    id: str = Field(alias="_id")
    # populated object, or a bare id when the backend does not populate
    service: BookedServiceSchema | str
    user: BookingUserSchema | str | None = None
    booking_date: str = Field(alias="bookingDate")
    time_slot: str = Field(alias="timeSlot")
    price: float = 0.0
    status: BookingStatus = BookingStatus.pending
    payment_status: PaymentStatus = Field(default=PaymentStatus.pending, alias="paymentStatus")
    payment_id: str | None = Field(default=None, alias="paymentId")
    cancellation_reason: str | None = Field(default=None, alias="cancellationReason")
    special_requirements: str | None = Field(default=None, alias="specialRequirements")
    created_at: str | None = Field(default=None, alias="createdAt")

    def to_entity(self) -> Booking:
        if isinstance(self.service, str):
            service = BookedService(id=self.service, name="")
        else:
            service = self.service.to_entity()

        if isinstance(self.user, str):
            user: BookingUser | None = BookingUser(id=self.user)
        elif self.user is not None:
            user = BookingUser(id=self.user.id, name=self.user.name, mobile=self.user.mobile)
        else:
            user = None

        return Booking(
            id=self.id,
            service=service,
            user=user,
            booking_date=parse_booking_date(self.booking_date),
            time_slot=self.time_slot,
            price=self.price,
            status=self.status,
            payment_status=self.payment_status,
            payment_id=self.payment_id,
            cancellation_reason=self.cancellation_reason,
            special_requirements=self.special_requirements,
            created_at=parse_booking_date(self.created_at) if self.created_at else None,
        )


class OpeningHoursSchema(WireModel):
    open: str | None = None
    close: str | None = None


class ServiceSchema(WireModel):
    id: str = Field(alias="_id")
    name: str
    description: str = ""
    category: ServiceCategory
    status: ServiceStatus = ServiceStatus.active
    price: float = 0.0
    image_url: str | None = Field(default=None, alias="imageUrl")
    provider: ProviderSchema | str | None = None
    availability_hours: dict[str, OpeningHoursSchema | None] = Field(default_factory=dict, alias="availabilityHours")

    def to_entity(self) -> Service:
        provider = _provider_ref(self.provider)
        hours = {
            day.lower(): OpeningHours(open=h.open, close=h.close)
            for day, h in self.availability_hours.items()
            if h is not None and h.open and h.close
        }
        return Service(
            id=self.id,
            name=self.name,
            description=self.description,
            category=self.category,
            status=self.status,
            price=self.price,
            image_url=self.image_url,
            provider_id=provider.id,
            provider_name=provider.name or None,
            availability_hours=hours,
        )


def _provider_ref(provider: ProviderSchema | str | None) -> ProviderRef:
    if provider is None:
        return ProviderRef()
    if isinstance(provider, str):
        return ProviderRef(id=provider)
    return ProviderRef(id=provider.id, name=provider.name)


def unwrap_list(payload: Any) -> list[Any]:
    """Accept both a bare JSON array and the paginated {"data": [...]} shape."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    raise ValueError("Expected a list of items in API response")


def dump_create_booking(data: CreateBookingData) -> dict[str, Any]:
    body: dict[str, Any] = {
        "serviceId": data.service_id,
        "bookingDate": data.booking_date,
        "timeSlot": data.time_slot,
    }
    if data.special_requirements is not None:
        body["specialRequirements"] = data.special_requirements
    return body


def dump_update_status(data: UpdateBookingStatusData) -> dict[str, Any]:
    body: dict[str, Any] = {"status": data.status.value}
    if data.cancellation_reason is not None:
        body["cancellationReason"] = data.cancellation_reason
    return body


def dump_update_payment(data: UpdatePaymentStatusData) -> dict[str, Any]:
    return {"paymentStatus": data.payment_status.value, "paymentId": data.payment_id}
