from __future__ import annotations

from typing import Any

from app.application.ports.booking_api import BookingApiPort
from app.domain.entities.api_result import RemoteCallResult
from app.domain.entities.booking import (
    Booking,
    CreateBookingData,
    UpdateBookingStatusData,
    UpdatePaymentStatusData,
)
from app.infrastructure.http.api_client import ApiClient
from app.infrastructure.http.schemas import (
    BookingSchema,
    dump_create_booking,
    dump_update_payment,
    dump_update_status,
    unwrap_list,
)


class HttpBookingApi(BookingApiPort):
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def create(self, data: CreateBookingData) -> RemoteCallResult[Booking]:
        result = await self._client.call("POST", "/bookings", json=dump_create_booking(data))
        return _map(result, _to_booking)

    async def get_user_bookings(self) -> RemoteCallResult[list[Booking]]:
        result = await self._client.call("GET", "/bookings")
        return _map(result, _to_bookings)

    async def get_provider_bookings(self) -> RemoteCallResult[list[Booking]]:
        result = await self._client.call("GET", "/bookings/provider")
        return _map(result, _to_bookings)

    async def get_by_id(self, booking_id: str) -> RemoteCallResult[Booking]:
        result = await self._client.call("GET", f"/bookings/{booking_id}")
        return _map(result, _to_booking)

    async def update_status(self, booking_id: str, data: UpdateBookingStatusData) -> RemoteCallResult[Booking]:
        result = await self._client.call("PUT", f"/bookings/{booking_id}", json=dump_update_status(data))
        return _map(result, _to_booking)

    async def update_payment(self, booking_id: str, data: UpdatePaymentStatusData) -> RemoteCallResult[Booking]:
        result = await self._client.call("PUT", f"/bookings/{booking_id}/payment", json=dump_update_payment(data))
        return _map(result, _to_booking)


def _to_booking(payload: Any) -> Booking:
    return BookingSchema.model_validate(payload).to_entity()


def _to_bookings(payload: Any) -> list[Booking]:
    return [_to_booking(item) for item in unwrap_list(payload)]


def _map(result: RemoteCallResult[Any], convert) -> RemoteCallResult[Any]:
    # conversion errors propagate; ApiExecutor reports them as client-side failures
    if result.error is not None:
        return result
    return RemoteCallResult.ok(convert(result.data))
