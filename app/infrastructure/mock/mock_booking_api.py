from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from app.application.ports.booking_api import BookingApiPort
from app.domain.entities.api_result import ErrorEnvelope, RemoteCallResult
from app.domain.entities.booking import (
    BookedService,
    Booking,
    BookingStatus,
    BookingUser,
    CreateBookingData,
    ProviderRef,
    UpdateBookingStatusData,
    UpdatePaymentStatusData,
    parse_booking_date,
)
from app.infrastructure.mock.mock_service_api import MockServiceApi


class MockBookingApi(BookingApiPort):
    """In-memory stand-in for the bookings backend, following its status codes and messages."""

    def __init__(
        self,
        services: MockServiceApi | None = None,
        user_id: str = "mock_user",
        user_name: str = "Mock User",
        is_admin: bool = False,
    ) -> None:
        self._services = services or MockServiceApi()
        self._user = BookingUser(id=user_id, name=user_name, mobile="9999999999")
        self._is_admin = is_admin
        self._bookings: dict[str, Booking] = {}
        self._next_id = 0
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._logger = logging.getLogger(__name__)

    def seed(self, booking: Booking) -> None:
        self._bookings[booking.id] = booking

    async def create(self, data: CreateBookingData) -> RemoteCallResult[Booking]:
        service = self._services.find(data.service_id)
        if service is None:
            return _failure("Service not found", 404)

        self._next_id += 1
        booking = Booking(
            id=f"mock_booking_{self._next_id}",
            service=BookedService(
                id=service.id,
                name=service.name,
                category=service.category.value,
                image_url=service.image_url,
                provider=ProviderRef(id=service.provider_id, name=service.provider_name or ""),
            ),
            user=self._user,
            booking_date=parse_booking_date(data.booking_date),
            time_slot=data.time_slot,
            price=service.price,
            special_requirements=data.special_requirements,
            created_at=self._tick(),
        )
        self._bookings[booking.id] = booking
        self._logger.info("Mock booking created", extra={"booking_id": booking.id, "service_id": service.id})
        return RemoteCallResult.ok(booking)

    async def get_user_bookings(self) -> RemoteCallResult[list[Booking]]:
        own = [b for b in self._bookings.values() if b.user is not None and b.user.id == self._user.id]
        return RemoteCallResult.ok(_newest_first(own))

    async def get_provider_bookings(self) -> RemoteCallResult[list[Booking]]:
        owned = {s.id for s in self._services.owned_by(self._user.id)}
        matching = [b for b in self._bookings.values() if b.service.id in owned]
        return RemoteCallResult.ok(_newest_first(matching))

    async def get_by_id(self, booking_id: str) -> RemoteCallResult[Booking]:
        booking = self._bookings.get(booking_id)
        if booking is None:
            return _failure("Booking not found", 404)
        if not self._may_access(booking):
            return _failure("Not authorized to view this booking", 401)
        return RemoteCallResult.ok(booking)

    async def update_status(self, booking_id: str, data: UpdateBookingStatusData) -> RemoteCallResult[Booking]:
        booking = self._bookings.get(booking_id)
        if booking is None:
            return _failure("Booking not found", 404)
        if not self._may_access(booking):
            return _failure("Not authorized to update this booking", 401)

        updated = replace(booking, status=data.status)
        if data.status == BookingStatus.cancelled and data.cancellation_reason:
            updated = replace(updated, cancellation_reason=data.cancellation_reason)
        self._bookings[booking_id] = updated
        return RemoteCallResult.ok(updated)

    async def update_payment(self, booking_id: str, data: UpdatePaymentStatusData) -> RemoteCallResult[Booking]:
        booking = self._bookings.get(booking_id)
        if booking is None:
            return _failure("Booking not found", 404)

        updated = replace(booking, payment_status=data.payment_status, payment_id=data.payment_id)
        self._bookings[booking_id] = updated
        return RemoteCallResult.ok(updated)

    def _may_access(self, booking: Booking) -> bool:
        return self._is_admin or (booking.user is not None and booking.user.id == self._user.id)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock


def _newest_first(bookings: list[Booking]) -> list[Booking]:
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(bookings, key=lambda b: b.created_at or epoch, reverse=True)


def _failure(message: str, status_code: int) -> RemoteCallResult[Booking]:
    return RemoteCallResult.failure(ErrorEnvelope(message=message, status_code=status_code))
