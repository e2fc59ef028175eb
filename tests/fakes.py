from __future__ import annotations

from app.application.ports.booking_api import BookingApiPort
from app.domain.entities.api_result import ErrorEnvelope, RemoteCallResult
from app.domain.entities.booking import (
    BookedService,
    Booking,
    BookingStatus,
    CreateBookingData,
    ProviderRef,
    UpdateBookingStatusData,
    UpdatePaymentStatusData,
    parse_booking_date,
)


def make_booking(
    booking_id: str,
    status: str = "pending",
    booking_date: str = "2025-06-01",
    price: float = 500.0,
    service_name: str = "General Physician Consultation",
    provider_name: str = "Sunrise Clinic",
) -> Booking:
    return Booking(
        id=booking_id,
        service=BookedService(name=service_name, provider=ProviderRef(name=provider_name)),
        booking_date=parse_booking_date(booking_date),
        time_slot="10:00",
        price=price,
        status=BookingStatus(status),
    )


def error_result(message: str, status_code: int) -> RemoteCallResult:
    return RemoteCallResult.failure(ErrorEnvelope(message=message, status_code=status_code))


class FakeBookingApi(BookingApiPort):
    """Scriptable BookingApiPort that records every call."""

    def __init__(self, bookings: list[Booking] | None = None) -> None:
        self.bookings = list(bookings or [])
        self.fetch_calls = 0
        self.create_calls: list[CreateBookingData] = []
        self.status_calls: list[tuple[str, UpdateBookingStatusData]] = []
        self.payment_calls: list[tuple[str, UpdatePaymentStatusData]] = []
        self.fetch_results: list[RemoteCallResult] = []
        self.create_result: RemoteCallResult | None = None
        self.status_result: RemoteCallResult | None = None
        self.payment_result: RemoteCallResult | None = None
        self.raise_on_create: Exception | None = None

    async def create(self, data: CreateBookingData) -> RemoteCallResult[Booking]:
        self.create_calls.append(data)
        if self.raise_on_create is not None:
            raise self.raise_on_create
        if self.create_result is not None:
            return self.create_result
        booking = make_booking(f"b{len(self.bookings) + 1}", booking_date=data.booking_date)
        self.bookings.append(booking)
        return RemoteCallResult.ok(booking)

    async def get_user_bookings(self) -> RemoteCallResult[list[Booking]]:
        self.fetch_calls += 1
        if self.fetch_results:
            return self.fetch_results.pop(0)
        return RemoteCallResult.ok(list(self.bookings))

    async def get_provider_bookings(self) -> RemoteCallResult[list[Booking]]:
        return RemoteCallResult.ok([])

    async def get_by_id(self, booking_id: str) -> RemoteCallResult[Booking]:
        for booking in self.bookings:
            if booking.id == booking_id:
                return RemoteCallResult.ok(booking)
        return error_result("Booking not found", 404)

    async def update_status(self, booking_id: str, data: UpdateBookingStatusData) -> RemoteCallResult[Booking]:
        self.status_calls.append((booking_id, data))
        if self.status_result is not None:
            return self.status_result
        return RemoteCallResult.ok(make_booking(booking_id, status=data.status.value))

    async def update_payment(self, booking_id: str, data: UpdatePaymentStatusData) -> RemoteCallResult[Booking]:
        self.payment_calls.append((booking_id, data))
        if self.payment_result is not None:
            return self.payment_result
        return RemoteCallResult.ok(make_booking(booking_id))
