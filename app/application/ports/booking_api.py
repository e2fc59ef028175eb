from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.api_result import RemoteCallResult
from app.domain.entities.booking import (
    Booking,
    CreateBookingData,
    UpdateBookingStatusData,
    UpdatePaymentStatusData,
)


class BookingApiPort(ABC):
    """
    Remote booking operations. Handled failures come back as RemoteCallResult.error;
    implementations may still raise on unexpected client-side faults.
    """

    @abstractmethod
    async def create(self, data: CreateBookingData) -> RemoteCallResult[Booking]:
        raise NotImplementedError

    @abstractmethod
    async def get_user_bookings(self) -> RemoteCallResult[list[Booking]]:
        """Bookings of the authenticated user, newest created first."""
        raise NotImplementedError

    @abstractmethod
    async def get_provider_bookings(self) -> RemoteCallResult[list[Booking]]:
        """Bookings for services owned by the authenticated provider."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, booking_id: str) -> RemoteCallResult[Booking]:
        raise NotImplementedError

    @abstractmethod
    async def update_status(self, booking_id: str, data: UpdateBookingStatusData) -> RemoteCallResult[Booking]:
        raise NotImplementedError

    @abstractmethod
    async def update_payment(self, booking_id: str, data: UpdatePaymentStatusData) -> RemoteCallResult[Booking]:
        raise NotImplementedError
