from __future__ import annotations

import logging
from typing import Mapping

from app.application.ports.booking_api import BookingApiPort
from app.application.ports.navigator import NavigatorPort
from app.application.ports.notifier import NotifierPort
from app.application.utils.api_executor import DEFAULT_MAX_RETRIES, ApiExecutor
from app.domain.entities.api_result import RemoteCallResult
from app.domain.entities.booking import (
    DEFAULT_CANCELLATION_REASON,
    Booking,
    BookingStatus,
    CreateBookingData,
    PaymentStatus,
    UpdateBookingStatusData,
    UpdatePaymentStatusData,
)

BOOKINGS_ROUTE = "/my-bookings"
BOOKING_QUERY_PARAM = "booking"
RETRY_LIMIT_MESSAGE = "Could not load bookings. Please refresh later."


class BookingCoordinator:
    """
    Single source of truth for the signed-in user's bookings during a session.

    Every mutation goes through an ApiExecutor and, on success, is followed by exactly
    one full refetch of the list; local booking status is never patched in place.
    No method raises: mutations report failure with False, `error` and a notification.
    """

    def __init__(
        self,
        api: BookingApiPort,
        notifier: NotifierPort,
        navigator: NavigatorPort,
        max_retries: int = DEFAULT_MAX_RETRIES,
        bookings_route: str = BOOKINGS_ROUTE,
    ) -> None:
        self._api = api
        self._notifier = notifier
        self._navigator = navigator
        self._bookings_route = bookings_route
        self._logger = logging.getLogger(__name__)

        self._fetch_executor: ApiExecutor[list[Booking]] = ApiExecutor(api.get_user_bookings, max_retries=max_retries)
        self._create_executor: ApiExecutor[Booking] = ApiExecutor(api.create, max_retries=max_retries)
        self._status_executor: ApiExecutor[Booking] = ApiExecutor(api.update_status, max_retries=max_retries)
        self._payment_executor: ApiExecutor[Booking] = ApiExecutor(api.update_payment, max_retries=max_retries)

        self._bookings: list[Booking] = []
        self._selected_booking_id: str | None = None
        self._error: str | None = None

    @property
    def bookings(self) -> list[Booking]:
        return list(self._bookings)

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._fetch_executor.is_loading

    @property
    def fetch_executor(self) -> ApiExecutor[list[Booking]]:
        return self._fetch_executor

    @property
    def selected_booking_id(self) -> str | None:
        return self._selected_booking_id

    @property
    def selected_booking(self) -> Booking | None:
        if self._selected_booking_id is None:
            return None
        return self.get_booking_by_id(self._selected_booking_id)

    async def fetch_bookings(self) -> None:
        result = await self._fetch_executor.execute()
        self._apply_fetch_result(result)

    async def retry_fetch(self) -> None:
        """Bounded retry of the list fetch. The budget is restored by the next successful fetch."""
        if not self._fetch_executor.can_retry:
            self._notifier.info(RETRY_LIMIT_MESSAGE)
            return
        await self._fetch_executor.retry()
        state = self._fetch_executor.state
        if state.error is not None:
            self._error = state.error.message
        elif state.data is not None:
            self._bookings = list(state.data)
            self._error = None
            self._fetch_executor.reset_retries()

    async def create_booking(self, data: CreateBookingData) -> bool:
        result = await self._create_executor.execute(data)
        if not await self._finish_mutation(result, "Booking created successfully", booking_id=None):
            return False
        self._navigator.push(self._bookings_route)
        return True

    async def cancel_booking(self, booking_id: str, reason: str = DEFAULT_CANCELLATION_REASON) -> bool:
        payload = UpdateBookingStatusData(status=BookingStatus.cancelled, cancellation_reason=reason)
        result = await self._status_executor.execute(booking_id, payload)
        return await self._finish_mutation(result, "Booking cancelled successfully", booking_id=booking_id)

    async def update_payment(self, booking_id: str, payment_status: PaymentStatus, payment_id: str) -> bool:
        payload = UpdatePaymentStatusData(payment_status=payment_status, payment_id=payment_id)
        result = await self._payment_executor.execute(booking_id, payload)
        return await self._finish_mutation(result, "Payment updated successfully", booking_id=booking_id)

    def select_booking(self, booking_id: str | None) -> None:
        # The id may not be loaded yet (deep link before the first fetch).
        self._selected_booking_id = booking_id or None

    def handle_route_query(self, query: Mapping[str, str]) -> None:
        booking_id = query.get(BOOKING_QUERY_PARAM)
        if booking_id:
            self.select_booking(booking_id)

    def navigate_to_booking(self, booking_id: str) -> None:
        self._navigator.push(f"{self._bookings_route}?{BOOKING_QUERY_PARAM}={booking_id}")

    def get_booking_by_id(self, booking_id: str) -> Booking | None:
        for booking in self._bookings:
            if booking.id == booking_id:
                return booking
        return None

    def get_active_bookings(self) -> list[Booking]:
        active = [b for b in self._bookings if b.is_active]
        return sorted(active, key=lambda b: b.booking_date)

    def get_past_bookings(self) -> list[Booking]:
        past = [b for b in self._bookings if b.is_past]
        return sorted(past, key=lambda b: b.booking_date, reverse=True)

    def _apply_fetch_result(self, result: RemoteCallResult[list[Booking]]) -> None:
        if result.error is not None:
            self._error = result.error.message
            self._logger.warning(
                "Fetching bookings failed",
                extra={"status_code": result.error.status_code, "error": result.error.message},
            )
            return
        self._bookings = list(result.data or [])
        self._error = None
        self._fetch_executor.reset_retries()

    async def _finish_mutation(
        self,
        result: RemoteCallResult[Booking],
        success_message: str,
        booking_id: str | None,
    ) -> bool:
        if result.error is not None:
            self._error = result.error.message
            self._notifier.error(result.error.message)
            self._logger.warning(
                "Booking mutation failed",
                extra={
                    "booking_id": booking_id,
                    "status_code": result.error.status_code,
                    "error": result.error.message,
                },
            )
            return False

        self._notifier.success(success_message)
        self._logger.info(success_message, extra={"booking_id": booking_id or getattr(result.data, "id", None)})
        await self.fetch_bookings()
        return True
