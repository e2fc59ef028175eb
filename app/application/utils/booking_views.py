from __future__ import annotations

from enum import Enum
from typing import Iterable

from app.domain.entities.booking import ACTIVE_STATUSES, Booking


class SortOption(str, Enum):
    date_asc = "date_asc"
    date_desc = "date_desc"
    price_asc = "price_asc"
    price_desc = "price_desc"


def filter_bookings(bookings: Iterable[Booking], term: str) -> list[Booking]:
    """Case-insensitive match on service name or provider name. Blank term keeps everything."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(bookings)
    return [
        b
        for b in bookings
        if needle in b.service.name.lower() or needle in (b.service.provider.name or "").lower()
    ]


def sort_bookings(bookings: Iterable[Booking], option: SortOption | str = SortOption.date_desc) -> list[Booking]:
    option = SortOption(option)
    if option is SortOption.date_asc:
        return sorted(bookings, key=lambda b: b.booking_date)
    if option is SortOption.date_desc:
        return sorted(bookings, key=lambda b: b.booking_date, reverse=True)
    if option is SortOption.price_asc:
        return sorted(bookings, key=lambda b: b.price)
    return sorted(bookings, key=lambda b: b.price, reverse=True)


def can_cancel(booking: Booking) -> bool:
    return booking.status in ACTIVE_STATUSES
