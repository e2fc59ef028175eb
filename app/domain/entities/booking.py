from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


ACTIVE_STATUSES = frozenset({BookingStatus.pending, BookingStatus.confirmed})
PAST_STATUSES = frozenset({BookingStatus.completed, BookingStatus.cancelled})

DEFAULT_CANCELLATION_REASON = "Cancelled by user"


def parse_booking_date(value: str | datetime) -> datetime:
    """
    Parse an ISO date or datetime string into an aware datetime.
    Naive values are treated as UTC so dates from different sources stay comparable.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class ProviderRef:
    id: str | None = None
    name: str = ""


@dataclass(frozen=True)
class BookedService:
    name: str
    provider: ProviderRef = ProviderRef()
    id: str | None = None
    category: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class BookingUser:
    id: str | None = None
    name: str | None = None
    mobile: str | None = None


@dataclass(frozen=True)
class Booking:
    id: str
    service: BookedService
    booking_date: datetime
    time_slot: str
    price: float
    status: BookingStatus = BookingStatus.pending
    payment_status: PaymentStatus = PaymentStatus.pending
    user: BookingUser | None = None
    payment_id: str | None = None
    cancellation_reason: str | None = None
    special_requirements: str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "booking_date", parse_booking_date(self.booking_date))
        if self.created_at is not None:
            object.__setattr__(self, "created_at", parse_booking_date(self.created_at))

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_past(self) -> bool:
        return self.status in PAST_STATUSES


@dataclass(frozen=True)
class CreateBookingData:
    service_id: str
    booking_date: str  # ISO date, e.g. 2025-06-01
    time_slot: str  # HH:MM
    special_requirements: str | None = None


@dataclass(frozen=True)
class UpdateBookingStatusData:
    status: BookingStatus
    cancellation_reason: str | None = None


@dataclass(frozen=True)
class UpdatePaymentStatusData:
    payment_status: PaymentStatus
    payment_id: str
