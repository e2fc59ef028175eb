from __future__ import annotations

from datetime import date

from app.application.exceptions import BookingValidationError
from app.application.utils.time_slots import DEFAULT_SLOT_INTERVAL_MINUTES, available_time_slots
from app.domain.entities.booking import CreateBookingData
from app.domain.entities.service import Service, ServiceStatus


def validate_booking_request(
    service: Service,
    booking_date: str,
    time_slot: str,
    today: date | None = None,
    interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
) -> dict[str, str]:
    """
    Client-side checks before a booking is submitted.
    Returns field -> message; an empty dict means the request is valid.
    """
    errors: dict[str, str] = {}
    today = today or date.today()

    if service.status != ServiceStatus.active:
        errors["service"] = "This service is not available for booking"

    parsed_date: date | None = None
    if not booking_date or not booking_date.strip():
        errors["date"] = "Date is required"
    else:
        try:
            parsed_date = date.fromisoformat(booking_date.strip()[:10])
        except ValueError:
            errors["date"] = "Please enter a valid date"
        else:
            if parsed_date < today:
                errors["date"] = "Please select a future date"
                parsed_date = None

    if not time_slot or not time_slot.strip():
        errors["time"] = "Time is required"
    elif parsed_date is not None:
        slots = available_time_slots(service, parsed_date, interval_minutes)
        if time_slot.strip() not in slots:
            errors["time"] = "Please select an available time slot"

    return errors


def build_create_booking_data(
    service: Service,
    booking_date: str,
    time_slot: str,
    special_requirements: str | None = None,
    today: date | None = None,
    interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
) -> CreateBookingData:
    errors = validate_booking_request(service, booking_date, time_slot, today, interval_minutes)
    if errors:
        raise BookingValidationError(errors)
    return CreateBookingData(
        service_id=service.id,
        booking_date=booking_date.strip()[:10],
        time_slot=time_slot.strip(),
        special_requirements=(special_requirements or "").strip() or None,
    )
