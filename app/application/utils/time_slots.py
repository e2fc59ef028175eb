from __future__ import annotations

import re
from datetime import date

from app.domain.entities.service import WEEKDAYS, Service

DEFAULT_SLOT_INTERVAL_MINUTES = 30

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_clock_time(value: str) -> int:
    """Parse 'HH:MM' into minutes since midnight. Raises ValueError when malformed."""
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return hour * 60 + minute


def format_clock_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def generate_time_slots(
    start_time: str,
    end_time: str,
    interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
) -> list[str]:
    """Slots from start_time (inclusive) to end_time (exclusive), every interval_minutes."""
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")

    current = parse_clock_time(start_time)
    end = parse_clock_time(end_time)

    slots: list[str] = []
    while current < end:
        slots.append(format_clock_time(current))
        current += interval_minutes
    return slots


def available_time_slots(
    service: Service,
    on_date: date,
    interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
) -> list[str]:
    """Slots offered by service on on_date; empty when the service is closed that day."""
    hours = service.hours_for(WEEKDAYS[on_date.weekday()])
    if not hours or not hours.open or not hours.close:
        return []
    return generate_time_slots(hours.open, hours.close, interval_minutes)
