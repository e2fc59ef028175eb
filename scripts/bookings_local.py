#!/usr/bin/env python3
"""
Interactive local booking harness (no UI).

Usage:
  USE_MOCK_API=true python3 scripts/bookings_local.py
  API_BASE_URL=http://localhost:5000/api python3 scripts/bookings_local.py

What it does:
- Builds the BookingCoordinator through the project wiring
- Runs booking intents (list, book, cancel, select) against the configured API
- Prints toasts and navigation the UI would have shown
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.exceptions import BookingValidationError
from app.application.use_cases.booking_coordinator import BookingCoordinator
from app.application.utils.booking_validation import build_create_booking_data
from app.application.utils.booking_views import can_cancel
from app.application.utils.time_slots import available_time_slots
from app.core.config import settings
from app.core.logging import configure_logging
from app.domain.entities.booking import Booking
from app.infrastructure.navigation.memory_navigator import MemoryNavigator
from app.infrastructure.notify.notifiers import MemoryNotifier
from app.wiring.dependencies import get_api_client, get_container

HELP = """Commands:
  /list                          -> fetch and show all bookings
  /active | /past                -> show active or past bookings
  /services                      -> list bookable services
  /slots <service_id> <date>     -> show free time slots for a date (YYYY-MM-DD)
  /book <service_id> <date> <HH:MM> [notes...]
  /cancel <booking_id> [reason...]
  /select <booking_id>           -> select a booking (like opening a deep link)
  /retry                         -> retry the last failed fetch
  /quit"""


def _print_bookings(title: str, bookings: list[Booking]) -> None:
    print(f"\n--- {title} ({len(bookings)}) ---")
    for b in bookings:
        marker = " (cancellable)" if can_cancel(b) else ""
        print(
            f"{b.id}  {b.booking_date.date().isoformat()} {b.time_slot}  "
            f"{b.service.name or b.service.id}  {b.status.value}/{b.payment_status.value}  {b.price:.2f}{marker}"
        )
        if b.cancellation_reason:
            print(f"    reason: {b.cancellation_reason}")


def _flush(notifier: MemoryNotifier, navigator: MemoryNavigator, seen_routes: int) -> int:
    for toast in notifier.drain():
        print(f"[{toast.level}] {toast.message}")
    for route in navigator.history[seen_routes:]:
        print(f"(navigate) {route}")
    return len(navigator.history)


async def _handle(command: str, args: list[str], coordinator: BookingCoordinator, services) -> None:
    if command == "/list":
        await coordinator.fetch_bookings()
        if coordinator.error:
            print(f"ERROR: {coordinator.error} (try /retry)")
            return
        _print_bookings("Bookings", coordinator.bookings)
    elif command == "/active":
        _print_bookings("Active", coordinator.get_active_bookings())
    elif command == "/past":
        _print_bookings("Past", coordinator.get_past_bookings())
    elif command == "/retry":
        await coordinator.retry_fetch()
        retries = coordinator.fetch_executor.retry_count
        print(f"retry {retries}/{coordinator.fetch_executor.max_retries}")
        if coordinator.error:
            print(f"ERROR: {coordinator.error}")
        else:
            _print_bookings("Bookings", coordinator.bookings)
    elif command == "/services":
        result = await services.get_all()
        if result.error:
            print(f"ERROR: {result.error.message}")
            return
        for s in result.data:
            print(f"{s.id}  {s.name}  [{s.category.value}, {s.status.value}]  {s.price:.2f}")
    elif command == "/slots" and len(args) >= 2:
        result = await services.get_by_id(args[0])
        if result.error:
            print(f"ERROR: {result.error.message}")
            return
        try:
            slots = available_time_slots(result.data, date.fromisoformat(args[1]), settings.BOOKING_SLOT_INTERVAL_MINUTES)
        except ValueError as e:
            print(f"invalid input: {e}")
            return
        print(", ".join(slots) if slots else "(closed)")
    elif command == "/book" and len(args) >= 3:
        result = await services.get_by_id(args[0])
        if result.error:
            print(f"ERROR: {result.error.message}")
            return
        try:
            data = build_create_booking_data(
                result.data,
                booking_date=args[1],
                time_slot=args[2],
                special_requirements=" ".join(args[3:]) or None,
                interval_minutes=settings.BOOKING_SLOT_INTERVAL_MINUTES,
            )
        except BookingValidationError as e:
            for field, message in e.errors.items():
                print(f"invalid {field}: {message}")
            return
        except ValueError as e:
            print(f"invalid input: {e}")
            return
        ok = await coordinator.create_booking(data)
        print(f"created: {ok}")
    elif command == "/cancel" and args:
        reason = " ".join(args[1:])
        ok = await (coordinator.cancel_booking(args[0], reason) if reason else coordinator.cancel_booking(args[0]))
        print(f"cancelled: {ok}")
    elif command == "/select" and args:
        coordinator.select_booking(args[0])
        selected = coordinator.selected_booking
        print(f"selected: {coordinator.selected_booking_id} -> {selected.id if selected else 'not loaded'}")
    else:
        print(HELP)


async def run() -> None:
    notifier = MemoryNotifier()
    navigator = MemoryNavigator()
    container = get_container(notifier=notifier, navigator=navigator)
    coordinator: BookingCoordinator = container["coordinator"]  # type: ignore[assignment]
    services = container["services"]

    print("\nLocal Booking Harness")
    print("-" * 60)
    print(f"api: {'mock' if settings.USE_MOCK_API else settings.API_BASE_URL}")
    print(HELP)
    print("-" * 60)

    seen_routes = 0
    try:
        while True:
            try:
                line = (await asyncio.to_thread(input, "\n> ")).strip()
            except (EOFError, KeyboardInterrupt):
                print("\nBye!")
                return
            if not line:
                continue

            command, *args = line.split()
            command = command.lower()
            if command in ("/quit", "/exit"):
                print("Bye!")
                return

            await _handle(command, args, coordinator, services)
            seen_routes = _flush(notifier, navigator, seen_routes)
    finally:
        if not settings.USE_MOCK_API:
            await get_api_client().aclose()


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(run())


if __name__ == "__main__":
    main()
