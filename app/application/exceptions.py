from __future__ import annotations

from typing import Any


class ApiError(RuntimeError):
    """Raised by the HTTP transport for non-2xx responses, timeouts and network failures."""

    def __init__(self, message: str, status_code: int = 500, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class BookingValidationError(ValueError):
    """Raised when booking form input does not pass client-side validation."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors
