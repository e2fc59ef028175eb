from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_ERROR_MESSAGE = "An error occurred"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ErrorEnvelope:
    message: str
    status_code: int
    timestamp: str = field(default_factory=_utc_now_iso)

    @classmethod
    def from_exception(cls, exc: BaseException, status_code: int = 500) -> "ErrorEnvelope":
        return cls(message=str(exc) or DEFAULT_ERROR_MESSAGE, status_code=status_code)


@dataclass(frozen=True)
class RemoteCallResult(Generic[T]):
    """Outcome of a remote operation: exactly one of data / error is present."""

    data: T | None = None
    error: ErrorEnvelope | None = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError("RemoteCallResult requires exactly one of data or error")

    @classmethod
    def ok(cls, data: T) -> "RemoteCallResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: ErrorEnvelope) -> "RemoteCallResult[T]":
        return cls(error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass
class ExecutorState(Generic[T]):
    data: T | None = None
    error: ErrorEnvelope | None = None
    is_loading: bool = False
    is_retrying: bool = False
    retry_count: int = 0
