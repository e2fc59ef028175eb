from __future__ import annotations

import logging
from dataclasses import dataclass

from app.application.ports.notifier import NotifierPort


@dataclass(frozen=True)
class Toast:
    level: str  # "success" | "error" | "info"
    message: str


class MemoryNotifier(NotifierPort):
    """Collects toasts in memory; used by the local harness and tests."""

    def __init__(self) -> None:
        self.toasts: list[Toast] = []

    def success(self, message: str) -> None:
        self.toasts.append(Toast("success", message))

    def error(self, message: str) -> None:
        self.toasts.append(Toast("error", message))

    def info(self, message: str) -> None:
        self.toasts.append(Toast("info", message))

    def drain(self) -> list[Toast]:
        toasts, self.toasts = self.toasts, []
        return toasts


class LoggingNotifier(NotifierPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def success(self, message: str) -> None:
        self._logger.info("Toast success: %s", message)

    def error(self, message: str) -> None:
        self._logger.error("Toast error: %s", message)

    def info(self, message: str) -> None:
        self._logger.info("Toast info: %s", message)
