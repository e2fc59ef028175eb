from __future__ import annotations

import logging

from app.application.ports.navigator import NavigatorPort


class MemoryNavigator(NavigatorPort):
    def __init__(self) -> None:
        self.history: list[str] = []
        self._logger = logging.getLogger(__name__)

    @property
    def current(self) -> str | None:
        return self.history[-1] if self.history else None

    def push(self, route: str) -> None:
        self.history.append(route)
        self._logger.info("Navigate", extra={"route": route})
