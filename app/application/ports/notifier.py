from abc import ABC, abstractmethod


class NotifierPort(ABC):
    """User-facing notifications (toasts)."""

    @abstractmethod
    def success(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def error(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def info(self, message: str) -> None:
        raise NotImplementedError
