from abc import ABC, abstractmethod


class NavigatorPort(ABC):
    @abstractmethod
    def push(self, route: str) -> None:
        """Navigate to route (path plus optional query string)."""
        raise NotImplementedError
