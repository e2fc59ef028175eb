from abc import ABC, abstractmethod


class TokenStorePort(ABC):
    @abstractmethod
    def get_token(self) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def set_token(self, token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError
