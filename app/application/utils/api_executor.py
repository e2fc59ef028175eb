from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from app.domain.entities.api_result import ErrorEnvelope, ExecutorState, RemoteCallResult

T = TypeVar("T")
U = TypeVar("U")

RemoteCall = Callable[..., Awaitable[RemoteCallResult[T]]]

DEFAULT_MAX_RETRIES = 3


class ApiExecutor(Generic[T]):
    """
    Runs one asynchronous remote call and tracks its lifecycle in an ExecutorState.

    Contract:
    - execute() never raises; raised exceptions become a 500 ErrorEnvelope.
    - After execute() settles exactly one of state.data / state.error is set
      and state.is_loading is False.
    - retry() replays the most recent execute() arguments, at most max_retries times
      until reset() or reset_retries().
    - With discard_stale=True a result from a superseded call is returned to its
      caller but does not touch the state. Otherwise the last call to resolve wins.
    """

    def __init__(
        self,
        function: RemoteCall[T],
        max_retries: int = DEFAULT_MAX_RETRIES,
        discard_stale: bool = False,
    ) -> None:
        self._function = function
        self._max_retries = max_retries
        self._discard_stale = discard_stale
        self._state: ExecutorState[T] = ExecutorState()
        self._sequence = 0
        self._last_args: tuple[Any, ...] = ()
        self._last_kwargs: dict[str, Any] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> ExecutorState[T]:
        return self._state

    @property
    def data(self) -> T | None:
        return self._state.data

    @property
    def error(self) -> ErrorEnvelope | None:
        return self._state.error

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_retrying(self) -> bool:
        return self._state.is_retrying

    @property
    def retry_count(self) -> int:
        return self._state.retry_count

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def can_retry(self) -> bool:
        return self._state.retry_count < self._max_retries

    async def execute(self, *args: Any, **kwargs: Any) -> RemoteCallResult[T]:
        self._sequence += 1
        sequence = self._sequence
        self._last_args = args
        self._last_kwargs = kwargs

        self._state.is_loading = True
        self._state.error = None
        try:
            result = await self._function(*args, **kwargs)
        except Exception as e:
            self._logger.warning(
                "Remote call raised",
                extra={"function": _name_of(self._function), "error": str(e)},
            )
            result = RemoteCallResult.failure(ErrorEnvelope.from_exception(e))
        finally:
            if self._is_current(sequence):
                self._state.is_loading = False

        if not self._is_current(sequence):
            return result

        if result.error is not None:
            self._state.error = result.error
            self._state.data = None
        else:
            self._state.data = result.data
            self._state.error = None
        return result

    async def retry(self) -> None:
        if not self.can_retry:
            self._logger.info(
                "Retry limit reached",
                extra={"function": _name_of(self._function), "retry_count": self._state.retry_count},
            )
            return

        self._state.is_retrying = True
        self._state.retry_count += 1
        try:
            await self.execute(*self._last_args, **self._last_kwargs)
        finally:
            self._state.is_retrying = False

    def reset_retries(self) -> None:
        self._state.retry_count = 0

    def reset(self) -> None:
        self._state = ExecutorState()
        self._last_args = ()
        self._last_kwargs = {}

    def _is_current(self, sequence: int) -> bool:
        return not self._discard_stale or sequence == self._sequence


class TransformingApiExecutor(ApiExecutor[T], Generic[T, U]):
    """ApiExecutor that also keeps transform(data) of the last successful call."""

    def __init__(
        self,
        function: RemoteCall[T],
        transform: Callable[[T], U],
        max_retries: int = DEFAULT_MAX_RETRIES,
        discard_stale: bool = False,
    ) -> None:
        super().__init__(function, max_retries=max_retries, discard_stale=discard_stale)
        self._transform = transform
        self._transformed: U | None = None

    @property
    def transformed_data(self) -> U | None:
        return self._transformed

    async def execute(self, *args: Any, **kwargs: Any) -> RemoteCallResult[T]:
        result = await super().execute(*args, **kwargs)
        if self.data is None:
            self._transformed = None
        if result.data is None or self.data is not result.data:
            return result
        try:
            self._transformed = self._transform(result.data)
        except Exception as e:
            error = ErrorEnvelope.from_exception(e)
            self._transformed = None
            self._state.data = None
            self._state.error = error
            return RemoteCallResult.failure(error)
        return result

    def reset(self) -> None:
        super().reset()
        self._transformed = None


def _name_of(function: Callable[..., Any]) -> str:
    return getattr(function, "__qualname__", None) or getattr(function, "__name__", repr(function))
