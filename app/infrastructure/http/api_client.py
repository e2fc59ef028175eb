from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

import httpx

from app.application.exceptions import ApiError
from app.application.ports.token_store import TokenStorePort
from app.domain.entities.api_result import ErrorEnvelope, RemoteCallResult

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again later."
NETWORK_ERROR_MESSAGE = "Network error. Please check your internet connection."
TIMEOUT_ERROR_MESSAGE = "Request timeout. Please try again."
EMPTY_RESPONSE_MESSAGE = "The server returned an empty response. Please refresh to see the latest state."

RETRYABLE_METHODS = frozenset({"GET"})


def is_retryable(error: ApiError) -> bool:
    """Transport failures and server errors are retried; client errors never are."""
    return error.status_code in (0, 408) or error.status_code >= 500


class ApiClient:
    """
    JSON-over-HTTP transport for the health-card backend.

    request() raises ApiError for every failure (non-2xx, timeout, network);
    call() is the normalization layer that turns the same outcomes into a
    RemoteCallResult for ApiExecutor.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStorePort | None = None,
        timeout: float = 30.0,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token_store = token_store
        self._retry_attempts = retry_attempts
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._logger = logging.getLogger(__name__)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def call(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> RemoteCallResult[Any]:
        try:
            payload = await self.request(method, path, json=json, params=params)
        except ApiError as e:
            return RemoteCallResult.failure(ErrorEnvelope(message=e.message, status_code=e.status_code))
        if payload is None:
            self._logger.warning("Empty success body", extra={"method": method.upper(), "endpoint": path})
            return RemoteCallResult.failure(ErrorEnvelope(message=EMPTY_RESPONSE_MESSAGE, status_code=502))
        return RemoteCallResult.ok(payload)

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        method = method.upper()
        if method not in RETRYABLE_METHODS:
            return await self._send(method, path, json=json, params=params)

        attempt = 0
        delay = self._retry_delay
        while True:
            try:
                return await self._send(method, path, json=json, params=params)
            except ApiError as e:
                if attempt >= self._retry_attempts or not is_retryable(e):
                    raise
                attempt += 1
                self._logger.info(
                    "Retrying request",
                    extra={"method": method, "endpoint": path, "attempt": attempt, "status_code": e.status_code},
                )
                await self._sleep(delay)
                delay *= 2

    def build_url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._token_store.get_token() if self._token_store else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        query = {k: v for k, v in (params or {}).items() if v is not None}
        # cache buster
        query["_t"] = str(int(time.time() * 1000))

        try:
            response = await self._client.request(
                method,
                self.build_url(path),
                params=query,
                json=json,
                headers=self._headers(),
            )
        except httpx.TimeoutException as e:
            self._logger.warning("Request timed out", extra={"method": method, "endpoint": path})
            raise ApiError(TIMEOUT_ERROR_MESSAGE, 408) from e
        except httpx.TransportError as e:
            self._logger.warning("Network error", extra={"method": method, "endpoint": path, "error": str(e)})
            raise ApiError(NETWORK_ERROR_MESSAGE, 0) from e

        return self._handle_response(method, path, response)

    def _handle_response(self, method: str, path: str, response: httpx.Response) -> Any:
        payload = _decode_body(response)

        if response.is_success:
            return payload

        message = GENERIC_ERROR_MESSAGE
        if isinstance(payload, dict) and payload.get("message"):
            message = str(payload["message"])

        if response.status_code == 401 and self._token_store is not None:
            self._token_store.clear()

        self._logger.error(
            "API request failed",
            extra={
                "method": method,
                "endpoint": path,
                "status_code": response.status_code,
                "error": message,
            },
        )
        raise ApiError(message, response.status_code, payload)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return {}
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text
