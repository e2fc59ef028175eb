"""
Tests for the httpx transport: headers, error mapping, token handling and GET retry policy.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from app.application.exceptions import ApiError
from app.infrastructure.auth.token_store import MemoryTokenStore
from app.infrastructure.http.api_client import (
    EMPTY_RESPONSE_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    TIMEOUT_ERROR_MESSAGE,
    ApiClient,
)

BASE_URL = "http://api.test/api"


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _client(handler, token_store=None, sleep=None, retry_attempts: int = 3) -> ApiClient:
    return ApiClient(
        BASE_URL,
        token_store=token_store,
        retry_attempts=retry_attempts,
        retry_delay=1.0,
        transport=httpx.MockTransport(handler),
        sleep=sleep or SleepRecorder(),
    )


def test_get_sends_auth_header_and_cache_buster():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=[{"ok": True}])

    async def run():
        async with _client(handler, token_store=MemoryTokenStore("tok")) as client:
            return await client.get("/bookings", params={"status": "pending", "category": None})

    payload = asyncio.run(run())

    assert payload == [{"ok": True}]
    request = captured[0]
    assert request.url.path == "/api/bookings"
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.headers["Content-Type"] == "application/json"
    assert request.url.params["status"] == "pending"
    assert "category" not in request.url.params
    assert request.url.params["_t"].isdigit()


def test_no_auth_header_without_token():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={})

    async def run():
        async with _client(handler, token_store=MemoryTokenStore()) as client:
            await client.get("/services")

    asyncio.run(run())
    assert "Authorization" not in captured[0].headers


def test_post_sends_json_body():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(201, json={"_id": "b1"})

    async def run():
        async with _client(handler) as client:
            return await client.post("/bookings", json={"serviceId": "S1"})

    assert asyncio.run(run()) == {"_id": "b1"}
    assert captured[0].method == "POST"
    assert json.loads(captured[0].content) == {"serviceId": "S1"}


def test_server_message_is_surfaced_verbatim():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Service not found"})

    async def run():
        async with _client(handler) as client:
            return await client.call("POST", "/bookings", json={})

    result = asyncio.run(run())

    assert result.error is not None
    assert result.error.message == "Service not found"
    assert result.error.status_code == 404


def test_non_json_error_uses_generic_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad gateway")

    async def run():
        async with _client(handler) as client:
            await client.put("/bookings/b1", json={"status": "cancelled"})

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(run())

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Something went wrong. Please try again later."
    assert exc_info.value.payload == "Bad gateway"


def test_unauthorized_clears_token_and_is_not_retried():
    attempts = {"count": 0}
    store = MemoryTokenStore("expired")
    sleep = SleepRecorder()

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(401, json={"message": "Not authorized, token failed"})

    async def run():
        async with _client(handler, token_store=store, sleep=sleep) as client:
            return await client.call("GET", "/bookings")

    result = asyncio.run(run())

    assert result.error.status_code == 401
    assert store.get_token() is None
    assert attempts["count"] == 1
    assert sleep.delays == []


def test_get_retries_server_errors_with_backoff():
    responses = [
        httpx.Response(500, json={"message": "Server error"}),
        httpx.Response(503, json={"message": "Unavailable"}),
        httpx.Response(200, json=[]),
    ]
    sleep = SleepRecorder()

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    async def run():
        async with _client(handler, sleep=sleep) as client:
            return await client.call("GET", "/bookings")

    result = asyncio.run(run())

    assert result.data == []
    assert sleep.delays == [1.0, 2.0]


def test_get_gives_up_after_retry_attempts():
    attempts = {"count": 0}
    sleep = SleepRecorder()

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        raise httpx.ReadTimeout("timed out", request=request)

    async def run():
        async with _client(handler, sleep=sleep, retry_attempts=3) as client:
            return await client.call("GET", "/bookings")

    result = asyncio.run(run())

    assert attempts["count"] == 4
    assert sleep.delays == [1.0, 2.0, 4.0]
    assert result.error.status_code == 408
    assert result.error.message == TIMEOUT_ERROR_MESSAGE


def test_client_errors_and_mutations_are_not_retried():
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if request.method == "GET":
            return httpx.Response(404, json={"message": "Booking not found"})
        return httpx.Response(500, json={"message": "Server error"})

    async def run():
        async with _client(handler) as client:
            missing = await client.call("GET", "/bookings/nope")
            failed = await client.call("PUT", "/bookings/b1", json={"status": "cancelled"})
            return missing, failed

    missing, failed = asyncio.run(run())

    assert missing.error.status_code == 404
    assert failed.error.status_code == 500
    assert attempts["count"] == 2


def test_network_failure_maps_to_status_zero():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with _client(handler, retry_attempts=0) as client:
            return await client.call("GET", "/bookings")

    result = asyncio.run(run())

    assert result.error.status_code == 0
    assert result.error.message == NETWORK_ERROR_MESSAGE


def test_build_url_keeps_absolute_urls():
    client = _client(lambda request: httpx.Response(200))
    try:
        assert client.build_url("/bookings") == "http://api.test/api/bookings"
        assert client.build_url("bookings/b1") == "http://api.test/api/bookings/b1"
        assert client.build_url("https://other.test/x") == "https://other.test/x"
    finally:
        asyncio.run(client.aclose())


def test_null_success_body_becomes_readable_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"null", headers={"content-type": "application/json"})

    async def run():
        async with _client(handler) as client:
            return await client.call("PUT", "/bookings/b1", json={"status": "cancelled"})

    result = asyncio.run(run())

    assert result.data is None
    assert result.error.status_code == 502
    assert result.error.message == EMPTY_RESPONSE_MESSAGE
