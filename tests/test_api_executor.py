"""
Tests for ApiExecutor lifecycle, error normalization and bounded retry.
"""

from __future__ import annotations

import asyncio

import pytest

from app.application.utils.api_executor import ApiExecutor, TransformingApiExecutor
from app.domain.entities.api_result import ErrorEnvelope, ExecutorState, RemoteCallResult


def test_execute_stores_data_and_clears_loading():
    seen_loading: list[bool] = []

    async def fetch():
        seen_loading.append(executor.is_loading)
        return RemoteCallResult.ok(["a", "b"])

    executor = ApiExecutor(fetch)
    result = asyncio.run(executor.execute())

    assert seen_loading == [True]
    assert result.data == ["a", "b"]
    assert executor.data == ["a", "b"]
    assert executor.error is None
    assert executor.is_loading is False
    assert executor.retry_count == 0


def test_execute_returns_handled_error_unchanged():
    envelope = ErrorEnvelope(message="Service not found", status_code=404)

    async def create():
        return RemoteCallResult.failure(envelope)

    executor = ApiExecutor(create)
    result = asyncio.run(executor.execute())

    assert result.error is envelope
    assert executor.error is envelope
    assert executor.data is None
    assert executor.is_loading is False


def test_exactly_one_of_data_or_error_after_each_call():
    outcomes = [
        RemoteCallResult.ok({"id": 1}),
        RemoteCallResult.failure(ErrorEnvelope(message="boom", status_code=500)),
        RemoteCallResult.ok({"id": 2}),
    ]

    async def call():
        return outcomes.pop(0)

    executor = ApiExecutor(call)

    async def run():
        states = []
        for _ in range(3):
            await executor.execute()
            states.append((executor.data, executor.error, executor.is_loading))
        return states

    states = asyncio.run(run())
    for data, error, is_loading in states:
        assert (data is None) != (error is None)
        assert is_loading is False
    assert states[1][0] is None
    assert states[2][0] == {"id": 2}


def test_thrown_exception_becomes_500_envelope():
    """A raised exception becomes a 500 error envelope instead of propagating."""

    async def fetch():
        raise TypeError("fetch failed")

    executor = ApiExecutor(fetch)
    result = asyncio.run(executor.execute())

    assert result.error is not None
    assert result.error.status_code == 500
    assert "fetch failed" in result.error.message
    assert result.error.timestamp
    assert executor.error == result.error
    assert executor.is_loading is False


def test_exception_without_message_uses_generic_fallback():
    async def fetch():
        raise RuntimeError()

    executor = ApiExecutor(fetch)
    result = asyncio.run(executor.execute())

    assert result.error.message == "An error occurred"
    assert result.error.status_code == 500


def test_retry_is_bounded_by_max_retries():
    """With max_retries=3 the fourth retry leaves the state untouched."""
    calls = {"count": 0}

    async def fetch():
        calls["count"] += 1
        return RemoteCallResult.failure(ErrorEnvelope(message="unavailable", status_code=503))

    executor = ApiExecutor(fetch, max_retries=3)

    async def run():
        await executor.execute()
        for _ in range(4):
            await executor.retry()

    asyncio.run(run())

    assert calls["count"] == 4
    assert executor.retry_count == 3
    assert executor.can_retry is False
    assert executor.is_retrying is False


def test_retry_replays_last_arguments():
    received: list[tuple] = []

    async def update(booking_id, payload, *, note=None):
        received.append((booking_id, payload, note))
        return RemoteCallResult.ok(booking_id)

    executor = ApiExecutor(update)

    async def run():
        await executor.execute("b1", {"status": "cancelled"}, note="x")
        await executor.retry()

    asyncio.run(run())

    assert received == [("b1", {"status": "cancelled"}, "x"), ("b1", {"status": "cancelled"}, "x")]
    assert executor.retry_count == 1


def test_is_retrying_is_set_during_retry_and_cleared_after_failure():
    seen: list[bool] = []

    async def fetch():
        seen.append(executor.is_retrying)
        raise ConnectionError("down")

    executor = ApiExecutor(fetch)

    async def run():
        await executor.execute()
        await executor.retry()

    asyncio.run(run())

    assert seen == [False, True]
    assert executor.is_retrying is False
    assert executor.error.status_code == 500


def test_reset_restores_initial_state():
    async def fetch():
        return RemoteCallResult.ok(1)

    executor = ApiExecutor(fetch, max_retries=2)

    async def run():
        await executor.execute()
        await executor.retry()
        await executor.retry()

    asyncio.run(run())
    assert executor.retry_count == 2

    executor.reset()

    assert executor.state == ExecutorState()
    assert executor.can_retry is True


def test_last_resolved_call_wins_by_default():
    async def run(discard_stale: bool):
        gates = {"slow": asyncio.Event(), "fast": asyncio.Event()}

        async def call(name):
            await gates[name].wait()
            return RemoteCallResult.ok(name)

        executor = ApiExecutor(call, discard_stale=discard_stale)
        slow = asyncio.create_task(executor.execute("slow"))
        fast = asyncio.create_task(executor.execute("fast"))
        await asyncio.sleep(0)
        gates["fast"].set()
        await fast
        gates["slow"].set()
        slow_result = await slow
        return executor, slow_result

    executor, slow_result = asyncio.run(run(discard_stale=False))
    assert executor.data == "slow"
    assert slow_result.data == "slow"

    executor, slow_result = asyncio.run(run(discard_stale=True))
    assert executor.data == "fast"
    assert slow_result.data == "slow"
    assert executor.is_loading is False


def test_transforming_executor_keeps_transformed_data():
    async def fetch():
        return RemoteCallResult.ok([3, 1, 2])

    executor = TransformingApiExecutor(fetch, transform=sorted)
    asyncio.run(executor.execute())

    assert executor.data == [3, 1, 2]
    assert executor.transformed_data == [1, 2, 3]

    executor.reset()
    assert executor.transformed_data is None


def test_transform_failure_is_reported_not_raised():
    async def fetch():
        return RemoteCallResult.ok({"items": None})

    executor = TransformingApiExecutor(fetch, transform=lambda data: len(data["items"]))
    result = asyncio.run(executor.execute())

    assert result.error is not None
    assert result.error.status_code == 500
    assert executor.data is None
    assert executor.transformed_data is None


def test_remote_call_result_requires_exactly_one_branch():
    with pytest.raises(ValueError):
        RemoteCallResult()
    with pytest.raises(ValueError):
        RemoteCallResult(data=1, error=ErrorEnvelope(message="x", status_code=500))


def test_transformed_data_is_cleared_with_data_on_error():
    results = [
        RemoteCallResult.ok([2, 1]),
        RemoteCallResult.failure(ErrorEnvelope(message="unavailable", status_code=503)),
    ]

    async def fetch():
        return results.pop(0)

    executor = TransformingApiExecutor(fetch, transform=sorted)
    asyncio.run(executor.execute())
    assert executor.transformed_data == [1, 2]

    asyncio.run(executor.execute())

    assert executor.data is None
    assert executor.error.status_code == 503
    assert executor.transformed_data is None


def test_reset_retries_restores_budget_and_keeps_data():
    async def fetch():
        return RemoteCallResult.ok("done")

    executor = ApiExecutor(fetch, max_retries=1)

    async def run():
        await executor.execute()
        await executor.retry()

    asyncio.run(run())
    assert executor.can_retry is False

    executor.reset_retries()

    assert executor.can_retry is True
    assert executor.data == "done"
