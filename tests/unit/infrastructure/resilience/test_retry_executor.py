import asyncio

import pytest
from unittest.mock import AsyncMock, call

from resilient.domain.exceptions import InvalidArgumentError
from resilient.domain.models.common import CorrelationId, LogLevel, RetryPolicy
from resilient.infrastructure.monitoring.loggers import MemoryLogger
from resilient.infrastructure.resilience.retry_executor import RetryExecutor

CID = CorrelationId("7f1c2d3e-0000-4000-8000-000000000001")


@pytest.fixture
def executor(memory_logger, fake_sleep):
    return RetryExecutor(memory_logger, sleep=fake_sleep)


def test_requires_logger():
    with pytest.raises(InvalidArgumentError, match="logger"):
        RetryExecutor(None)


@pytest.mark.asyncio
async def test_first_attempt_success(executor, flaky, fake_sleep, memory_logger):
    operation = flaky(failures=0, value={"id": 1})

    outcome = await executor.execute(CID, operation, RetryPolicy(max_attempts=3, delay_seconds=0.5))

    assert outcome.result == {"id": 1}
    assert outcome.attempts_remaining == 3
    assert outcome.retries_used == 0
    assert outcome.attempts_made == 1
    assert operation.calls == 1
    fake_sleep.assert_not_awaited()
    assert memory_logger.messages() == [f"{CID} Successfully fetched result"]


@pytest.mark.asyncio
async def test_fails_twice_then_succeeds(executor, flaky, fake_sleep, memory_logger):
    """3 attempts with 50ms delay, operation fails twice then returns 'ok'."""
    operation = flaky(failures=2, value="ok")

    outcome = await executor.execute(CID, operation, RetryPolicy(max_attempts=3, delay_seconds=0.05))

    assert outcome.result == "ok"
    assert operation.calls == 3
    assert fake_sleep.await_args_list == [call(0.05), call(0.05)]
    assert outcome.attempts_remaining == 1
    assert outcome.retries_used == 2
    assert outcome.attempts_made == 3

    assert memory_logger.messages() == [
        f'{CID} Starting retry 2 with error "attempt 1 failed"',
        f'{CID} Starting retry 1 with error "attempt 2 failed"',
        f"{CID} Successfully fetched result",
    ]
    assert all(entry.level == LogLevel.DEBUG for entry in memory_logger.entries)
    assert all(entry.correlation_id == CID for entry in memory_logger.entries)


@pytest.mark.asyncio
@pytest.mark.parametrize("max_attempts", [1, 2, 3, 5])
async def test_always_failing_operation_exhausts_budget(memory_logger, flaky, max_attempts):
    sleep = AsyncMock(return_value=None)
    executor = RetryExecutor(memory_logger, sleep=sleep)
    operation = flaky(failures=None)

    with pytest.raises(ConnectionError) as exc_info:
        await executor.execute(CID, operation, RetryPolicy(max_attempts=max_attempts, delay_seconds=0.2))

    assert operation.calls == max_attempts
    assert sleep.await_count == max_attempts - 1
    assert all(c == call(0.2) for c in sleep.await_args_list)
    # The very exception object raised by the last attempt reaches the caller
    assert exc_info.value is operation.errors[-1]
    # One line per intermediate failure, nothing for the terminal one
    assert len(memory_logger.entries) == max_attempts - 1


@pytest.mark.asyncio
async def test_single_attempt_never_delays(executor, flaky, fake_sleep, memory_logger):
    """1 attempt with a 1s delay: immediate propagation, no delay."""
    error = RuntimeError("E")
    operation = flaky(failures=None, error_factory=lambda n: error)

    with pytest.raises(RuntimeError) as exc_info:
        await executor.execute(CID, operation, RetryPolicy(max_attempts=1, delay_seconds=1.0))

    assert exc_info.value is error
    assert operation.calls == 1
    fake_sleep.assert_not_awaited()
    assert memory_logger.entries == []


@pytest.mark.asyncio
async def test_no_policy_means_no_retry(executor, flaky, fake_sleep):
    operation = flaky(failures=None)

    with pytest.raises(ConnectionError):
        await executor.execute(CID, operation)

    assert operation.calls == 1
    fake_sleep.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("max_attempts", [0, -3])
async def test_non_positive_budget_behaves_like_one(executor, flaky, fake_sleep, max_attempts):
    operation = flaky(failures=None)

    with pytest.raises(ConnectionError):
        await executor.execute(CID, operation, RetryPolicy(max_attempts=max_attempts, delay_seconds=0.1))

    assert operation.calls == 1
    fake_sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_success_with_non_positive_budget_reports_one_attempt(executor, flaky):
    outcome = await executor.execute(CID, flaky(failures=0), RetryPolicy(max_attempts=0))

    assert outcome.max_attempts == 1
    assert outcome.retries_used == 0


@pytest.mark.asyncio
async def test_error_kind_is_not_translated(executor, flaky):
    class UpstreamError(Exception):
        pass

    operation = flaky(failures=None, error_factory=lambda n: UpstreamError(f"boom {n}"))

    with pytest.raises(UpstreamError, match="boom 2"):
        await executor.execute(CID, operation, RetryPolicy(max_attempts=2))


@pytest.mark.asyncio
async def test_large_budget_does_not_grow_the_stack(memory_logger, flaky, fake_sleep):
    executor = RetryExecutor(memory_logger, sleep=fake_sleep)
    operation = flaky(failures=4999, value="done")

    outcome = await executor.execute(CID, operation, RetryPolicy(max_attempts=5000))

    assert outcome.result == "done"
    assert operation.calls == 5000


@pytest.mark.asyncio
async def test_concurrent_calls_keep_separate_budgets(fake_sleep, flaky):
    logger = MemoryLogger()
    executor = RetryExecutor(logger, sleep=fake_sleep)
    first = flaky(failures=2, value="a")
    second = flaky(failures=None)
    policy = RetryPolicy(max_attempts=3)

    results = await asyncio.gather(
        executor.execute(CorrelationId("call-a"), first, policy),
        executor.execute(CorrelationId("call-b"), second, policy),
        return_exceptions=True,
    )

    assert results[0].result == "a"
    assert isinstance(results[1], ConnectionError)
    assert first.calls == 3
    assert second.calls == 3
    assert {e.correlation_id for e in logger.entries} == {"call-a", "call-b"}


@pytest.mark.asyncio
async def test_cancellation_during_delay_stops_retrying(memory_logger, flaky):
    """A timeout around the call aborts the pending delay instead of retrying."""
    executor = RetryExecutor(memory_logger)  # real asyncio.sleep
    operation = flaky(failures=None)

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(
            executor.execute(CID, operation, RetryPolicy(max_attempts=10, delay_seconds=5.0)),
            timeout=0.05,
        )

    assert operation.calls == 1


@pytest.mark.asyncio
async def test_cancelled_operation_is_not_retried(executor, fake_sleep):
    calls = 0

    async def operation():
        nonlocal calls
        calls += 1
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await executor.execute(CID, operation, RetryPolicy(max_attempts=3))

    assert calls == 1
    fake_sleep.assert_not_awaited()
