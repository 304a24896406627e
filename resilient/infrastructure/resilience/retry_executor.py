"""Service for executing operations with a bounded, fixed-delay retry policy.

Every attempt of one logical call is tagged with the same correlation id.
Delays are constant between attempts; there is no backoff growth and no
jitter. The executor does not check that an operation is idempotent: that
is the caller's responsibility.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from resilient.domain.exceptions import ensure_not_empty
from resilient.domain.interfaces.logger import LeveledLogger
from resilient.domain.models.common import CorrelationId, RetryOutcome, RetryPolicy
from resilient.infrastructure.resilience.retry_policy import resolve_policy

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
Sleeper = Callable[[float], Awaitable[None]]


class RetryExecutor:
    """Runs an operation, retrying on failure as the policy allows."""

    def __init__(self, logger: LeveledLogger, sleep: Sleeper = asyncio.sleep):
        """Initializes the RetryExecutor.

        Args:
            logger: Sink for per-attempt diagnostics.
            sleep: Awaitable used for the inter-attempt delay.

        Raises:
            InvalidArgumentError: If no logger is given.
        """
        ensure_not_empty(logger, "logger")
        self._logger = logger
        self._sleep = sleep

    async def execute(
        self,
        correlation_id: CorrelationId,
        operation: Operation,
        policy: Optional[RetryPolicy] = None,
    ) -> RetryOutcome:
        """Executes `operation` until it succeeds or the budget is spent.

        Each successful attempt and each intermediate failure produce exactly
        one debug line. The terminal failure is not logged here; it is
        re-raised as is, with the same exception object the operation raised.

        Cancellation (asyncio.CancelledError, including the one injected by
        asyncio.wait_for) is not an Exception subclass and is never retried:
        it stops the loop whether the operation or the delay is in progress.

        Args:
            correlation_id: Id tying together the log lines of this call.
            operation: Zero-argument coroutine function performing one attempt.
            policy: Retry policy; the shared no-retry policy if None.

        Returns:
            A RetryOutcome with the result and the budget left at success.

        Raises:
            Exception: Whatever the last attempt raised, once no retry is left.
        """
        policy = resolve_policy(policy)
        max_attempts = max(policy.max_attempts, 1)
        attempts_remaining = max_attempts

        while True:
            try:
                result = await operation()
            except Exception as e:
                if attempts_remaining <= 1:
                    raise
                await self._sleep(policy.delay_seconds)
                attempts_remaining -= 1
                self._logger.debug(correlation_id, f"Starting retry {attempts_remaining}", e)
                continue

            self._logger.debug(correlation_id, "Successfully fetched result")
            return RetryOutcome(
                result=result,
                attempts_remaining=attempts_remaining,
                max_attempts=max_attempts,
            )
