"""Resilient client facade.

Exposes verb-shaped entry points (get/post/put/patch/delete) over an
abstract Transport. Every call gets its own correlation id, runs through
the RetryExecutor under the configured (or no-retry) policy, and either
returns the decoded result or re-raises the last transport error unchanged.

Retries are applied to every verb, POST included. Only configure a retry
policy for endpoints where repeating a request is safe.
"""

import asyncio
from typing import Any, Optional

from resilient.domain.exceptions import InvalidArgumentError, ensure_not_empty
from resilient.domain.interfaces.logger import LeveledLogger
from resilient.domain.interfaces.transport import Transport
from resilient.domain.models.common import (
    HttpMethod,
    QueryParams,
    RetryOutcome,
    RetryPolicy,
    TargetUrl,
)
from resilient.infrastructure.resilience.correlation import new_correlation_id
from resilient.infrastructure.resilience.retry_executor import RetryExecutor, Sleeper
from resilient.infrastructure.resilience.retry_policy import resolve_policy


class ResilientClient:
    """Simple request client with built-in retry support."""

    def __init__(
        self,
        transport: Transport,
        logger: LeveledLogger,
        retry_policy: Optional[RetryPolicy] = None,
        timeout: Optional[float] = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        """Initializes the client.

        Args:
            transport: Performs one request per attempt.
            logger: Diagnostic sink shared by the client and its executor.
            retry_policy: Policy for every call. No retry if None.
            timeout: Optional deadline in seconds for a whole logical call,
                attempts and delays included.
            sleep: Awaitable used for inter-attempt delays.

        Raises:
            InvalidArgumentError: If transport or logger is missing, or timeout
                is not positive.
        """
        ensure_not_empty(transport, "transport")
        ensure_not_empty(logger, "logger")
        if timeout is not None and timeout <= 0:
            raise InvalidArgumentError("timeout", f"Argument 'timeout' must be greater than zero, got {timeout}.")

        self._transport = transport
        self._logger = logger
        self.retry_policy = resolve_policy(retry_policy)
        self.timeout = timeout
        self._retry = RetryExecutor(logger, sleep=sleep)

    async def get(self, url: str, query_params: Optional[QueryParams] = None) -> Any:
        """Executes a GET operation.

        Args:
            url: URL to call, relative to the transport's base URL.
            query_params: Query parameters to pass to the call.
        """
        ensure_not_empty(url, "url")
        outcome = await self.request(HttpMethod.GET, url, query_params=query_params)
        return outcome.result

    async def post(self, url: str, body: Any = None, query_params: Optional[QueryParams] = None) -> Any:
        """Executes a POST operation with `body` as payload."""
        ensure_not_empty(url, "url")
        outcome = await self.request(HttpMethod.POST, url, body, query_params)
        return outcome.result

    async def put(self, url: str, body: Any = None, query_params: Optional[QueryParams] = None) -> Any:
        """Executes a PUT operation with `body` as payload."""
        ensure_not_empty(url, "url")
        outcome = await self.request(HttpMethod.PUT, url, body, query_params)
        return outcome.result

    async def patch(self, url: str, body: Any = None, query_params: Optional[QueryParams] = None) -> Any:
        """Executes a PATCH operation with a partial `body`."""
        ensure_not_empty(url, "url")
        outcome = await self.request(HttpMethod.PATCH, url, body, query_params)
        return outcome.result

    async def delete(self, url: str, query_params: Optional[QueryParams] = None) -> None:
        """Executes a DELETE operation."""
        ensure_not_empty(url, "url")
        await self.request(HttpMethod.DELETE, url, query_params=query_params)

    async def request(
        self,
        method: HttpMethod,
        url: str,
        body: Any = None,
        query_params: Optional[QueryParams] = None,
    ) -> RetryOutcome:
        """Runs one logical call and returns the outcome with retry diagnostics.

        Raises:
            InvalidArgumentError: If url or method is missing.
            asyncio.TimeoutError: If the client timeout expires first.
            Exception: The last transport error once the budget is spent.
        """
        ensure_not_empty(method, "method")
        ensure_not_empty(url, "url")
        method = HttpMethod(method)
        target = TargetUrl(url)

        correlation_id = new_correlation_id()
        policy = self.retry_policy

        self._logger.debug(correlation_id, f"Doing a {method.value} operation on url {target}")

        async def attempt() -> Any:
            return await self._dispatch(method, target, body, query_params)

        # Set only when the executor gives up, never when wait_for cancels it
        operation_failed = False

        async def run() -> RetryOutcome:
            nonlocal operation_failed
            try:
                return await self._retry.execute(correlation_id, attempt, policy)
            except Exception:
                operation_failed = True
                raise

        try:
            if self.timeout is not None:
                outcome = await asyncio.wait_for(run(), self.timeout)
            else:
                outcome = await run()
        except Exception as e:
            if isinstance(e, asyncio.TimeoutError) and not operation_failed:
                message = f"{method.value} {target} timed out after {self.timeout}s"
            else:
                message = f"{method.value} {target} failed after {max(policy.max_attempts, 1)} attempts"
            self._logger.error(correlation_id, message, e)
            raise

        self._logger.debug(
            correlation_id,
            f"Successfully fetched {target} ({method.value} operation) after {outcome.retries_used} retries",
        )
        return outcome

    async def _dispatch(
        self,
        method: HttpMethod,
        url: TargetUrl,
        body: Any,
        query_params: Optional[QueryParams],
    ) -> Any:
        """Performs exactly one transport call for `method`."""
        if method is HttpMethod.GET:
            return await self._transport.get(url, query_params)
        if method is HttpMethod.POST:
            return await self._transport.post(url, body, query_params)
        if method is HttpMethod.PUT:
            return await self._transport.put(url, body, query_params)
        if method is HttpMethod.PATCH:
            return await self._transport.patch(url, body, query_params)
        if method is HttpMethod.DELETE:
            return await self._transport.delete(url, query_params)
        raise ValueError(f"Method not supported: {method}")
