"""Retry with exponential backoff for provider submissions."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel, Field

from sitewatch.perf_report.errors import ExhaustedRetriesError
from sitewatch.perf_report.models.test_request import BatchTestRequest, TestRequest
from sitewatch.perf_report.models.test_result import ProviderAck
from sitewatch.perf_report.providers.base import PerformanceProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """How many times to try and how long to wait in between."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=1.0, ge=0)

    def delay_before(self, attempt: int) -> float:
        """Return the wait in seconds before the given attempt (1-based).

        The first attempt runs immediately; every later wait doubles the
        previous one, starting at ``base_delay``.
        """
        if attempt <= 1:
            return 0.0
        return self.base_delay * 2 ** (attempt - 2)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    description: str,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> T:
    """Run an async operation, retrying every failure with backoff.

    Args:
        operation: Zero-argument coroutine factory to call on every attempt
        policy: Attempt budget and base delay
        description: Human-readable label used in log messages
        sleep: Awaitable sleep function, defaults to asyncio.sleep

    Returns:
        Whatever the first successful attempt returns

    Raises:
        ExhaustedRetriesError: If the final attempt fails, chained to its error

    """
    sleep = sleep or asyncio.sleep
    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= policy.max_attempts:
                logger.error(
                    f"Attempt {attempt}/{policy.max_attempts} failed for "
                    f"{description}: {e}. Giving up."
                )
                raise ExhaustedRetriesError(description, attempt, e) from e

            attempt += 1
            delay = policy.delay_before(attempt)
            logger.warning(
                f"Attempt {attempt - 1}/{policy.max_attempts} failed for "
                f"{description}: {e}. Retrying in {delay:.1f}s"
            )
            await sleep(delay)


class RetryingClient:
    """Submits requests to a provider, tolerating transient failures.

    Every error is retried the same way; validation failures are not
    distinguished from network or server errors.
    """

    def __init__(
        self,
        provider: PerformanceProvider,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """Wrap a provider with a retry policy."""
        self.provider = provider
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def submit(self, request: TestRequest) -> ProviderAck:
        """Submit a single test, retrying on failure."""
        return await retry_async(
            lambda: self.provider.submit_test(request),
            self.policy,
            f"{request.url} from {request.location}",
            sleep=self._sleep,
        )

    async def submit_batch(self, request: BatchTestRequest) -> ProviderAck:
        """Submit a batch of tests, retrying on failure."""
        return await retry_async(
            lambda: self.provider.submit_batch(request),
            self.policy,
            f"batch of {len(request.urls)} URL(s)",
            sleep=self._sleep,
        )
