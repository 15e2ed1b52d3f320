"""Retry engine for API calls.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Optional

from .classification import ErrorClassifier
from .strategies import BaseStrategy, ExponentialBackoffStrategy
from .types import RetryPolicy, RetryState, T


class RetryExecutor:
    """Runs an operation with bounded retries and exponential backoff.

    Holds only immutable configuration, so one instance can serve any number
    of concurrent calls.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        strategy: Optional[BaseStrategy] = None,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Args:
            policy: Retry policy (default: 3 retries, 1s base, 10s cap)
            strategy: Backoff strategy; built from ``policy`` when omitted
            logger: Logger for attempt reporting
            sleep: Coroutine used for the backoff wait
        """
        self.strategy = strategy or ExponentialBackoffStrategy(policy)
        self.policy = self.strategy.policy
        self.logger = logger or logging.getLogger(__name__)
        self._sleep = sleep

    def _enter(self, state: RetryState, description: str) -> None:
        self.logger.debug(f"{description}: {state.value}")

    async def run(self, operation: Callable[[], Awaitable[T]], description: str = "operation") -> T:
        """Execute ``operation`` until it succeeds or retries are exhausted.

        Args:
            operation: No-argument coroutine function, called once per attempt
            description: Label used in log messages

        Returns:
            The first successful result

        Raises:
            N8nError: the first non-retryable error, or the error of the
                final attempt
        """
        self._enter(RetryState.IDLE, description)
        attempt = 0
        total = self.policy.max_retries + 1

        while True:
            self._enter(RetryState.ATTEMPTING, description)
            self.logger.debug(f"Attempting {description} (attempt {attempt + 1}/{total})")
            try:
                result = await operation()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                error = ErrorClassifier.from_exception(e)
                if error is not e:
                    error.__cause__ = e
            else:
                self._enter(RetryState.SUCCESS, description)
                if attempt:
                    self.logger.info(f"{description} succeeded after {attempt + 1} attempts")
                return result

            if not self.strategy.should_retry(error, attempt):
                self._enter(RetryState.FAILED, description)
                if self.strategy.is_retryable(error):
                    self.logger.error(
                        f"{description} failed after {attempt + 1} attempts: "
                        f"{error.kind.value}: {error.message}"
                    )
                else:
                    self.logger.error(
                        f"{description} failed with non-retryable "
                        f"{error.kind.value}: {error.message}"
                    )
                raise error

            delay = self.strategy.calculate_delay(attempt)
            self._enter(RetryState.RETRY_WAIT, description)
            self.logger.warning(
                f"{description} failed with {error.kind.value}, retrying in {delay}s"
            )
            await self._sleep(delay)
            attempt += 1
