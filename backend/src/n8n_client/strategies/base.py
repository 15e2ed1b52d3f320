"""
Base class for retry strategies.
"""
from abc import ABC, abstractmethod

from ..exceptions import N8nError
from ..types import RetryPolicy


class BaseStrategy(ABC):
    """Base class for retry strategies driven by a ``RetryPolicy``."""

    def __init__(self, policy: RetryPolicy = None):
        self.policy = policy or RetryPolicy()

    @property
    def max_retries(self) -> int:
        return self.policy.max_retries

    @abstractmethod
    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay before next retry attempt.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        pass

    def is_retryable(self, error: N8nError) -> bool:
        """Whether the error kind may ever be retried."""
        return error.kind not in self.policy.non_retryable_kinds

    def should_retry(self, error: N8nError, attempt: int) -> bool:
        """
        Determine if operation should be retried.

        Args:
            error: The classified error
            attempt: Current attempt number (0-indexed)

        Returns:
            True if should retry, False otherwise
        """
        if not self.is_retryable(error):
            return False
        return attempt < self.policy.max_retries

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name for logging."""
        pass
