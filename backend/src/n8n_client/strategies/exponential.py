"""
Exponential backoff retry strategy.
"""
from .base import BaseStrategy


class ExponentialBackoffStrategy(BaseStrategy):
    """
    Exponential backoff strategy.

    Delay doubles with each attempt:
    delay = min(base_delay * (2 ** attempt), max_delay)
    """

    backoff_factor = 2.0

    def calculate_delay(self, attempt: int) -> float:
        """Calculate exponentially increasing delay."""
        delay = self.policy.base_delay * (self.backoff_factor ** attempt)
        return min(delay, self.policy.max_delay)

    @property
    def name(self) -> str:
        return (
            f"ExponentialBackoff(base={self.policy.base_delay}, "
            f"max={self.policy.max_delay})"
        )
