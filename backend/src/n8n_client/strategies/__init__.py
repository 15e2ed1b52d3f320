"""
Retry strategies.
"""
from .base import BaseStrategy
from .exponential import ExponentialBackoffStrategy


__all__ = [
    'BaseStrategy',
    'ExponentialBackoffStrategy',
]
