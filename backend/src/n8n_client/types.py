"""
Shared type definitions for the n8n call layer.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TypeVar


# Type variables
T = TypeVar('T')


class ErrorKind(Enum):
    """Closed set of failure categories."""
    CONNECTION_FAILED = "CONNECTION_FAILED"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ACTIVATION_FAILED = "ACTIVATION_FAILED"
    WEBHOOK_ERROR = "WEBHOOK_ERROR"
    API_ERROR = "API_ERROR"
    UNKNOWN = "UNKNOWN"


class RetryState(Enum):
    """States of a single retry loop."""
    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRY_WAIT = "retry_wait"
    SUCCESS = "success"
    FAILED = "failed"


NON_RETRYABLE_KINDS = frozenset({
    ErrorKind.UNAUTHORIZED,
    ErrorKind.FORBIDDEN,
    ErrorKind.NOT_FOUND,
    ErrorKind.VALIDATION_ERROR,
})


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry behavior.

    Delays are in seconds.
    """
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0
    non_retryable_kinds: frozenset = field(default=NON_RETRYABLE_KINDS)

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be >= 0")


@dataclass(frozen=True)
class RequestDescriptor:
    """Parameters of one outbound API call."""
    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Optional[Any] = None
    timeout: float = 30.0
