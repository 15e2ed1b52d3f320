"""Predefined classification rules for HTTP statuses and transport faults."""
import socket
from dataclasses import dataclass
from typing import Optional

import aiohttp

from ..types import ErrorKind


@dataclass(frozen=True)
class StatusRule:
    """How one HTTP status maps onto a structured error."""

    kind: ErrorKind
    message: Optional[str]  # None means "use body message, else fallback"
    default_hint: Optional[str]
    use_body_hint: bool = True
    attach_details: bool = False
    fallback_message: Optional[str] = None


SERVER_ERROR_RULE = StatusRule(
    kind=ErrorKind.API_ERROR,
    message="n8n server error",
    default_hint="The n8n server encountered an error",
    use_body_hint=False,
)

STATUS_RULES: dict[int, StatusRule] = {
    401: StatusRule(
        kind=ErrorKind.UNAUTHORIZED,
        message="Unauthorized - Invalid API key",
        default_hint="Check that N8N_API_KEY is correct",
    ),
    403: StatusRule(
        kind=ErrorKind.FORBIDDEN,
        message="Forbidden - Access denied",
        default_hint="Your API key may not have permission for this operation",
    ),
    404: StatusRule(
        kind=ErrorKind.NOT_FOUND,
        message=None,
        default_hint="The requested resource was not found",
        fallback_message="Resource not found",
    ),
    422: StatusRule(
        kind=ErrorKind.VALIDATION_ERROR,
        message=None,
        default_hint="The request data is invalid",
        attach_details=True,
    ),
    500: SERVER_ERROR_RULE,
    502: SERVER_ERROR_RULE,
    503: SERVER_ERROR_RULE,
}

# Rule for every status not listed above
DEFAULT_STATUS_RULE = StatusRule(
    kind=ErrorKind.API_ERROR,
    message=None,
    default_hint=None,
)


@dataclass(frozen=True)
class FaultPattern:
    """Pattern for matching transport faults that produced no response."""

    kind: ErrorKind
    message: str
    hint: str
    exception_types: tuple[type, ...]
    indicators: tuple[str, ...]

    def matches_type(self, error: BaseException) -> bool:
        return isinstance(error, self.exception_types)

    def matches_text(self, error: BaseException) -> bool:
        error_str = str(error).lower()
        return any(indicator in error_str for indicator in self.indicators)


CONNECTION_PATTERN = FaultPattern(
    kind=ErrorKind.CONNECTION_FAILED,
    message="Failed to connect to n8n instance",
    hint="Check that N8N_API_URL is correct and n8n is running",
    exception_types=(aiohttp.ClientConnectorError, ConnectionRefusedError, socket.gaierror),
    indicators=(
        "fetch failed",
        "econnrefused",
        "connection refused",
        "cannot connect to host",
        "name or service not known",
        "nodename nor servname",
        "getaddrinfo",
    ),
)

TIMEOUT_PATTERN = FaultPattern(
    kind=ErrorKind.TIMEOUT,
    message="Request timed out",
    hint="The n8n server took too long to respond",
    exception_types=(TimeoutError,),
    indicators=("timeout", "timed out", "etimedout"),
)

# Exception types are checked before message text; within each pass the
# first matching pattern wins
FAULT_PATTERNS: list[FaultPattern] = [
    CONNECTION_PATTERN,
    TIMEOUT_PATTERN,
]
