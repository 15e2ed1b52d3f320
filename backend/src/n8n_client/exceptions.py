"""
Exceptions for the n8n call layer.
"""
from typing import Any, Optional

from .types import ErrorKind


class N8nClientError(Exception):
    """Base exception for the n8n client."""


class ConfigurationError(N8nClientError, ValueError):
    """Raised when the client cannot be built from the given settings."""


class N8nError(N8nClientError):
    """Structured error produced by classification.

    Callers branch on ``kind``; the message is for humans only.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: Optional[int] = None,
        hint: Optional[str] = None,
        details: Optional[Any] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.hint = hint
        self.details = details

    def to_dict(self) -> dict:
        """Convert to the caller-facing form."""
        return {
            "error": self.message,
            "code": self.kind.value,
            "status_code": self.status_code,
            "hint": self.hint,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"N8nError(kind={self.kind.value}, message={self.message!r}, "
            f"status_code={self.status_code}, hint={self.hint!r})"
        )
