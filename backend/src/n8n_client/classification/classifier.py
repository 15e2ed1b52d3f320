"""Maps failure signals onto structured errors."""
import json
import logging
from typing import Any, Optional, Union

from ..exceptions import N8nError
from ..types import ErrorKind
from .patterns import DEFAULT_STATUS_RULE, FAULT_PATTERNS, STATUS_RULES

logger = logging.getLogger(__name__)


def parse_error_body(body: Optional[Union[str, bytes]]) -> dict[str, Any]:
    """Best-effort decode of an error response body.

    Anything that is not a JSON object decodes to an empty dict.
    """
    if not body:
        return {}
    try:
        parsed = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


class ErrorClassifier:
    """Classifies failures into ``ErrorKind`` values.

    Stateless: the same input always yields an equal error.
    """

    @staticmethod
    def from_http_status(
        status: int,
        body: Optional[Union[str, bytes, dict[str, Any]]] = None
    ) -> N8nError:
        """Classify a non-success HTTP response.

        Args:
            status: HTTP status code
            body: Raw response text, or an already decoded body

        Returns:
            N8nError for the status
        """
        parsed = body if isinstance(body, dict) else parse_error_body(body)
        rule = STATUS_RULES.get(status, DEFAULT_STATUS_RULE)

        body_message = _text(parsed.get("message"))
        body_hint = _text(parsed.get("hint"))

        if rule.message is not None:
            message = rule.message
        else:
            message = body_message or rule.fallback_message or f"HTTP Error {status}"

        hint = rule.default_hint
        if rule.use_body_hint and body_hint:
            hint = body_hint

        return N8nError(
            kind=rule.kind,
            message=message,
            status_code=status,
            hint=hint,
            details=dict(parsed) if rule.attach_details else None,
        )

    @staticmethod
    def from_exception(error: BaseException) -> N8nError:
        """Classify a fault raised before any response arrived.

        An ``N8nError`` is returned unchanged.
        """
        if isinstance(error, N8nError):
            return error

        pattern = next((p for p in FAULT_PATTERNS if p.matches_type(error)), None)
        if pattern is None:
            pattern = next((p for p in FAULT_PATTERNS if p.matches_text(error)), None)

        if pattern is not None:
            classified = N8nError(kind=pattern.kind, message=pattern.message, hint=pattern.hint)
        else:
            classified = N8nError(
                kind=ErrorKind.UNKNOWN,
                message=str(error) or type(error).__name__,
            )

        logger.debug(
            f"Classified '{type(error).__name__}' as {classified.kind.value}"
        )
        return classified


def format_error_response(error: BaseException) -> dict[str, Any]:
    """Structured, caller-facing form of any failure."""
    return ErrorClassifier.from_exception(error).to_dict()
