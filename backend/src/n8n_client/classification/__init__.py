"""Error classification for n8n API calls."""
from .classifier import ErrorClassifier, format_error_response, parse_error_body
from .patterns import FAULT_PATTERNS, STATUS_RULES, FaultPattern, StatusRule

__all__ = [
    "ErrorClassifier",
    "format_error_response",
    "parse_error_body",
    "FaultPattern",
    "StatusRule",
    "FAULT_PATTERNS",
    "STATUS_RULES",
]
