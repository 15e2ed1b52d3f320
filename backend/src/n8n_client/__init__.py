"""
Call layer for the n8n REST API: request execution, error classification
and retry with exponential backoff.
"""
from .classification import ErrorClassifier, format_error_response
from .client import N8nApiClient, build_query, create_client_from_env
from .config import ClientConfig
from .exceptions import ConfigurationError, N8nClientError, N8nError
from .executor import RequestExecutor
from .log import configure_logging
from .retry import RetryExecutor
from .strategies import BaseStrategy, ExponentialBackoffStrategy
from .types import ErrorKind, RequestDescriptor, RetryPolicy, RetryState


__all__ = [
    # Client
    'N8nApiClient',
    'create_client_from_env',
    'build_query',
    'ClientConfig',

    # Call layer
    'RequestExecutor',
    'RetryExecutor',
    'RequestDescriptor',
    'RetryPolicy',
    'RetryState',
    'BaseStrategy',
    'ExponentialBackoffStrategy',

    # Errors
    'ErrorKind',
    'ErrorClassifier',
    'format_error_response',
    'N8nClientError',
    'N8nError',
    'ConfigurationError',

    # Logging
    'configure_logging',
]
