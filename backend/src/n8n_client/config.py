"""
Client configuration loaded from arguments or environment variables.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError


API_URL_ENV = "N8N_API_URL"
API_KEY_ENV = "N8N_API_KEY"
TIMEOUT_ENV = "N8N_TIMEOUT"
MAX_RETRIES_ENV = "N8N_MAX_RETRIES"

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for one n8n instance. Never mutated after construction."""

    base_url: str
    api_key: str
    timeout: float = DEFAULT_TIMEOUT  # seconds, per attempt
    max_retries: int = DEFAULT_MAX_RETRIES

    def __post_init__(self):
        if not self.base_url:
            raise ConfigurationError("n8n API URL is required")
        if not self.api_key:
            raise ConfigurationError("n8n API key is required")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Build configuration from environment variables."""
        env = os.environ if environ is None else environ

        api_url = env.get(API_URL_ENV)
        if not api_url:
            raise ConfigurationError(f"{API_URL_ENV} environment variable is required")

        api_key = env.get(API_KEY_ENV)
        if not api_key:
            raise ConfigurationError(f"{API_KEY_ENV} environment variable is required")

        return cls(
            base_url=api_url,
            api_key=api_key,
            timeout=_read_number(env, TIMEOUT_ENV, float, DEFAULT_TIMEOUT),
            max_retries=_read_number(env, MAX_RETRIES_ENV, int, DEFAULT_MAX_RETRIES),
        )


def _read_number(env: Mapping[str, str], name: str, cast, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
