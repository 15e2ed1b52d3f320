"""Single-attempt HTTP executor for the n8n REST API.
"""
import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp

from .classification import ErrorClassifier, parse_error_body
from .config import ClientConfig
from .exceptions import N8nError
from .types import ErrorKind, RequestDescriptor

API_PREFIX = "/api/v1"
AUTH_HEADER = "X-N8N-API-KEY"
JSON_CONTENT_TYPE = "application/json"


class RequestExecutor:
    """Performs exactly one network attempt per call to ``execute``."""

    def __init__(self, config: ClientConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def build_url(self, path: str) -> str:
        return f"{self.config.base_url}{API_PREFIX}{path}"

    def build_headers(self, headers: Optional[dict[str, str]] = None) -> dict[str, str]:
        """Content type may be overridden by the caller; the API key may not."""
        merged = {"Content-Type": JSON_CONTENT_TYPE}
        for name, value in (headers or {}).items():
            if name.lower() == AUTH_HEADER.lower():
                continue
            if name.lower() == "content-type":
                merged.pop("Content-Type", None)
            merged[name] = value
        merged[AUTH_HEADER] = self.config.api_key
        return merged

    def describe(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None
    ) -> RequestDescriptor:
        """Build the descriptor for one call using the configured timeout."""
        return RequestDescriptor(
            method=method.upper(),
            path=path,
            headers=dict(headers or {}),
            body=body,
            timeout=self.config.timeout,
        )

    async def execute(self, descriptor: RequestDescriptor) -> Any:
        """Perform one attempt.

        Returns:
            Decoded JSON body, or ``{}`` for an empty success body

        Raises:
            N8nError: for every failure, already classified
        """
        url = self.build_url(descriptor.path)
        self.logger.debug(f"API Request: {descriptor.method} {url}")

        try:
            return await asyncio.wait_for(
                self._send(url, descriptor),
                timeout=descriptor.timeout
            )
        except N8nError:
            raise
        except asyncio.TimeoutError:
            self.logger.error(
                f"API Error: {descriptor.method} {url} timed out after {descriptor.timeout}s"
            )
            raise N8nError(
                kind=ErrorKind.TIMEOUT,
                message="Request timed out",
                hint="The n8n server took too long to respond",
            ) from None
        except Exception as e:
            self.logger.error(f"API Error: {e}")
            raise ErrorClassifier.from_exception(e) from e

    async def _send(self, url: str, descriptor: RequestDescriptor) -> Any:
        data = None
        if descriptor.body is not None:
            data = json.dumps(descriptor.body)

        async with aiohttp.ClientSession() as session:
            async with session.request(
                descriptor.method,
                url,
                headers=self.build_headers(descriptor.headers),
                data=data,
            ) as response:
                text = await response.text(errors="replace")

                if not 200 <= response.status < 300:
                    raise ErrorClassifier.from_http_status(
                        response.status,
                        parse_error_body(text)
                    )

                if not text:
                    return {}

                try:
                    return json.loads(text)
                except ValueError as e:
                    raise N8nError(
                        kind=ErrorKind.API_ERROR,
                        message=f"Invalid JSON in response: {e}",
                        status_code=response.status,
                    ) from e
