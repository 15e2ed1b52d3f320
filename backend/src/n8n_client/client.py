"""
n8n REST API client.

Typed operations over workflows and executions. Every API call goes through
the retry engine, which calls the request executor once per attempt.
"""
import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Optional
from urllib.parse import urlencode

import aiohttp

from .classification import ErrorClassifier
from .config import ClientConfig
from .exceptions import N8nError
from .executor import JSON_CONTENT_TYPE, RequestExecutor
from .retry import RetryExecutor
from .types import ErrorKind, RetryPolicy


def build_query(params: dict[str, Any]) -> str:
    """Render query parameters, skipping unset values.

    Returns:
        ``"?a=1&b=true"`` or an empty string
    """
    rendered = {}
    for key, value in params.items():
        if value is None or value == "" or value == []:
            continue
        if isinstance(value, bool):
            rendered[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            rendered[key] = ",".join(str(v) for v in value)
        else:
            rendered[key] = str(value)
    return f"?{urlencode(rendered)}" if rendered else ""


class N8nApiClient:
    """Client for one n8n instance."""

    def __init__(
        self,
        config: ClientConfig,
        retry_policy: Optional[RetryPolicy] = None,
        logger: Optional[logging.Logger] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None
    ):
        """
        Args:
            config: Connection settings
            retry_policy: Overrides the policy derived from ``config.max_retries``
            logger: Logger shared by the executor and retry engine
            sleep: Backoff wait coroutine (default: ``asyncio.sleep``)
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        policy = retry_policy or RetryPolicy(max_retries=config.max_retries)
        self.executor = RequestExecutor(config, logger=self.logger)
        self.retry = RetryExecutor(policy, logger=self.logger, sleep=sleep or asyncio.sleep)

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None
    ) -> Any:
        """Make an authenticated API request with retries.

        Raises:
            N8nError: terminal classified error
        """
        descriptor = self.executor.describe(method, path, body=body, headers=headers)
        return await self.retry.run(
            lambda: self.executor.execute(descriptor),
            description=f"{descriptor.method} {path}",
        )

    # Health check

    async def health_check(self) -> dict[str, Any]:
        """Check API connectivity by listing a single workflow."""
        try:
            await self.request("GET", "/workflows" + build_query({"limit": 1}))
        except N8nError as e:
            return {"status": "error", "message": e.message, "code": e.kind.value}
        return {"status": "connected"}

    # Workflow operations

    async def list_workflows(
        self,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        active: Optional[bool] = None,
        tags: Optional[Iterable[str]] = None
    ) -> dict[str, Any]:
        query = build_query({
            "limit": limit,
            "cursor": cursor,
            "active": active,
            "tags": list(tags) if tags else None,
        })
        return await self.request("GET", f"/workflows{query}")

    async def get_workflow(self, workflow_id: str) -> dict[str, Any]:
        return await self.request("GET", f"/workflows/{workflow_id}")

    async def create_workflow(self, workflow: dict[str, Any]) -> dict[str, Any]:
        """Create a workflow from ``name``, ``nodes``, ``connections`` and optional ``settings``."""
        return await self.request("POST", "/workflows", body=workflow)

    async def update_workflow(self, workflow_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        return await self.request("PATCH", f"/workflows/{workflow_id}", body=changes)

    async def delete_workflow(self, workflow_id: str) -> dict[str, Any]:
        return await self.request("DELETE", f"/workflows/{workflow_id}")

    async def activate_workflow(self, workflow_id: str) -> dict[str, Any]:
        """Activate a workflow.

        n8n rejects activation with a 400 when the workflow cannot start,
        e.g. it has no trigger node. That is reported as ACTIVATION_FAILED.
        """
        try:
            return await self.request("POST", f"/workflows/{workflow_id}/activate")
        except N8nError as e:
            if e.status_code != 400:
                raise
            raise N8nError(
                kind=ErrorKind.ACTIVATION_FAILED,
                message=e.message,
                status_code=e.status_code,
                hint=e.hint or "Make sure the workflow has an enabled trigger node",
                details=e.details,
            ) from e

    async def deactivate_workflow(self, workflow_id: str) -> dict[str, Any]:
        return await self.request("POST", f"/workflows/{workflow_id}/deactivate")

    # Execution operations

    async def list_executions(
        self,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        workflow_id: Optional[str] = None,
        status: Optional[str] = None,
        include_data: Optional[bool] = None
    ) -> dict[str, Any]:
        query = build_query({
            "limit": limit,
            "cursor": cursor,
            "workflowId": workflow_id,
            "status": status,
            "includeData": include_data,
        })
        return await self.request("GET", f"/executions{query}")

    async def get_execution(self, execution_id: str, include_data: bool = False) -> dict[str, Any]:
        query = build_query({"includeData": True if include_data else None})
        return await self.request("GET", f"/executions/{execution_id}{query}")

    async def delete_execution(self, execution_id: str) -> dict[str, Any]:
        return await self.request("DELETE", f"/executions/{execution_id}")

    # Webhooks

    async def trigger_webhook(
        self,
        webhook_url: str,
        method: str = "POST",
        data: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None
    ) -> Any:
        """Call a workflow's webhook URL directly.

        Not an API call: no API key, no retries.

        Raises:
            N8nError: WEBHOOK_ERROR for non-success statuses, otherwise the
                classified transport fault
        """
        method = method.upper()
        request_headers = {"Content-Type": JSON_CONTENT_TYPE, **(headers or {})}
        body = json.dumps(data) if data is not None and method != "GET" else None

        self.logger.debug(f"Triggering webhook: {method} {webhook_url}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.request(
                    method,
                    webhook_url,
                    headers=request_headers,
                    data=body,
                    timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                ) as response:
                    text = await response.text(errors="replace")
                    status = response.status
        except Exception as e:
            self.logger.error(f"Webhook error: {e}")
            raise ErrorClassifier.from_exception(e) from e

        if not 200 <= status < 300:
            self.logger.error(f"Webhook error: HTTP {status}")
            raise N8nError(
                kind=ErrorKind.WEBHOOK_ERROR,
                message=f"Webhook error: HTTP {status} - {text}",
                status_code=status,
                hint="Check that the workflow is active and the webhook path and method match",
            )

        try:
            return json.loads(text)
        except ValueError:
            return {"response": text}


def create_client_from_env(**kwargs: Any) -> N8nApiClient:
    """Create a client from N8N_API_URL / N8N_API_KEY and friends."""
    return N8nApiClient(ClientConfig.from_env(), **kwargs)
