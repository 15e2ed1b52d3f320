"""Tests for the single-attempt request executor."""
import socket

import pytest

from backend.src.n8n_client import ClientConfig, ErrorKind, N8nApiClient, N8nError, RequestExecutor


def unused_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestRequestBuilding:
    """URL and header construction."""

    def setup_method(self):
        self.executor = RequestExecutor(ClientConfig("https://n8n.example.com/", "secret"))

    def test_url_joins_base_version_and_path(self):
        assert self.executor.build_url("/workflows?limit=1") == \
            "https://n8n.example.com/api/v1/workflows?limit=1"

    def test_default_headers(self):
        assert self.executor.build_headers() == {
            "Content-Type": "application/json",
            "X-N8N-API-KEY": "secret",
        }

    def test_caller_may_override_content_type(self):
        headers = self.executor.build_headers({"content-type": "text/plain", "X-Trace": "1"})
        assert headers == {
            "content-type": "text/plain",
            "X-Trace": "1",
            "X-N8N-API-KEY": "secret",
        }

    def test_caller_cannot_override_api_key(self):
        headers = self.executor.build_headers({"x-n8n-api-key": "other"})
        assert headers == {"Content-Type": "application/json", "X-N8N-API-KEY": "secret"}

    def test_describe_uses_configured_timeout(self):
        executor = RequestExecutor(ClientConfig("http://h", "k", timeout=5.0))
        descriptor = executor.describe("post", "/workflows", body={"name": "x"})

        assert descriptor.method == "POST"
        assert descriptor.timeout == 5.0
        assert descriptor.body == {"name": "x"}


class TestExecute:
    """One attempt against a local server."""

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, fake_n8n, make_config):
        fake_n8n.queue(200, {"id": "42", "name": "Daily report"})
        config = make_config()
        executor = RequestExecutor(config)

        result = await executor.execute(executor.describe("GET", "/workflows/42"))

        assert result == {"id": "42", "name": "Daily report"}
        request = fake_n8n.requests[0]
        assert request.method == "GET"
        assert request.path_qs == "/api/v1/workflows/42"
        assert request.headers["X-N8N-API-KEY"] == config.api_key
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self, fake_n8n, make_config):
        fake_n8n.queue(200, {"id": "1"})
        executor = RequestExecutor(make_config())
        workflow = {"name": "New", "nodes": [], "connections": {}}

        await executor.execute(executor.describe("POST", "/workflows", body=workflow))

        assert fake_n8n.requests[0].json() == workflow

    @pytest.mark.asyncio
    async def test_empty_success_body(self, fake_n8n, make_config):
        fake_n8n.queue(200, "")
        executor = RequestExecutor(make_config())

        assert await executor.execute(executor.describe("DELETE", "/workflows/1")) == {}

    @pytest.mark.asyncio
    async def test_invalid_json_success_body(self, fake_n8n, make_config):
        fake_n8n.queue(200, "{not json")
        executor = RequestExecutor(make_config())

        with pytest.raises(N8nError) as exc_info:
            await executor.execute(executor.describe("GET", "/workflows"))

        assert exc_info.value.kind is ErrorKind.API_ERROR
        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_error_status_is_classified(self, fake_n8n, make_config):
        fake_n8n.queue(404, {"message": "Workflow not found"})
        executor = RequestExecutor(make_config())

        with pytest.raises(N8nError) as exc_info:
            await executor.execute(executor.describe("GET", "/workflows/404"))

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.message == "Workflow not found"

    @pytest.mark.asyncio
    async def test_non_json_error_body_keeps_status_classification(self, fake_n8n, make_config):
        fake_n8n.queue(502, "<html>Bad Gateway</html>")
        executor = RequestExecutor(make_config())

        with pytest.raises(N8nError) as exc_info:
            await executor.execute(executor.describe("GET", "/workflows"))

        assert exc_info.value.kind is ErrorKind.API_ERROR
        assert exc_info.value.message == "n8n server error"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_undecodable_error_body_keeps_status_classification(self, fake_n8n, make_config):
        fake_n8n.queue(404, b"\xff\xfe")
        executor = RequestExecutor(make_config())

        with pytest.raises(N8nError) as exc_info:
            await executor.execute(executor.describe("GET", "/workflows/1"))

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.message == "Resource not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_undecodable_error_body_is_not_retried(self, fake_n8n, make_config, sleeps):
        fake_n8n.queue(404, b"\xff\xfe not utf8")
        client = N8nApiClient(make_config(), sleep=sleeps)

        with pytest.raises(N8nError) as exc_info:
            await client.get_workflow("1")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert fake_n8n.attempts == 1
        assert sleeps.delays == []

    @pytest.mark.asyncio
    async def test_undecodable_success_body(self, fake_n8n, make_config):
        fake_n8n.queue(200, b"\xff\xfe")
        executor = RequestExecutor(make_config())

        with pytest.raises(N8nError) as exc_info:
            await executor.execute(executor.describe("GET", "/workflows/1"))

        assert exc_info.value.kind is ErrorKind.API_ERROR
        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_timeout(self, fake_n8n, make_config):
        fake_n8n.queue(200, {"id": "1"}, delay=0.5)
        executor = RequestExecutor(make_config(timeout=0.05))

        with pytest.raises(N8nError) as exc_info:
            await executor.execute(executor.describe("GET", "/workflows/1"))

        assert exc_info.value.kind is ErrorKind.TIMEOUT
        assert exc_info.value.message == "Request timed out"

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        executor = RequestExecutor(ClientConfig(f"http://127.0.0.1:{unused_port()}", "k"))

        with pytest.raises(N8nError) as exc_info:
            await executor.execute(executor.describe("GET", "/workflows"))

        assert exc_info.value.kind is ErrorKind.CONNECTION_FAILED
        assert exc_info.value.status_code is None
