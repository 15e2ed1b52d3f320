"""Shared fixtures for the n8n client tests."""
import asyncio
import json
from dataclasses import dataclass
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from backend.src.n8n_client import ClientConfig

API_KEY = "test-api-key"


@dataclass
class RecordedRequest:
    method: str
    path_qs: str
    headers: Any  # case-insensitive multidict copy
    body: str

    def json(self) -> Any:
        return json.loads(self.body)


class FakeN8n:
    """Local n8n stand-in that replays queued responses.

    The last queued response repeats once the queue is drained.
    """

    def __init__(self):
        self.base_url = ""
        self.requests: list[RecordedRequest] = []
        self._responses: list[tuple[int, str | bytes, float]] = []

    def queue(self, status: int = 200, body: Any = "", delay: float = 0.0) -> "FakeN8n":
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body)
        self._responses.append((status, body, delay))
        return self

    @property
    def attempts(self) -> int:
        return len(self.requests)

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(RecordedRequest(
            method=request.method,
            path_qs=request.path_qs,
            headers=request.headers.copy(),
            body=await request.text(),
        ))
        if len(self._responses) > 1:
            status, body, delay = self._responses.pop(0)
        else:
            status, body, delay = self._responses[0] if self._responses else (200, "", 0.0)
        if delay:
            await asyncio.sleep(delay)
        if isinstance(body, bytes):
            return web.Response(status=status, body=body, content_type="application/json")
        return web.Response(status=status, text=body, content_type="application/json")


class SleepRecorder:
    """Drop-in for asyncio.sleep that records delays without waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest_asyncio.fixture
async def fake_n8n():
    fake = FakeN8n()
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", fake.handle)
    server = test_utils.TestServer(app)
    await server.start_server()
    fake.base_url = str(server.make_url("/")).rstrip("/")
    yield fake
    await server.close()


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def make_config(fake_n8n):
    def _make(**overrides) -> ClientConfig:
        settings = {"base_url": fake_n8n.base_url + "/", "api_key": API_KEY}
        settings.update(overrides)
        return ClientConfig(**settings)
    return _make
