"""Pytest configuration and shared fixtures."""

import json
from typing import Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from sheetrelay.api import create_app
from sheetrelay.config import Settings
from sheetrelay.relay import RetryPolicy

SCRIPT_URL = "https://script.google.com/macros/s/test-deployment/exec"


class FakeDownstream:
    """Scripted stand-in for the Apps Script webhook.

    Each entry is returned (or raised, for exceptions) for one request in
    order; the last entry repeats once the script runs out. Entries may also
    be async callables taking the request.
    """

    def __init__(self, *script):
        self.script = list(script) or [httpx.Response(200, text="ok")]
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        entry = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(entry, Exception):
            raise entry
        if callable(entry):
            return await entry(request)
        # Fresh copy per request; a response is closed after each attempt.
        return httpx.Response(entry.status_code, headers=entry.headers, content=entry.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def sent_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def relay_settings() -> Settings:
    """Create settings with a default destination and no real waiting."""
    return Settings(
        google_script_url=SCRIPT_URL,
        default_sheet_name="PIF_Master",
        host="127.0.0.1",
        port=10000,
        debug=False,
        cors_allow_origins=["*"],
        forward_timeout_seconds=0.2,
        forward_max_attempts=2,
        retry_backoff_seconds=0,
        error_backoff_seconds=0,
        max_body_bytes=1024 * 1024,
    )


@pytest.fixture
def fast_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=2,
        timeout_seconds=0.1,
        status_backoff_seconds=1.0,
        error_backoff_seconds=2.0,
    )


@pytest.fixture
def make_client(relay_settings):
    """Build a TestClient wired to a fake downstream.

    Usage: ``client = make_client(downstream)`` or
    ``make_client(downstream, settings=...)``.
    """
    clients = []

    def _make(downstream: FakeDownstream, settings: Optional[Settings] = None) -> TestClient:
        app = create_app(settings or relay_settings, transport=downstream.transport)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def upload_body() -> dict:
    return {
        "sheetName": "Intake",
        "values": [["PIF", "Owner", "Amount"], ["PIF-001", "Dana", 1200.5]],
    }


@pytest.fixture
def script_url() -> str:
    return SCRIPT_URL


@pytest.fixture
def fake_downstream():
    """The FakeDownstream class, for building scripted downstreams in tests."""
    return FakeDownstream


class BrokenBodyStream(httpx.AsyncByteStream):
    """Response body that drops the connection partway through."""

    async def __aiter__(self):
        yield b'{"result": "succ'
        raise httpx.ReadError("connection reset while reading body")


@pytest.fixture
def broken_body_response():
    """Build a downstream script entry answering ``status`` with an unreadable body."""

    def _respond(status: int):
        async def _handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, stream=BrokenBodyStream())

        return _handler

    return _respond
