"""
Pytest fixtures and test configuration for Prior MCP tests.
"""

import json
import logging
from typing import Any, Callable, Dict, List

import httpx
import pytest

from prior_mcp.client import PriorApiClient
from prior_mcp.credentials import CredentialStore
from prior_mcp.mcp import server

_ENV_VARS = (
    "PRIOR_API_KEY",
    "PRIOR_API_URL",
    "PRIOR_AUTO_REGISTER",
    "PRIOR_LOG_LEVEL",
    "CURSOR_TRACE_ID",
    "CURSOR_SESSION",
    "VSCODE_PID",
    "VSCODE_CWD",
    "WINDSURF_SESSION",
    "OPENCLAW_SESSION",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point the Prior home at a temp dir and clear Prior/host env vars."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("PRIOR_DATA_DIR", str(tmp_path))
    yield tmp_path


@pytest.fixture(autouse=True)
def reset_server_client():
    """Never leak the process-wide client between tests."""
    server.configure()
    yield
    server.configure()


@pytest.fixture(autouse=True)
def clean_prior_logger():
    """Remove all handlers from the prior_mcp logger before/after each test."""
    logger = logging.getLogger("prior_mcp")
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    yield
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)


class RecordingTransport:
    """Serves canned responses and records every request it sees.

    ``responses`` maps ``(method, path)`` to a response or to a callable
    taking the request.
    """

    def __init__(self, responses: Dict[tuple, Any]):
        self.responses = responses
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.responses:
            return httpx.Response(404, text=f"no route for {key}")
        response = self.responses[key]
        if callable(response):
            return response(request)
        return response

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def make_client() -> Callable[..., tuple]:
    """Build a PriorApiClient wired to a RecordingTransport.

    Returns ``(client, transport)``.
    """

    def _make(responses: Dict[tuple, Any] = None, **kwargs) -> tuple:
        transport = RecordingTransport(responses or {})
        http = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        kwargs.setdefault("api_url", "https://api.test")
        kwargs.setdefault("store", CredentialStore())
        client = PriorApiClient(http_client=http, **kwargs)
        return client, transport

    return _make
