"""Tests for Prior MCP resources."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp.types import Resource

from prior_mcp.client import CREDENTIALS_MESSAGE, ApiError, PriorApiClient
from prior_mcp.mcp.resources import AGENT_STATUS_URI, RESOURCES
from prior_mcp.mcp.server import list_resources, read_resource, set_client

DOC_URIS = [
    "prior://docs/search-tips",
    "prior://docs/contributing",
    "prior://docs/api-keys",
    "prior://docs/getting-started",
    "prior://docs/agent-guide",
]


@pytest.fixture
def mock_client():
    client = MagicMock(spec=PriorApiClient)
    client.ensure_credential = AsyncMock(return_value="ask_test")
    client.request = AsyncMock()
    set_client(client)
    return client


class TestListResources:
    @pytest.mark.asyncio
    async def test_lists_status_and_docs(self):
        resources = await list_resources()
        assert all(isinstance(r, Resource) for r in resources)
        assert {str(r.uri) for r in resources} == {AGENT_STATUS_URI, *DOC_URIS}

    def test_every_resource_is_annotated(self):
        for resource in RESOURCES:
            assert resource.annotations.audience
            assert 0 <= resource.annotations.priority <= 1
            assert resource.mimeType in ("application/json", "text/markdown")


class TestReadResource:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("uri", DOC_URIS)
    async def test_static_docs_need_no_credentials(self, uri):
        contents = await read_resource(uri)
        assert len(contents) == 1
        assert contents[0].mime_type == "text/markdown"
        assert contents[0].content.startswith("# ")

    @pytest.mark.asyncio
    async def test_unknown_uri(self):
        with pytest.raises(ValueError, match="Unknown resource"):
            await read_resource("prior://docs/nope")

    @pytest.mark.asyncio
    async def test_agent_status(self, mock_client):
        mock_client.request.return_value = {
            "ok": True,
            "data": {"agentId": "ag_1", "credits": 7, "tier": "pro", "searches": 12},
        }
        contents = await read_resource(AGENT_STATUS_URI)

        assert contents[0].mime_type == "application/json"
        assert json.loads(contents[0].content) == {
            "agentId": "ag_1",
            "credits": 7,
            "tier": "pro",
            "claimed": False,
            "searches": 12,
        }

    @pytest.mark.asyncio
    async def test_agent_status_api_error_is_reported_inline(self, mock_client):
        mock_client.request.side_effect = ApiError(401, "bad key")
        contents = await read_resource(AGENT_STATUS_URI)
        assert json.loads(contents[0].content) == {"error": "API error 401: bad key"}

    @pytest.mark.asyncio
    async def test_agent_status_without_credentials(self):
        contents = await read_resource(AGENT_STATUS_URI)
        error = json.loads(contents[0].content)["error"]
        assert error == CREDENTIALS_MESSAGE
        assert "PRIOR_API_KEY" in error

    @pytest.mark.asyncio
    async def test_agent_status_failed_registration_uses_same_message(self, mock_client):
        mock_client.ensure_credential.return_value = None
        contents = await read_resource(AGENT_STATUS_URI)
        assert json.loads(contents[0].content) == {"error": CREDENTIALS_MESSAGE}
        mock_client.request.assert_not_awaited()
