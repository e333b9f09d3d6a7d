"""Tests for the MCP tool surface: dispatch, envelopes and the request handlers.

Pipelines are patched in ``stayscout.mcp_server``; the session is a stub.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import MagicMock, patch

import mcp.types as types
import pytest

from stayscout.airbnb import results
from stayscout.airbnb.results import ToolResult
from stayscout.mcp_server import (
    LISTING_DETAILS_TOOL,
    SEARCH_TOOL,
    TOOLS,
    build_server,
    call_tool,
    to_call_tool_result,
)

_OK = ToolResult(payload={"searchUrl": "https://www.airbnb.ca/s/Paris/homes", "searchResults": []})


@pytest.fixture()
def session():
    return MagicMock(name="AirbnbSession")


def _call_request(name: str, arguments: dict | None) -> types.CallToolRequest:
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

class TestToolDefinitions:
    def test_names(self):
        assert [tool.name for tool in TOOLS] == [SEARCH_TOOL, LISTING_DETAILS_TOOL]
        assert SEARCH_TOOL == "airbnb_search"
        assert LISTING_DETAILS_TOOL == "airbnb_listing_details"

    def test_search_schema_accepts_location_or_place_id(self):
        schema = TOOLS[0].inputSchema
        assert {"required": ["location"]} in schema["anyOf"]
        assert {"required": ["placeId"]} in schema["anyOf"]
        for name in ("minPrice", "maxPrice", "cursor", "ignoreRobotsText", "adults", "pets"):
            assert name in schema["properties"]

    def test_listing_schema_requires_id(self):
        assert TOOLS[1].inputSchema["required"] == ["id"]


# ---------------------------------------------------------------------------
# call_tool
# ---------------------------------------------------------------------------

class TestCallTool:
    def test_dispatches_search(self, session):
        with patch("stayscout.mcp_server.search_listings", return_value=_OK) as mock_search:
            result = call_tool(session, SEARCH_TOOL, {"location": "Paris"})

        assert result is _OK
        mock_search.assert_called_once_with(session, {"location": "Paris"})

    def test_dispatches_listing_details(self, session):
        ok = ToolResult(payload={"listingUrl": "u", "details": []})
        with patch("stayscout.mcp_server.get_listing_details", return_value=ok) as mock_details:
            result = call_tool(session, LISTING_DETAILS_TOOL, {"id": "1"})

        assert result is ok
        mock_details.assert_called_once_with(session, {"id": "1"})

    def test_unknown_tool(self, session):
        result = call_tool(session, "airbnb_book", {})

        assert result.is_error is True
        assert result.error_kind == results.UNKNOWN_TOOL
        assert result.payload == {"error": "Unknown tool: airbnb_book"}

    def test_invalid_arguments(self, session):
        result = call_tool(session, SEARCH_TOOL, {"adults": 2})

        assert result.is_error is True
        assert result.error_kind == results.INVALID_PARAMS
        assert "airbnb_search" in result.payload["error"]

    def test_missing_arguments_are_treated_as_empty(self, session):
        result = call_tool(session, LISTING_DETAILS_TOOL, None)
        assert result.error_kind == results.INVALID_PARAMS

    def test_unexpected_exception_becomes_error_result(self, session):
        with patch("stayscout.mcp_server.search_listings", side_effect=RuntimeError("boom")):
            result = call_tool(session, SEARCH_TOOL, {"location": "Paris"})

        assert result.is_error is True
        assert result.error_kind == results.INTERNAL
        assert result.payload == {"error": "Error: boom"}


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

def test_to_call_tool_result():
    failed = ToolResult.failure(results.POLICY, "blocked", searchUrl="u")
    rendered = to_call_tool_result(failed)

    assert rendered.isError is True
    assert len(rendered.content) == 1
    assert rendered.content[0].type == "text"
    assert json.loads(rendered.content[0].text) == {"error": "blocked", "searchUrl": "u"}


# ---------------------------------------------------------------------------
# Server handlers
# ---------------------------------------------------------------------------

class TestServerHandlers:
    def test_call_tool_handler_passes_error_flag_through(self, session):
        server = build_server(session)
        handler = server.request_handlers[types.CallToolRequest]

        response = asyncio.run(handler(_call_request("airbnb_book", {})))

        assert response.root.isError is True
        assert json.loads(response.root.content[0].text) == {"error": "Unknown tool: airbnb_book"}

    def test_call_tool_handler_success(self, session):
        server = build_server(session)
        handler = server.request_handlers[types.CallToolRequest]

        with patch("stayscout.mcp_server.search_listings", return_value=_OK):
            response = asyncio.run(handler(_call_request(SEARCH_TOOL, {"location": "Paris"})))

        assert response.root.isError is False
        assert json.loads(response.root.content[0].text) == _OK.payload

    def test_list_tools_handler(self, session):
        server = build_server(session)
        handler = server.request_handlers[types.ListToolsRequest]

        response = asyncio.run(handler(types.ListToolsRequest(method="tools/list")))

        assert [tool.name for tool in response.root.tools] == [SEARCH_TOOL, LISTING_DETAILS_TOOL]
