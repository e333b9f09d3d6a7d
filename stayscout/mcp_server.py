"""MCP stdio server exposing the two pipelines as tools.

Tools
-----
``airbnb_search``           → :func:`stayscout.airbnb.search_listings`
``airbnb_listing_details``  → :func:`stayscout.airbnb.get_listing_details`

stdout carries the protocol, so every diagnostic goes to stderr.  The
pipelines are blocking; each call runs in a worker thread so the event loop
keeps serving.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Mapping, Optional

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from pydantic import ValidationError

from stayscout.airbnb import results
from stayscout.airbnb.listing import get_listing_details
from stayscout.airbnb.results import ToolResult
from stayscout.airbnb.search import search_listings
from stayscout.airbnb.session import AirbnbSession

SERVER_NAME = "airbnb"

SEARCH_TOOL = "airbnb_search"
LISTING_DETAILS_TOOL = "airbnb_listing_details"

_STAY_PROPERTIES: dict[str, Any] = {
    "checkin": {"type": "string", "description": "Check-in date (YYYY-MM-DD)"},
    "checkout": {"type": "string", "description": "Check-out date (YYYY-MM-DD)"},
    "adults": {"type": "number", "description": "Number of adults"},
    "children": {"type": "number", "description": "Number of children"},
    "infants": {"type": "number", "description": "Number of infants"},
    "pets": {"type": "number", "description": "Number of pets"},
    "ignoreRobotsText": {
        "type": "boolean",
        "description": "Ignore robots.txt rules for this request",
    },
}

TOOLS = [
    types.Tool(
        name=SEARCH_TOOL,
        description=(
            "Search for Airbnb listings with various filters and pagination. "
            "Provide direct links to the user"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": "Location to search for (city, state, etc.)",
                },
                "placeId": {
                    "type": "string",
                    "description": "Google Maps Place ID (overrides the location parameter)",
                },
                **_STAY_PROPERTIES,
                "minPrice": {"type": "number", "description": "Minimum price for the stay"},
                "maxPrice": {"type": "number", "description": "Maximum price for the stay"},
                "cursor": {
                    "type": "string",
                    "description": "Base64-encoded string used for Pagination",
                },
            },
            "anyOf": [{"required": ["location"]}, {"required": ["placeId"]}],
        },
    ),
    types.Tool(
        name=LISTING_DETAILS_TOOL,
        description=(
            "Get detailed information about a specific Airbnb listing. "
            "Provide direct links to the user"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "The Airbnb listing ID"},
                **_STAY_PROPERTIES,
            },
            "required": ["id"],
        },
    ),
]


def call_tool(
    session: AirbnbSession,
    name: str,
    arguments: Optional[Mapping[str, Any]],
) -> ToolResult:
    """Dispatch one tool call.  Never raises."""
    arguments = arguments or {}
    try:
        if name == SEARCH_TOOL:
            return search_listings(session, arguments)
        if name == LISTING_DETAILS_TOOL:
            return get_listing_details(session, arguments)
    except ValidationError as exc:
        return ToolResult.failure(results.INVALID_PARAMS, f"Invalid arguments for {name}: {exc}")
    except Exception as exc:
        print(f"[SERVER] ✗ {name} failed: {exc!r}", file=sys.stderr)
        return ToolResult.failure(results.INTERNAL, f"Error: {exc}")

    return ToolResult.failure(results.UNKNOWN_TOOL, f"Unknown tool: {name}")


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.to_text())],
        isError=result.is_error,
    )


def build_server(session: AirbnbSession) -> Server:
    """Return an MCP :class:`Server` bound to *session*."""
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return TOOLS

    async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
        result = await asyncio.to_thread(
            call_tool, session, request.params.name, request.params.arguments
        )
        return types.ServerResult(to_call_tool_result(result))

    # Registered directly so the isError flag of each ToolResult reaches the
    # client unchanged.
    server.request_handlers[types.CallToolRequest] = handle_call_tool
    return server


async def serve(session: AirbnbSession) -> None:
    server = build_server(session)
    async with stdio_server() as (read_stream, write_stream):
        print("[SERVER] Airbnb MCP Server running on stdio", file=sys.stderr)
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run_server(ignore_robots_txt: bool = False) -> None:
    """Initialise a browser session, then serve MCP over stdio until EOF."""
    mode = "ignore-robots-txt" if ignore_robots_txt else "respect-robots-txt"
    print(f"[SERVER] Server started with options: {mode}", file=sys.stderr)

    session = AirbnbSession(ignore_robots_txt=ignore_robots_txt)
    session.initialize()
    asyncio.run(serve(session))
