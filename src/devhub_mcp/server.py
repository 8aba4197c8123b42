"""MCP server wiring for devhub-mcp."""

from __future__ import annotations

import json
import logging
import sys
from collections import defaultdict
from typing import Any

try:
    from mcp import types
    from mcp.server import Server
    from mcp.shared.exceptions import McpError
    from mcp.types import INVALID_PARAMS, ErrorData, Resource, TextContent, Tool
except ImportError as exc:  # pragma: no cover
    raise ImportError("MCP library not installed. Install with: pip install mcp") from exc

from . import __version__
from .errors import InvalidParamsError, SafeError
from .registry import list_tools as registered_tools
from .runtime import initialize_runtime_from_env

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

SERVER_NAME = "devhub-mcp"
STATUS_URI = "devhub-mcp://server-status"
CAPABILITIES_URI = "devhub-mcp://capabilities"

server = Server(SERVER_NAME)


def _resources() -> list[Resource]:
    return [
        Resource(
            uri=STATUS_URI,
            name="Server Status",
            description="Configured integrations and limits (no secrets)",
            mimeType="application/json",
        ),
        Resource(
            uri=CAPABILITIES_URI,
            name="Capabilities",
            description="Available tools grouped by integration",
            mimeType="application/json",
        ),
    ]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools in registry order."""
    tools = [
        Tool(name=d.name, description=d.description, inputSchema=d.input_schema())
        for d in registered_tools()
    ]
    logger.debug("Listed %s tools", len(tools))
    return tools


async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
    """Dispatch a tool call and convert the envelope into an MCP result.

    Raises:
        McpError: INVALID_PARAMS when an argument is missing or has the wrong type.
    """
    if not isinstance(arguments, dict):
        arguments = {}

    runtime = initialize_runtime_from_env()
    try:
        envelope = await runtime.dispatcher.call(name, arguments)
    except InvalidParamsError as err:
        raise McpError(ErrorData(code=INVALID_PARAMS, message=err.message)) from err

    return types.CallToolResult(
        content=[TextContent(type="text", text=item["text"]) for item in envelope["content"]],
        isError=envelope["isError"],
    )


async def _handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
    # Registered directly so argument errors reach the client as JSON-RPC errors
    # rather than being folded into an isError result.
    return types.ServerResult(await call_tool(req.params.name, req.params.arguments))


server.request_handlers[types.CallToolRequest] = _handle_call_tool


@server.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return _resources()


def _capabilities() -> dict[str, Any]:
    grouped: dict[str, list[str]] = defaultdict(list)
    for d in registered_tools():
        grouped[d.integration].append(d.name)
    return {
        "server": SERVER_NAME,
        "version": __version__,
        "tools_by_integration": dict(grouped),
        "response_options": ["compact", "compact_json", "include_pagination", "verbose"],
    }


def _server_status() -> dict[str, Any]:
    status: dict[str, Any] = {
        "server": SERVER_NAME,
        "version": __version__,
        "tools_available": len(registered_tools()),
        "configured": False,
    }
    try:
        runtime = initialize_runtime_from_env()
    except SafeError as err:
        status["config_error"] = err.message
        return status

    config = runtime.config
    status["configured"] = True
    status["integrations"] = {
        "github": {"authenticated": config.github.token is not None, "api_base_url": config.github.api_base_url},
        "jira": {"configured": config.jira.configured},
        "slack": {"configured": config.slack.configured},
        "google_calendar": {"configured": config.google_calendar.configured},
    }
    status["limits"] = {
        "call_timeout_s": config.limits.call_timeout_s,
        "http_timeout_s": config.limits.http_timeout_s,
        "connect_timeout_s": config.limits.connect_timeout_s,
    }
    status["audit"] = {"file_sink_enabled": config.audit_log_path is not None}
    return status


@server.read_resource()
async def read_resource(uri: Any) -> str:
    """Read resource content."""
    uri_s = uri if isinstance(uri, str) else str(uri)

    if uri_s == CAPABILITIES_URI:
        return json.dumps(_capabilities(), indent=2)
    if uri_s == STATUS_URI:
        return json.dumps(_server_status(), indent=2)

    return json.dumps({"ok": False, "code": "NotFound", "message": "Unknown resource"}, indent=2)


async def run_server() -> None:
    """Run the server over stdio."""
    # Fail fast on invalid host configuration.
    try:
        runtime = initialize_runtime_from_env()
    except SafeError as exc:
        logger.error("Startup configuration error: %s", exc.message)
        raise
    logging.getLogger().setLevel(runtime.config.log_level)

    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def test_server() -> None:
    """Lightweight self-test: tool and resource listing, plus one local tool call."""
    tools = await list_tools()
    resources = await list_resources()
    result = await call_tool("getStringLength", {"input": "Hello 👋 World"})
    if result.isError or result.content[0].text != "13":
        raise RuntimeError("getStringLength self-test failed")
    print(f"{SERVER_NAME} {__version__}: {len(tools)} tools, {len(resources)} resources OK", file=sys.stderr)
