"""
Prior MCP Server - Knowledge exchange tools for MCP hosts.

This exposes the Prior knowledge base as MCP tools and resources,
letting agents search verified fixes, contribute what they learned,
and rate what they used.

Error handling:
- Input is validated and sanitized before any network call
- Missing credentials produce a fixed setup diagnostic, never a crash
- API and transport errors propagate to the MCP runtime
- Anything else is logged in full and reported generically

Usage:
    prior-mcp  # Start MCP server (stdio transport)
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Resource, TextContent, Tool

from prior_mcp.client import CREDENTIALS_MESSAGE, ApiError, ConfigurationError, PriorApiClient
from prior_mcp.logging_config import log_tool_call
from prior_mcp.mcp.handlers import CREDENTIAL_OPTIONAL_TOOLS, HANDLERS, VALIDATORS
from prior_mcp.mcp.resources import RESOURCES, read_resource_text
from prior_mcp.mcp.tool_definitions import TOOLS

logger = logging.getLogger(__name__)

AUTO_REGISTER_ENV = "PRIOR_AUTO_REGISTER"

# Initialize MCP server
mcp = Server("prior")

# One client per process, created on first use
_client: Optional[PriorApiClient] = None
_client_options: Dict[str, Any] = {}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes")


def configure(api_url: Optional[str] = None, auto_register: Optional[bool] = None) -> None:
    """Set client options for this MCP session.

    Drops any existing client so the next ``get_client()`` uses the new
    options.
    """
    global _client
    _client_options.clear()
    if api_url:
        _client_options["api_url"] = api_url
    if auto_register is not None:
        _client_options["auto_register"] = auto_register
    _client = None


def set_client(client: Optional[PriorApiClient]) -> None:
    """Install (or with None, forget) the process-wide client."""
    global _client
    _client = client


def get_client(require_credential: bool = True) -> PriorApiClient:
    """Get or create the process-wide PriorApiClient.

    Args:
        require_credential: When False, a client is created even if no
            credential resolves yet.

    Raises:
        ConfigurationError: When a credential is required, none is
            available, and auto-registration is off.
    """
    global _client
    if _client is None:
        options = dict(_client_options)
        options.setdefault("auto_register", _env_flag(AUTO_REGISTER_ENV))
        _client = PriorApiClient(require_credential=require_credential, **options)
    return _client


# =============================================================================
# INPUT VALIDATION & ERROR HANDLING
# =============================================================================


def validate_tool_input(name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and sanitize MCP tool inputs."""
    try:
        if not isinstance(name, str):
            raise ValueError(f"tool name must be a string, got {type(name).__name__}")
        if not name:
            raise ValueError("tool name must not be empty")
        if not isinstance(arguments, dict):
            raise ValueError(f"arguments must be an object, got {type(arguments).__name__}")

        validator = VALIDATORS.get(name)
        if validator is None:
            raise ValueError(f"Unknown tool: {name}")
        return validator(arguments)

    except (ValueError, TypeError) as e:
        logger.warning(f"Input validation failed for tool {name}: {e}")
        raise ValueError(f"Invalid input: {str(e)}")


def _error_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)


def handle_tool_error(e: Exception, tool_name: str, arguments: Dict[str, Any]) -> CallToolResult:
    """Turn a local failure into an error result without leaking internals."""
    if isinstance(e, ValueError):
        logger.warning(f"Invalid input for tool {tool_name}: {e}")
        message = str(e)
        if not message.startswith("Invalid input:"):
            message = f"Invalid input: {message}"
        return _error_result(message)

    elif isinstance(e, ConfigurationError):
        logger.warning(f"Prior credentials missing for tool {tool_name}")
        return _error_result(CREDENTIALS_MESSAGE)

    else:
        # Unknown error - log full details but return generic message
        argument_keys = list(arguments.keys()) if isinstance(arguments, dict) else []
        logger.error(
            f"Internal error in tool {tool_name}",
            extra={
                "tool_name": tool_name,
                "arguments_keys": argument_keys,
                "error_type": type(e).__name__,
                "error_message": str(e),
            },
            exc_info=True,
        )
        return _error_result("Internal server error")


def _record(tool_name: str, outcome: str, **details) -> None:
    try:
        log_tool_call(tool_name, outcome, **details)
    except OSError as e:
        logger.debug(f"Could not write tool event for {tool_name}: {e}")


# =============================================================================
# MCP PROTOCOL HANDLERS
# =============================================================================


@mcp.list_tools()
async def list_tools() -> List[Tool]:
    """List available Prior tools."""
    return list(TOOLS)


@mcp.call_tool()
async def call_tool(name: str, arguments: Dict[str, Any]) -> CallToolResult:
    """Handle tool calls with validation and credential checks.

    ``ApiError`` and ``httpx.HTTPError`` are re-raised so the MCP runtime
    reports them to the agent.
    """
    try:
        sanitized_args = validate_tool_input(name, arguments)

        if name in CREDENTIAL_OPTIONAL_TOOLS:
            client = get_client(require_credential=False)
        else:
            client = get_client()
            if not await client.ensure_credential():
                raise ConfigurationError(CREDENTIALS_MESSAGE)

        handler = HANDLERS[name]
        text, structured = await handler(sanitized_args, client)
        _record(name, "ok")
        return CallToolResult(
            content=[TextContent(type="text", text=text)],
            structuredContent=structured,
        )

    except (ApiError, httpx.HTTPError) as e:
        _record(name, "api_error", error=type(e).__name__)
        raise

    except Exception as e:
        _record(name, "error", error=type(e).__name__)
        return handle_tool_error(e, name, arguments)


@mcp.list_resources()
async def list_resources() -> List[Resource]:
    """List Prior resources: agent status and usage guides."""
    return list(RESOURCES)


@mcp.read_resource()
async def read_resource(uri: Any) -> List[ReadResourceContents]:
    return await read_resource_text(str(uri), get_client)


async def run_server():
    """Run the MCP server."""
    try:
        async with stdio_server() as (read_stream, write_stream):
            await mcp.run(
                read_stream,
                write_stream,
                mcp.create_initialization_options(),
            )
    finally:
        if _client is not None:
            await _client.aclose()


def main(api_url: Optional[str] = None, auto_register: Optional[bool] = None):
    """Entry point for MCP server.

    Option resolution (in order):
    1. Explicit arguments
    2. PRIOR_API_URL / PRIOR_AUTO_REGISTER environment variables
    3. Built-in defaults
    """
    configure(api_url=api_url, auto_register=auto_register)
    logger.info("Starting Prior MCP server")
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
