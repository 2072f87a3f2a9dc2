"""
MCP stdio transport for the markdown to PDF tool.
"""

import logging
from typing import List, Optional

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.shared.exceptions import McpError

from . import __version__
from .tool import TOOL_DESCRIPTION, TOOL_NAME, create_pdf_from_markdown, tool_input_schema

logger = logging.getLogger(__name__)

SERVER_NAME = "markdown2pdf"

server = Server(SERVER_NAME)


class ToolCallError(Exception):
    """Raised to hand a failed tool result back to the client as isError."""


@server.list_tools()
async def handle_list_tools() -> List[types.Tool]:
    """List the single conversion tool."""
    return [
        types.Tool(
            name=TOOL_NAME,
            description=TOOL_DESCRIPTION,
            inputSchema=tool_input_schema(),
        )
    ]


def _ensure_known_tool(name: str) -> None:
    if name != TOOL_NAME:
        raise McpError(
            types.ErrorData(code=types.METHOD_NOT_FOUND, message=f"Unknown tool: {name}")
        )


@server.call_tool()
async def handle_call_tool(name: str, arguments: Optional[dict]) -> List[types.TextContent]:
    """
    Handle tool execution requests.

    Conversion failures are raised as ToolCallError, which the server
    reports as a tool result with isError.
    """
    _ensure_known_tool(name)

    result = await create_pdf_from_markdown(arguments)
    if result.is_error:
        raise ToolCallError(result.text)

    return [types.TextContent(type="text", text=result.text)]


# call_tool() turns every handler exception into an isError result, so
# unknown names are checked here to reach the client as a JSON-RPC error.
_call_tool_request_handler = server.request_handlers[types.CallToolRequest]


async def handle_call_tool_request(req: types.CallToolRequest) -> types.ServerResult:
    """Reject unknown tool names with METHOD_NOT_FOUND, then dispatch."""
    _ensure_known_tool(req.params.name)
    return await _call_tool_request_handler(req)


server.request_handlers[types.CallToolRequest] = handle_call_tool_request


async def serve() -> None:
    """Run the MCP server over stdin/stdout until the client disconnects."""
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        logger.info("Markdown to PDF MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=SERVER_NAME,
                server_version=__version__,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )
