"""
handlers/tool_handler.py
------------------------
Handles MCP tools/list and tools/call.
Delegates every call to the Dispatcher; no SQL lives here.
"""

import asyncio
from typing import Optional

from mcp import types
from mcp.server.lowlevel import Server

from models.operation import Operation
from services.dispatcher import Dispatcher
from services.normalizer import to_tool_response


def tool_definitions() -> list[types.Tool]:
    """One tool per operation, with the operation's argument schema as input schema."""
    return [
        types.Tool(name=op.value, description=op.description, inputSchema=op.input_schema)
        for op in Operation
    ]


async def call_tool(dispatcher: Dispatcher, name: str, arguments: Optional[dict]) -> types.CallToolResult:
    """
    Run a tool call on a worker thread and wrap the outcome for the protocol.

    The blocking driver work happens off the event loop so concurrent calls
    each proceed on their own leased connection.
    """
    result = await asyncio.to_thread(dispatcher.dispatch, name, arguments)
    response = to_tool_response(result)
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=item["text"]) for item in response["content"]],
        isError=response["isError"],
    )


def register(server: Server, dispatcher: Dispatcher) -> None:
    """Attach the tool handlers to the server."""

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tool_definitions()

    # Arguments are validated by the dispatcher so that bad input comes back as an error payload.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: Optional[dict]) -> types.CallToolResult:
        return await call_tool(dispatcher, name, arguments)
