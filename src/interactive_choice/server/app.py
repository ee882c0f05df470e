"""MCP stdio server exposing the ``ask_user`` tool."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from interactive_choice.config import Settings
from interactive_choice.debug_log import DialogLogWriter
from interactive_choice.dialog.binary import resolve_dialog_binary
from interactive_choice.dialog.errors import METHOD_NOT_FOUND, ToolCallError
from interactive_choice.dialog.runner import DialogCommand, DialogRunner
from interactive_choice.server.ask_user import TOOL_DESCRIPTION, AskUserTool

SERVER_NAME = "mcp-interactive-choice"
SERVER_VERSION = "1.0.0"


def build_ask_user_tool(settings: Settings, log_writer: Optional[DialogLogWriter] = None) -> AskUserTool:
    binary = resolve_dialog_binary(settings.dialog_command)
    runner = DialogRunner(
        DialogCommand(command=binary.path, args=list(settings.dialog_args)),
        event_sink=log_writer,
    )
    return AskUserTool(
        runner=runner,
        default_timeout_sec=settings.default_timeout_sec,
        event_sink=log_writer,
    )


def tool_definitions(tool: AskUserTool) -> List[types.Tool]:
    return [
        types.Tool(
            name=tool.name,
            description=TOOL_DESCRIPTION,
            inputSchema=tool.input_schema,
        )
    ]


async def call_tool(
    tool: AskUserTool,
    name: str,
    arguments: Optional[Dict[str, Any]],
) -> types.CallToolResult:
    """Run one tool call; protocol-level failures surface as ``McpError``.

    The error message is the exact text built by the tool layer.
    """

    if name != tool.name:
        raise McpError(
            types.ErrorData(code=METHOD_NOT_FOUND, message="Tool not found: {0}".format(name))
        )
    try:
        reply = await tool.call(arguments)
    except ToolCallError as exc:
        raise McpError(types.ErrorData(code=exc.code, message=exc.message)) from exc
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=reply.text)],
        isError=reply.is_error,
    )


def build_server(tool: AskUserTool) -> Server:
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def _list_tools() -> List[types.Tool]:
        return tool_definitions(tool)

    # Registered directly instead of via ``@server.call_tool()``: that
    # decorator folds every exception into an isError tool result, while
    # invalid params and launch failures must reach the client as JSON-RPC
    # errors.
    async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
        result = await call_tool(tool, request.params.name, request.params.arguments)
        return types.ServerResult(result)

    server.request_handlers[types.CallToolRequest] = _call_tool
    return server


async def serve_stdio(settings: Settings) -> None:
    log_writer = DialogLogWriter.from_settings(settings)
    server = build_server(build_ask_user_tool(settings, log_writer=log_writer))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run_stdio_server(settings: Settings) -> int:
    asyncio.run(serve_stdio(settings))
    return 0
