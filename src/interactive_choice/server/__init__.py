"""MCP server surface for the ask_user tool."""

from .app import build_ask_user_tool, build_server, call_tool, run_stdio_server
from .ask_user import TOOL_NAME, AskUserTool

__all__ = [
    "AskUserTool",
    "TOOL_NAME",
    "build_ask_user_tool",
    "build_server",
    "call_tool",
    "run_stdio_server",
]
