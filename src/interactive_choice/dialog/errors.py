"""Exceptions raised by the dialog core and surfaced by the MCP server."""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "METHOD_NOT_FOUND",
    "DialogLaunchError",
    "RecommendationError",
    "ResultParseError",
    "ToolCallError",
]


class ToolCallError(RuntimeError):
    """Raised when a tool call cannot produce any tool result.

    ``message`` is the literal text clients see; it is never prefixed.
    """

    def __init__(self, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = int(code)
        self.message = message
        self.data = data or {}

    def __str__(self) -> str:
        return self.message


class RecommendationError(ToolCallError):
    """Raised when the recommended label matches none of the choices."""

    def __init__(self, message: str) -> None:
        super().__init__(INVALID_PARAMS, message)


class DialogLaunchError(ToolCallError):
    """Raised when the dialog binary could not be started at all."""

    def __init__(self, message: str) -> None:
        super().__init__(INTERNAL_ERROR, message)


class ResultParseError(RuntimeError):
    """Raised when dialog stdout is not a JSON result document."""
