"""The ``ask_user`` tool: validate arguments, run one dialog, shape the reply."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from interactive_choice.dialog.errors import (
    INVALID_PARAMS,
    DialogLaunchError,
    ResultParseError,
    ToolCallError,
)
from interactive_choice.dialog.recommend import resolve_recommended_index
from interactive_choice.dialog.result_parser import parse_dialog_output
from interactive_choice.dialog.runner import DialogEventSink, DialogRunner
from interactive_choice.dialog.types import (
    DEFAULT_TITLE,
    DialogExitedNonZero,
    DialogLaunchFailed,
    DialogOutcome,
    DialogSucceeded,
    DialogTimedOut,
    InputDocument,
    ToolReply,
)

TOOL_NAME = "ask_user"
TIMEOUT_TEXT = "Error: User feedback timed out."


def tool_input_schema(default_timeout_sec: float) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "title": {
                "type": "string",
                "description": "(Optional) A concise, high-level summary of the decision required.",
            },
            "body": {
                "type": "string",
                "description": (
                    "(Optional) Detailed context or explanation. Supports Markdown "
                    "(code blocks, lists, etc.) to help the user make an informed choice."
                ),
            },
            "choices": {
                "type": "array",
                "items": {"type": "string"},
                "description": "(Required) A list of predefined options for the user to select from.",
            },
            "recommended": {
                "type": "string",
                "description": (
                    "(Optional) One of the exact strings from the 'choices' array that the "
                    "agent recommends. The UI will highlight this option."
                ),
            },
            "allowCustom": {
                "type": "boolean",
                "description": (
                    "(Optional) Whether to provide a text area for the user to type a custom "
                    "response not in the choices list. Defaults to false."
                ),
                "default": False,
            },
            "timeoutSec": {
                "type": "number",
                "description": (
                    "(Optional) How long to wait for a user response in seconds. Defaults to "
                    "{0:g}. If exceeded, the tool returns a timeout error.".format(default_timeout_sec)
                ),
            },
        },
        "required": ["choices"],
    }


TOOL_DESCRIPTION = (
    "Ask the user a question with several choices via a native GUI window. "
    "Supports Markdown in the body and a recommended choice."
)


def _require_choices(arguments: Dict[str, Any]) -> List[str]:
    choices = arguments.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ToolCallError(INVALID_PARAMS, "choices must be a non-empty array of strings")
    if not all(isinstance(item, str) for item in choices):
        raise ToolCallError(INVALID_PARAMS, "choices must be a non-empty array of strings")
    return list(choices)


def _optional_recommended(arguments: Dict[str, Any]) -> Optional[str]:
    recommended = arguments.get("recommended")
    if recommended is None or isinstance(recommended, str):
        return recommended
    raise ToolCallError(INVALID_PARAMS, "recommended must be a string")


def resolve_timeout_sec(value: object, default: float) -> float:
    # bool is an int subclass; a JSON true is not a timeout.
    if isinstance(value, bool):
        return default
    try:
        converted = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(converted) or converted <= 0:
        return default
    return converted


def build_input_document(arguments: Dict[str, Any]) -> InputDocument:
    choices = _require_choices(arguments)
    recommended_index = resolve_recommended_index(choices, _optional_recommended(arguments))
    title = arguments.get("title")
    body = arguments.get("body")
    return InputDocument(
        choices=choices,
        title=title if isinstance(title, str) and title else DEFAULT_TITLE,
        body=body if isinstance(body, str) else "",
        recommended_index=recommended_index,
        allow_custom=bool(arguments.get("allowCustom")),
    )


def reply_for_outcome(
    outcome: DialogOutcome,
    event_sink: Optional[DialogEventSink] = None,
) -> ToolReply:
    """Turn a dialog outcome into a tool reply.

    Only a launch failure escapes as an exception; everything else still has
    a textual answer for the caller.
    """

    if isinstance(outcome, DialogLaunchFailed):
        raise DialogLaunchError(
            "Failed to launch interactive window: {0}".format(outcome.error_message)
        )
    if isinstance(outcome, DialogTimedOut):
        return ToolReply(text=TIMEOUT_TEXT, is_error=True)
    if isinstance(outcome, DialogExitedNonZero):
        return ToolReply(
            text="Tool window closed unexpectedly (code {0})".format(outcome.code),
            is_error=True,
        )
    if isinstance(outcome, DialogSucceeded):
        try:
            return ToolReply(text=parse_dialog_output(outcome.raw_stdout))
        except ResultParseError as exc:
            if event_sink is not None:
                event_sink("dialog.parse_failed", {"error": str(exc)})
            return ToolReply(text=str(exc), is_error=True)
    raise TypeError("unknown dialog outcome: {0!r}".format(outcome))


class AskUserTool:
    """Binds the ``ask_user`` contract to one dialog runner."""

    name = TOOL_NAME

    def __init__(
        self,
        runner: DialogRunner,
        default_timeout_sec: float,
        event_sink: Optional[DialogEventSink] = None,
    ) -> None:
        self._runner = runner
        self._default_timeout_sec = float(default_timeout_sec)
        self._event_sink = event_sink

    @property
    def default_timeout_sec(self) -> float:
        return self._default_timeout_sec

    @property
    def input_schema(self) -> Dict[str, Any]:
        return tool_input_schema(self._default_timeout_sec)

    async def call(self, arguments: Optional[Dict[str, Any]]) -> ToolReply:
        payload = dict(arguments or {})
        try:
            document = build_input_document(payload)
        except ToolCallError as exc:
            self._emit("tool.rejected", {"code": exc.code, "error": exc.message})
            raise
        timeout_sec = resolve_timeout_sec(payload.get("timeoutSec"), self._default_timeout_sec)
        outcome = await self._runner.run(document, timeout_sec)
        return reply_for_outcome(outcome, event_sink=self._event_sink)

    def _emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self._event_sink is None:
            return
        self._event_sink(event_type, payload)
