"""Typed contracts shared by the dialog runner, result parser and ask_user tool."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

DEFAULT_TITLE = "Action Required"
CANCELLED_TEXT = "user cancelled the selection"
NO_RECOMMENDATION = -1


@dataclass(frozen=True)
class InputDocument:
    """Question handed to the dialog process as one JSON argument."""

    choices: List[str]
    title: str = DEFAULT_TITLE
    body: str = ""
    recommended_index: int = NO_RECOMMENDATION
    allow_custom: bool = False

    def as_json(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "body": self.body,
            "choices": list(self.choices),
            "recommendedIndex": int(self.recommended_index),
            "allowCustom": bool(self.allow_custom),
        }

    def serialize(self) -> str:
        return json.dumps(self.as_json(), ensure_ascii=False)


@dataclass(frozen=True)
class ResultDocument:
    """Decision printed by the dialog process on stdout."""

    choice: Optional[str] = None
    index: int = NO_RECOMMENDATION
    custom_input: Optional[str] = None
    skipped: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "ResultDocument":
        choice = payload.get("choice")
        custom_input = payload.get("custom_input")
        try:
            index = int(payload.get("index", NO_RECOMMENDATION))
        except (TypeError, ValueError):
            index = NO_RECOMMENDATION
        return cls(
            choice=choice if isinstance(choice, str) else None,
            index=index,
            custom_input=custom_input if isinstance(custom_input, str) else None,
            skipped=payload.get("skipped") is True,
            raw=dict(payload),
        )

    def answer_text(self) -> str:
        if self.custom_input:
            return self.custom_input
        if self.choice:
            return self.choice
        return CANCELLED_TEXT


class DialogState(str, Enum):
    IDLE = "idle"
    SPAWNING = "spawning"
    RUNNING = "running"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    LAUNCH_FAILED = "launch_failed"

    @property
    def terminal(self) -> bool:
        return self in {
            DialogState.COMPLETED,
            DialogState.TIMED_OUT,
            DialogState.LAUNCH_FAILED,
        }


@dataclass(frozen=True)
class DialogSucceeded:
    raw_stdout: str


@dataclass(frozen=True)
class DialogTimedOut:
    timeout_sec: float = 0.0


@dataclass(frozen=True)
class DialogExitedNonZero:
    code: int


@dataclass(frozen=True)
class DialogLaunchFailed:
    error_message: str


DialogOutcome = Union[DialogSucceeded, DialogTimedOut, DialogExitedNonZero, DialogLaunchFailed]


@dataclass(frozen=True)
class ToolReply:
    """Tool result text as seen by the calling agent."""

    text: str
    is_error: bool = False
