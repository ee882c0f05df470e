"""Dialog orchestration core."""

from .errors import DialogLaunchError, RecommendationError, ResultParseError, ToolCallError
from .recommend import resolve_recommended_index
from .result_parser import parse_dialog_output
from .runner import DialogCommand, DialogInvocation, DialogRunner
from .types import CANCELLED_TEXT, InputDocument, ResultDocument, ToolReply

__all__ = [
    "CANCELLED_TEXT",
    "DialogCommand",
    "DialogInvocation",
    "DialogLaunchError",
    "DialogRunner",
    "InputDocument",
    "RecommendationError",
    "ResultDocument",
    "ResultParseError",
    "ToolCallError",
    "ToolReply",
    "parse_dialog_output",
    "resolve_recommended_index",
]
