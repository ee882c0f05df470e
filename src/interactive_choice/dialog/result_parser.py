"""Extract the user's decision from captured dialog stdout."""

from __future__ import annotations

import json
from typing import Any, Dict

from interactive_choice.dialog.errors import ResultParseError
from interactive_choice.dialog.types import CANCELLED_TEXT, ResultDocument

__all__ = [
    "CANCELLED_TEXT",
    "DIAGNOSTIC_PREFIX",
    "parse_dialog_output",
    "parse_result_document",
    "strip_diagnostics",
]

DIAGNOSTIC_PREFIX = "DEBUG"


def strip_diagnostics(raw_output: str) -> str:
    kept = [
        line
        for line in raw_output.split("\n")
        if not line.strip().startswith(DIAGNOSTIC_PREFIX)
    ]
    return "\n".join(kept).strip()


def parse_result_document(raw_output: str) -> ResultDocument:
    cleaned = strip_diagnostics(raw_output)
    if not cleaned:
        return ResultDocument()
    try:
        payload: Any = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ResultParseError("Error parsing result: {0}".format(raw_output)) from exc
    if payload is None:
        raise ResultParseError("Error parsing result: {0}".format(raw_output))
    if not isinstance(payload, dict):
        # A bare string, number or array carries no decision fields.
        return ResultDocument()
    document: Dict[str, Any] = payload
    return ResultDocument.from_json(document)


def parse_dialog_output(raw_output: str) -> str:
    """Return custom input, else the chosen label, else ``CANCELLED_TEXT``.

    Output that is empty once ``DEBUG`` lines are dropped counts as a
    cancellation, not an error.
    """

    return parse_result_document(raw_output).answer_text()
