from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest

from interactive_choice.dialog.runner import DialogCommand

_ECHO_RECOMMENDED = """
import json
import sys

args = sys.argv[1:]
document = json.loads(args[args.index("--input") + 1])
print("DEBUG: Rust run() started")
print("DEBUG: Received CLI input: " + json.dumps(document))
index = document["recommendedIndex"]
choice = document["choices"][index] if index >= 0 else None
print(json.dumps({"choice": choice, "index": index, "custom_input": None}))
"""


@pytest.fixture
def write_dialog(tmp_path: Path) -> Callable[[str], DialogCommand]:
    """Write a fake dialog script and return a command that runs it."""

    counter = {"value": 0}

    def _write(source: str) -> DialogCommand:
        counter["value"] += 1
        script = tmp_path / "fake_dialog_{0}.py".format(counter["value"])
        script.write_text(textwrap.dedent(source), encoding="utf-8")
        return DialogCommand(command=sys.executable, args=[str(script)])

    return _write


@pytest.fixture
def echo_dialog(write_dialog) -> DialogCommand:
    return write_dialog(_ECHO_RECOMMENDED)


@pytest.fixture
def event_recorder() -> Tuple[List[Tuple[str, Dict]], Callable[[str, Dict], None]]:
    events: List[Tuple[str, Dict]] = []

    def _sink(event_type: str, payload: Dict) -> None:
        events.append((event_type, dict(payload)))

    return events, _sink
