from __future__ import annotations

import pytest

from interactive_choice.dialog.errors import ResultParseError
from interactive_choice.dialog.result_parser import (
    parse_dialog_output,
    parse_result_document,
    strip_diagnostics,
)
from interactive_choice.dialog.types import CANCELLED_TEXT


def test_returns_selected_choice():
    assert parse_dialog_output('{"choice":"Apple","index":0,"custom_input":null}') == "Apple"


def test_returns_custom_input():
    assert parse_dialog_output('{"choice":null,"index":-1,"custom_input":"My Custom"}') == "My Custom"


def test_custom_input_wins_over_choice():
    raw = '{"choice":"Apple","index":0,"custom_input":"Something else"}'
    assert parse_dialog_output(raw) == "Something else"


def test_nothing_selected_is_cancellation():
    assert parse_dialog_output('{"choice":null,"index":-1,"custom_input":null}') == CANCELLED_TEXT
    assert CANCELLED_TEXT == "user cancelled the selection"


def test_empty_strings_fall_through_to_next_field():
    assert parse_dialog_output('{"choice":"Apple","index":0,"custom_input":""}') == "Apple"
    assert parse_dialog_output('{"choice":"","index":-1,"custom_input":""}') == CANCELLED_TEXT


def test_skipped_flag_is_informational():
    raw = '{"choice":null,"index":-1,"custom_input":null,"skipped":true}'
    assert parse_dialog_output(raw) == CANCELLED_TEXT
    assert parse_result_document(raw).skipped is True


def test_debug_lines_are_dropped():
    raw = 'DEBUG: some log\n{"choice":"Banana","index":1,"custom_input":null}\nDEBUG: another log'
    assert parse_dialog_output(raw) == "Banana"


def test_debug_prefix_needs_no_colon_and_ignores_indentation():
    raw = '   DEBUG [JS]: clicked\nDEBUGGING\n{"choice":"Cherry","index":2,"custom_input":null}\r\n'
    assert strip_diagnostics(raw) == '{"choice":"Cherry","index":2,"custom_input":null}'
    assert parse_dialog_output(raw) == "Cherry"


def test_lowercase_debug_is_not_a_diagnostic_line():
    with pytest.raises(ResultParseError):
        parse_dialog_output('debug: x\n{"choice":"Apple"}')


def test_empty_output_is_cancellation():
    assert parse_dialog_output("") == CANCELLED_TEXT
    assert parse_dialog_output("   \n  ") == CANCELLED_TEXT
    assert parse_dialog_output("DEBUG: only noise\nDEBUG: more") == CANCELLED_TEXT


def test_invalid_json_reports_raw_input():
    with pytest.raises(ResultParseError) as excinfo:
        parse_dialog_output("not json")
    assert str(excinfo.value) == "Error parsing result: not json"


def test_parse_error_message_keeps_diagnostic_lines():
    raw = "DEBUG: start\n{broken"
    with pytest.raises(ResultParseError) as excinfo:
        parse_dialog_output(raw)
    assert str(excinfo.value) == "Error parsing result: DEBUG: start\n{broken"


@pytest.mark.parametrize("raw", ['"x"', "3", "[1]", '["Apple"]', "true"])
def test_non_object_json_without_fields_is_cancellation(raw):
    assert parse_dialog_output(raw) == CANCELLED_TEXT


def test_json_null_is_a_parse_error():
    with pytest.raises(ResultParseError) as excinfo:
        parse_dialog_output("DEBUG: done\nnull")
    assert str(excinfo.value) == "Error parsing result: DEBUG: done\nnull"


def test_result_document_fields():
    document = parse_result_document('{"choice":"Banana","index":1,"custom_input":null}')
    assert document.choice == "Banana"
    assert document.index == 1
    assert document.custom_input is None
    assert document.skipped is False
