from __future__ import annotations

import io

from interactive_choice.ui.render import render_answer_panel, render_doctor_text, render_notice


def test_render_notice_is_bilingual():
    assert render_notice("error", "配置无效", "invalid config") == "错误 (Error): 配置无效 (invalid config)"
    assert render_notice("unknown", "只有中文") == "提示 (Info): 只有中文"


def test_answer_box_without_tty():
    stream = io.StringIO()

    render_answer_panel("Banana", False, stream=stream, is_tty=False)

    lines = stream.getvalue().splitlines()
    assert lines[0].startswith("+-用户回答 (Answer)")
    assert lines[1].startswith("| Banana")
    assert lines[-1].startswith("+-")
    assert len(lines) == 3


def test_error_answer_uses_failed_title():
    stream = io.StringIO()

    render_answer_panel("Error: User feedback timed out.", True, stream=stream, is_tty=False)

    assert "Failed" in stream.getvalue()
    assert "Error: User feedback timed out." in stream.getvalue()


def test_rich_panel_on_tty():
    stream = io.StringIO()

    render_answer_panel("line one\nline two", False, stream=stream, is_tty=True)

    output = stream.getvalue()
    assert "line one" in output
    assert "line two" in output
    assert "Answer" in output


def test_doctor_text_lists_binary_and_logs():
    text = render_doctor_text(
        {
            "project_root": "/work",
            "config_loaded": True,
            "dialog_binary": "/opt/native-ui",
            "dialog_binary_source": "explicit",
            "dialog_binary_exists": False,
            "dialog_args": ["--theme", "dark"],
            "default_timeout_sec": 60.0,
            "logs_enabled": True,
            "logs_active_file": "/work/.interactive_choice/logs/dialog.log.jsonl",
        }
    )

    assert "dialog_binary=/opt/native-ui" in text
    assert "dialog_args=--theme dark" in text
    assert "default_timeout_sec=60" in text
    assert "logs_enabled=True" in text
