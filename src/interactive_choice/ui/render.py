"""Presentation helpers for interactive-choice CLI output."""

from __future__ import annotations

from typing import Any, Dict, Optional, TextIO

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.text import Text


def bilingual_text(zh: str, en: Optional[str] = None) -> str:
    if not en:
        return zh
    return "{0} ({1})".format(zh, en)


def render_notice(level: str, zh: str, en: Optional[str] = None) -> str:
    prefix_map = {
        "info": bilingual_text("提示", "Info"),
        "warn": bilingual_text("警告", "Warning"),
        "error": bilingual_text("错误", "Error"),
        "success": bilingual_text("成功", "Success"),
    }
    prefix = prefix_map.get(level, bilingual_text("提示", "Info"))
    return "{0}: {1}".format(prefix, bilingual_text(zh, en))


def _is_tty(stream: TextIO, forced: Optional[bool]) -> bool:
    if forced is not None:
        return forced
    isatty = getattr(stream, "isatty", None)
    if callable(isatty):
        try:
            return bool(isatty())
        except ValueError:
            return False
    return False


def render_answer_panel(
    text: str,
    is_error: bool,
    stream: TextIO,
    is_tty: Optional[bool] = None,
) -> None:
    """Print the dialog answer; Rich panel on a TTY, ASCII box otherwise."""
    normalized = text if text is not None else ""
    title = bilingual_text("失败", "Failed") if is_error else bilingual_text("用户回答", "Answer")

    if _is_tty(stream, is_tty):
        console = Console(file=stream, highlight=False, soft_wrap=True)
        console.print(
            Panel(
                Text(normalized),
                title=title,
                border_style="red" if is_error else "cyan",
                box=box.ROUNDED,
            )
        )
        return

    lines = normalized.splitlines() or [""]
    width = max([len(title)] + [len(line) for line in lines])
    stream.write("+-{0}-+\n".format(title.ljust(width, "-")))
    for line in lines:
        stream.write("| {0} |\n".format(line.ljust(width)))
    stream.write("+-{0}-+\n".format("-" * width))


def render_doctor_text(report: Dict[str, Any]) -> str:
    lines = [
        bilingual_text("系统诊断", "Doctor Report"),
        "project_root={0}".format(report.get("project_root", "")),
        "config_loaded={0}".format(bool(report.get("config_loaded"))),
        "",
        bilingual_text("对话框程序", "Dialog Binary"),
        "dialog_binary={0}".format(report.get("dialog_binary", "")),
        "dialog_binary_source={0}".format(report.get("dialog_binary_source", "")),
        "dialog_binary_exists={0} dialog_binary_executable={1}".format(
            bool(report.get("dialog_binary_exists")),
            bool(report.get("dialog_binary_executable")),
        ),
        "dialog_args={0}".format(" ".join(report.get("dialog_args") or [])),
        "default_timeout_sec={0:g}".format(float(report.get("default_timeout_sec") or 0)),
        "",
        bilingual_text("日志", "Logs"),
        "logs_enabled={0}".format(bool(report.get("logs_enabled"))),
        "logs_active_file={0}".format(report.get("logs_active_file", "")),
        "logs_write_errors={0}".format(int(report.get("logs_write_errors") or 0)),
    ]
    return "\n".join(lines)
