"""Typer CLI entrypoints for interactive-choice."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from interactive_choice.config import (
    ProjectConfigError,
    Settings,
    initialize_project_config,
    load_settings,
)
from interactive_choice.debug_log import DialogLogWriter
from interactive_choice.dialog.binary import resolve_dialog_binary
from interactive_choice.dialog.errors import ToolCallError
from interactive_choice.server.app import build_ask_user_tool, run_stdio_server
from interactive_choice.ui.render import render_answer_panel, render_doctor_text, render_notice

app = typer.Typer(
    invoke_without_command=True,
    no_args_is_help=False,
    help="通过原生对话框向用户提问的 MCP 服务 (MCP server asking the user via a native dialog)",
)

_TIMEOUT_HELP = "默认等待秒数 (Default timeout in seconds)"
_BINARY_HELP = "对话框程序路径 (Path to the native-ui binary)"
_WORKSPACE_HELP = "配置所在目录（默认当前目录） (Workspace holding .interactive_choice)"


def _load_settings_or_exit(
    timeout: Optional[float],
    binary_path: Optional[str],
    workspace: Optional[Path],
) -> Settings:
    try:
        return load_settings(timeout_sec=timeout, binary_path=binary_path, workspace_dir=workspace)
    except ProjectConfigError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=2)


def _serve(settings: Settings) -> int:
    binary = resolve_dialog_binary(settings.dialog_command)
    typer.echo(
        "Interactive Choice MCP Server running on stdio (dialog={0})".format(binary.path),
        err=True,
    )
    return run_stdio_server(settings)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    timeout: Optional[float] = typer.Option(None, "--timeout", help=_TIMEOUT_HELP),
    binary_path: Optional[str] = typer.Option(None, "--binary-path", help=_BINARY_HELP),
    workspace: Optional[Path] = typer.Option(None, "--workspace", help=_WORKSPACE_HELP),
    stdio: bool = typer.Option(False, "--stdio", hidden=True, help="兼容参数，忽略 (Ignored for compatibility)"),
) -> None:
    ctx.obj = ctx.obj or {}
    ctx.obj["timeout"] = timeout
    ctx.obj["binary_path"] = binary_path
    ctx.obj["workspace"] = workspace

    if ctx.invoked_subcommand is not None:
        return

    settings = _load_settings_or_exit(timeout, binary_path, workspace)
    raise typer.Exit(code=_serve(settings))


@app.command("serve")
def serve_cmd(
    ctx: typer.Context,
    timeout: Optional[float] = typer.Option(None, "--timeout", help=_TIMEOUT_HELP),
    binary_path: Optional[str] = typer.Option(None, "--binary-path", help=_BINARY_HELP),
    workspace: Optional[Path] = typer.Option(None, "--workspace", help=_WORKSPACE_HELP),
    stdio: bool = typer.Option(False, "--stdio", hidden=True, help="兼容参数，忽略 (Ignored for compatibility)"),
) -> None:
    """以 stdio 方式运行 MCP 服务 (Run the MCP server on stdio)."""
    parent_obj = ctx.obj or {}
    settings = _load_settings_or_exit(
        timeout if timeout is not None else parent_obj.get("timeout"),
        binary_path if binary_path is not None else parent_obj.get("binary_path"),
        workspace if workspace is not None else parent_obj.get("workspace"),
    )
    raise typer.Exit(code=_serve(settings))


@app.command("init")
def init_cmd(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        help="重建 .interactive_choice（会先删除已有目录） (Recreate config directory)",
    ),
) -> None:
    """生成默认配置 (Write the default config directory)."""
    workspace = (ctx.obj or {}).get("workspace")
    try:
        config_root = initialize_project_config(workspace_dir=workspace, force=force)
    except ProjectConfigError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=2)

    typer.echo(
        render_notice(
            "success",
            "配置初始化完成：{0}".format(config_root),
            "Initialized config at: {0}".format(config_root),
        )
    )


def build_doctor_report(settings: Settings) -> Dict[str, Any]:
    binary = resolve_dialog_binary(settings.dialog_command)
    report: Dict[str, Any] = {
        "project_root": str(settings.project_root),
        "config_root": str(settings.config_root),
        "config_loaded": settings.config_loaded,
        "dialog_binary": binary.path,
        "dialog_binary_source": binary.source,
        "dialog_binary_exists": binary.exists,
        "dialog_binary_executable": binary.executable,
        "dialog_args": list(settings.dialog_args),
        "default_timeout_sec": settings.default_timeout_sec,
    }
    report.update(DialogLogWriter.from_settings(settings).status())
    return report


@app.command("doctor")
def doctor_cmd(
    ctx: typer.Context,
    output_format: str = typer.Option("json", "--format", help="输出格式：json|text (Output format)"),
) -> None:
    """诊断对话框程序与配置 (Diagnose dialog binary and config)."""
    normalized_format = output_format.strip().lower()
    if normalized_format not in {"json", "text"}:
        typer.echo(
            render_notice(
                "error",
                "不支持的格式：{0}".format(output_format),
                "Unsupported format: {0}".format(output_format),
            ),
            err=True,
        )
        raise typer.Exit(code=2)

    parent_obj = ctx.obj or {}
    settings = _load_settings_or_exit(
        parent_obj.get("timeout"),
        parent_obj.get("binary_path"),
        parent_obj.get("workspace"),
    )
    report = build_doctor_report(settings)
    if normalized_format == "json":
        typer.echo(json.dumps(report, ensure_ascii=True, indent=2))
        return
    typer.echo(render_doctor_text(report))


@app.command("ask")
def ask_cmd(
    ctx: typer.Context,
    choices: List[str] = typer.Argument(..., help="候选项 (Choices)"),
    title: Optional[str] = typer.Option(None, "--title", help="标题 (Dialog title)"),
    body: Optional[str] = typer.Option(None, "--body", help="Markdown 正文 (Markdown body)"),
    recommended: Optional[str] = typer.Option(None, "--recommended", help="推荐项 (Recommended choice)"),
    allow_custom: bool = typer.Option(False, "--allow-custom", help="允许自由输入 (Allow free text)"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="等待秒数 (Timeout in seconds)"),
) -> None:
    """在终端直接弹出一次对话框 (Show one dialog from the terminal)."""
    parent_obj = ctx.obj or {}
    settings = _load_settings_or_exit(
        parent_obj.get("timeout"),
        parent_obj.get("binary_path"),
        parent_obj.get("workspace"),
    )
    log_writer = DialogLogWriter.from_settings(settings)
    tool = build_ask_user_tool(settings, log_writer=log_writer)

    arguments: Dict[str, Any] = {
        "choices": list(choices),
        "allowCustom": allow_custom,
    }
    if title is not None:
        arguments["title"] = title
    if body is not None:
        arguments["body"] = body
    if recommended is not None:
        arguments["recommended"] = recommended
    if timeout is not None:
        arguments["timeoutSec"] = timeout

    try:
        reply = asyncio.run(tool.call(arguments))
    except ToolCallError as exc:
        typer.echo(render_notice("error", exc.message), err=True)
        raise typer.Exit(code=2)

    render_answer_panel(reply.text, reply.is_error, stream=sys.stdout)
    raise typer.Exit(code=1 if reply.is_error else 0)
