"""Configuration loading and directory resolution for interactive-choice."""

from __future__ import annotations

import math
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

try:  # pragma: no cover - exercised on Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for Python 3.9/3.10
    import tomli as tomllib  # type: ignore[no-redef]

CONFIG_DIR_NAME = ".interactive_choice"
CONFIG_FILE_NAME = "config.toml"
LOGS_DIR_NAME = "logs"

DEFAULT_DIALOG_COMMAND = ""
DEFAULT_TIMEOUT_SEC = 60.0
DEFAULT_LOGS_ENABLED = True
DEFAULT_LOGS_FORMAT = "jsonl"
DEFAULT_LOGS_MAX_FILE_BYTES = 10 * 1024 * 1024
DEFAULT_LOGS_MAX_FILES = 5
DEFAULT_LOGS_REDACTION = "default"
ALLOWED_LOG_FORMATS = ("jsonl",)
ALLOWED_LOG_REDACTION = ("default", "none")


class ProjectConfigError(RuntimeError):
    """Raised when project configuration is invalid."""


@dataclass
class ProjectConfig:
    dialog_command: str = DEFAULT_DIALOG_COMMAND
    dialog_args: List[str] = field(default_factory=list)
    default_timeout_sec: float = DEFAULT_TIMEOUT_SEC
    logs_enabled: bool = DEFAULT_LOGS_ENABLED
    logs_format: str = DEFAULT_LOGS_FORMAT
    logs_max_file_bytes: int = DEFAULT_LOGS_MAX_FILE_BYTES
    logs_max_files: int = DEFAULT_LOGS_MAX_FILES
    logs_redaction: str = DEFAULT_LOGS_REDACTION


@dataclass
class Settings:
    """Resolved runtime settings for one CLI invocation."""

    project_root: Path
    config_root: Path
    config_loaded: bool = False
    dialog_command: str = DEFAULT_DIALOG_COMMAND
    dialog_args: List[str] = field(default_factory=list)
    default_timeout_sec: float = DEFAULT_TIMEOUT_SEC
    logs_enabled: bool = DEFAULT_LOGS_ENABLED
    logs_format: str = DEFAULT_LOGS_FORMAT
    logs_max_file_bytes: int = DEFAULT_LOGS_MAX_FILE_BYTES
    logs_max_files: int = DEFAULT_LOGS_MAX_FILES
    logs_redaction: str = DEFAULT_LOGS_REDACTION

    @property
    def config_file(self) -> Path:
        return self.config_root / CONFIG_FILE_NAME

    @property
    def logs_dir(self) -> Path:
        return self.config_root / LOGS_DIR_NAME


def resolve_project_root(workspace_dir: Optional[Path] = None) -> Path:
    return (workspace_dir or Path.cwd()).resolve()


def resolve_project_config_root(workspace_dir: Optional[Path] = None) -> Path:
    return resolve_project_root(workspace_dir) / CONFIG_DIR_NAME


def project_config_exists(workspace_dir: Optional[Path] = None) -> bool:
    config_root = resolve_project_config_root(workspace_dir)
    return config_root.is_dir() and (config_root / CONFIG_FILE_NAME).is_file()


def _safe_positive_int_or_default(value: object, default: int) -> int:
    try:
        converted = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return default
    if converted <= 0:
        return default
    return converted


def _safe_positive_float(value: object, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        converted = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(converted) or converted <= 0:
        return default
    return converted


def _safe_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def _safe_log_format(value: object, default: str) -> str:
    normalized = str(value or default).strip().lower()
    if normalized not in ALLOWED_LOG_FORMATS:
        return default
    return normalized


def _safe_redaction(value: object, default: str) -> str:
    normalized = str(value or default).strip().lower()
    if normalized not in ALLOWED_LOG_REDACTION:
        return default
    return normalized


def _safe_string_list(value: object, default: Sequence[str]) -> List[str]:
    if not isinstance(value, list):
        return list(default)
    result: List[str] = []
    for item in value:
        text = str(item or "").strip()
        if not text:
            continue
        result.append(text)
    return result


def _parse_project_config_data(data: Dict[str, object]) -> ProjectConfig:
    dialog = data.get("dialog") if isinstance(data.get("dialog"), dict) else {}
    logs = data.get("logs") if isinstance(data.get("logs"), dict) else {}

    return ProjectConfig(
        dialog_command=str(dialog.get("command") or DEFAULT_DIALOG_COMMAND).strip(),  # type: ignore[union-attr]
        dialog_args=_safe_string_list(dialog.get("args"), []),  # type: ignore[union-attr]
        default_timeout_sec=_safe_positive_float(
            dialog.get("default_timeout"),  # type: ignore[union-attr]
            DEFAULT_TIMEOUT_SEC,
        ),
        logs_enabled=_safe_bool(logs.get("enabled"), DEFAULT_LOGS_ENABLED),  # type: ignore[union-attr]
        logs_format=_safe_log_format(logs.get("format"), DEFAULT_LOGS_FORMAT),  # type: ignore[union-attr]
        logs_max_file_bytes=_safe_positive_int_or_default(
            logs.get("max_file_bytes"),  # type: ignore[union-attr]
            DEFAULT_LOGS_MAX_FILE_BYTES,
        ),
        logs_max_files=_safe_positive_int_or_default(
            logs.get("max_files"),  # type: ignore[union-attr]
            DEFAULT_LOGS_MAX_FILES,
        ),
        logs_redaction=_safe_redaction(logs.get("redaction"), DEFAULT_LOGS_REDACTION),  # type: ignore[union-attr]
    )


def _toml_string(value: str) -> str:
    return '"{0}"'.format(str(value or "").replace("\\", "\\\\").replace('"', '\\"'))


def _render_project_config(config: ProjectConfig) -> str:
    lines: List[str] = [
        "# interactive-choice configuration",
        "# Leave [dialog].command empty to discover the native-ui binary automatically.",
        "",
        "[dialog]",
        "command = {0}".format(_toml_string(config.dialog_command)),
        "args = [{0}]".format(", ".join(_toml_string(item) for item in config.dialog_args)),
        "default_timeout = {0:g}".format(
            _safe_positive_float(config.default_timeout_sec, DEFAULT_TIMEOUT_SEC)
        ),
        "",
        "[logs]",
        "enabled = {0}".format(str(bool(config.logs_enabled)).lower()),
        "format = {0}".format(_toml_string(_safe_log_format(config.logs_format, DEFAULT_LOGS_FORMAT))),
        "max_file_bytes = {0}".format(
            _safe_positive_int_or_default(config.logs_max_file_bytes, DEFAULT_LOGS_MAX_FILE_BYTES)
        ),
        "max_files = {0}".format(_safe_positive_int_or_default(config.logs_max_files, DEFAULT_LOGS_MAX_FILES)),
        "redaction = {0}".format(
            _toml_string(_safe_redaction(config.logs_redaction, DEFAULT_LOGS_REDACTION))
        ),
        "",
    ]
    return "\n".join(lines)


def initialize_project_config(workspace_dir: Optional[Path] = None, force: bool = False) -> Path:
    config_root = resolve_project_config_root(workspace_dir)

    if config_root.exists():
        if not force:
            raise ProjectConfigError(
                "配置目录已存在：{0} (configuration directory already exists)".format(config_root)
            )
        shutil.rmtree(config_root)

    (config_root / LOGS_DIR_NAME).mkdir(parents=True, exist_ok=True)
    (config_root / CONFIG_FILE_NAME).write_text(
        _render_project_config(ProjectConfig()),
        encoding="utf-8",
    )
    return config_root


def load_project_config(config_root: Optional[Path] = None, workspace_dir: Optional[Path] = None) -> ProjectConfig:
    resolved_root = (config_root or resolve_project_config_root(workspace_dir)).resolve()
    config_file = resolved_root / CONFIG_FILE_NAME
    if not config_file.is_file():
        raise ProjectConfigError(
            "缺少配置文件：{0}，请先执行 `interactive-choice init` (missing config file)".format(config_file)
        )

    try:
        parsed = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ProjectConfigError("配置文件无效：{0} (invalid config file)".format(config_file)) from exc

    return _parse_project_config_data(parsed)


def load_settings(
    timeout_sec: Optional[float] = None,
    binary_path: Optional[str] = None,
    workspace_dir: Optional[Path] = None,
) -> Settings:
    """Resolve settings from the optional project config + explicit overrides.

    Without a config directory the defaults apply and file logging is off,
    since there is no initialized place to write to.
    """

    project_root = resolve_project_root(workspace_dir)
    config_root = resolve_project_config_root(project_root)
    config_loaded = project_config_exists(project_root)
    if config_loaded:
        project_config = load_project_config(config_root=config_root)
    else:
        project_config = ProjectConfig(logs_enabled=False)

    explicit_binary = str(binary_path or "").strip()
    return Settings(
        project_root=project_root,
        config_root=config_root,
        config_loaded=config_loaded,
        dialog_command=explicit_binary or project_config.dialog_command,
        dialog_args=list(project_config.dialog_args),
        default_timeout_sec=_safe_positive_float(
            timeout_sec if timeout_sec is not None else project_config.default_timeout_sec,
            DEFAULT_TIMEOUT_SEC,
        ),
        logs_enabled=project_config.logs_enabled,
        logs_format=project_config.logs_format,
        logs_max_file_bytes=project_config.logs_max_file_bytes,
        logs_max_files=project_config.logs_max_files,
        logs_redaction=project_config.logs_redaction,
    )
