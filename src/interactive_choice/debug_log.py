"""JSONL dialog lifecycle log with size-based rotation."""

from __future__ import annotations

import json
import re
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from interactive_choice.config import ALLOWED_LOG_REDACTION, DEFAULT_LOGS_REDACTION, Settings

LOG_FILE_NAME = "dialog.log.jsonl"
REDACTED = "***REDACTED***"

# Lifecycle payloads are counts, codes and the dialog command; only keys that
# look like credentials and bearer tokens inside OS error text are masked.
_SENSITIVE_KEY_RE = re.compile(r"(password|secret|token|authorization|api[_-]?key)", re.IGNORECASE)
_BEARER_RE = re.compile(r"(?i)\bbearer\s+\S+")

_LEVEL_BY_EVENT = {
    "dialog.launch_failed": "error",
    "dialog.exited_nonzero": "warn",
    "dialog.timed_out": "warn",
    "dialog.parse_failed": "warn",
    "tool.rejected": "warn",
}


def now_ms() -> int:
    return int(time.time() * 1000)


def event_level(event_type: str) -> str:
    return _LEVEL_BY_EVENT.get(event_type, "info")


def mask_sensitive(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if _SENSITIVE_KEY_RE.search(str(key)) else mask_sensitive(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [mask_sensitive(item) for item in value]
    if isinstance(value, str):
        return _BEARER_RE.sub("Bearer {0}".format(REDACTED), value)
    return value


class DialogLogWriter:
    """Fail-open JSONL writer; one line per dialog lifecycle event.

    Instances are callable with ``(event_type, payload)`` so they plug
    straight into the runner and the ``ask_user`` tool as an event sink.
    """

    def __init__(
        self,
        *,
        logs_dir: Path,
        enabled: bool,
        max_file_bytes: int = 10 * 1024 * 1024,
        max_files: int = 5,
        redaction: str = DEFAULT_LOGS_REDACTION,
    ) -> None:
        self._logs_dir = Path(logs_dir)
        self._enabled = bool(enabled)
        self._max_file_bytes = max(1, int(max_file_bytes or 0))
        self._max_files = max(1, int(max_files or 0))
        normalized = str(redaction or "").strip().lower()
        self._redaction = normalized if normalized in ALLOWED_LOG_REDACTION else DEFAULT_LOGS_REDACTION
        self._write_errors = 0
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "DialogLogWriter":
        return cls(
            logs_dir=settings.logs_dir,
            enabled=settings.logs_enabled,
            max_file_bytes=settings.logs_max_file_bytes,
            max_files=settings.logs_max_files,
            redaction=settings.logs_redaction,
        )

    @property
    def active_log_file(self) -> Path:
        return self._logs_dir / LOG_FILE_NAME

    def __call__(self, event_type: str, payload: Dict[str, Any]) -> None:
        self.write_event(event_type, payload)

    def write_event(
        self,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
        *,
        ts_ms: Optional[int] = None,
    ) -> None:
        if not self._enabled:
            return

        payload = dict(data or {})
        record = {
            "ts_ms": int(ts_ms if ts_ms is not None else now_ms()),
            "level": event_level(event_type),
            "event_type": str(event_type or ""),
            "data": mask_sensitive(payload) if self._redaction == "default" else payload,
        }
        line = (json.dumps(record, ensure_ascii=True, separators=(",", ":"), default=str) + "\n").encode("utf-8")

        with self._lock:
            try:
                self._logs_dir.mkdir(parents=True, exist_ok=True)
                if self._would_overflow(len(line)):
                    self._shift_rotated_files()
                with self.active_log_file.open("ab") as fp:
                    fp.write(line)
            except OSError:
                self._write_errors += 1

    def rotated_files(self) -> List[Path]:
        candidates = (self._rotated_file(index) for index in range(1, self._max_files + 1))
        return [path for path in candidates if path.exists()]

    def status(self) -> Dict[str, Any]:
        with self._lock:
            active = self.active_log_file
            report: Dict[str, Any] = {
                "logs_enabled": self._enabled,
                "logs_dir": str(self._logs_dir),
                "logs_active_file": str(active),
                "logs_active_size_bytes": 0,
                "logs_rotated_files": [],
                "logs_write_errors": self._write_errors,
            }
            if not self._enabled:
                return report
            report.update(
                {
                    "logs_active_size_bytes": active.stat().st_size if active.exists() else 0,
                    "logs_max_file_bytes": self._max_file_bytes,
                    "logs_max_files": self._max_files,
                    "logs_redaction": self._redaction,
                    "logs_rotated_files": [str(path) for path in self.rotated_files()],
                }
            )
            return report

    def _would_overflow(self, incoming_size: int) -> bool:
        active = self.active_log_file
        current = active.stat().st_size if active.exists() else 0
        return current + incoming_size > self._max_file_bytes

    def _shift_rotated_files(self) -> None:
        # dialog.log.jsonl -> .1 -> .2 ... ; the oldest beyond max_files is dropped.
        self._rotated_file(self._max_files).unlink(missing_ok=True)
        for index in range(self._max_files - 1, 0, -1):
            source = self._rotated_file(index)
            if source.exists():
                source.replace(self._rotated_file(index + 1))
        if self.active_log_file.exists():
            self.active_log_file.replace(self._rotated_file(1))

    def _rotated_file(self, index: int) -> Path:
        return self._logs_dir / "{0}.{1}".format(LOG_FILE_NAME, index)
