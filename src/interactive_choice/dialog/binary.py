"""Locate the native dialog binary."""

from __future__ import annotations

import os
import platform
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

DIALOG_BINARY_ENV = "INTERACTIVE_CHOICE_DIALOG"
DIALOG_BINARY_NAME = "native-ui"

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
}


@dataclass(frozen=True)
class ResolvedBinary:
    path: str
    source: str

    @property
    def exists(self) -> bool:
        return Path(self.path).is_file()

    @property
    def executable(self) -> bool:
        return self.exists and os.access(self.path, os.X_OK)


def platform_tag(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """Return ``<platform>-<arch>`` the way the dialog release assets are named."""
    raw_system = (system or sys.platform).lower()
    if raw_system.startswith("win"):
        system_tag = "win32"
    elif raw_system.startswith("linux"):
        system_tag = "linux"
    else:
        system_tag = raw_system
    raw_machine = (machine or platform.machine()).lower()
    return "{0}-{1}".format(system_tag, _ARCH_ALIASES.get(raw_machine, raw_machine))


def bundled_binary_path(system: Optional[str] = None, machine: Optional[str] = None) -> Path:
    tag = platform_tag(system, machine)
    suffix = ".exe" if tag.startswith("win32") else ""
    package_root = Path(__file__).resolve().parents[1]
    return package_root / "bin" / "{0}-{1}{2}".format(DIALOG_BINARY_NAME, tag, suffix)


def resolve_dialog_binary(
    explicit: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> ResolvedBinary:
    """Resolve the dialog command.

    Order: explicit path, ``INTERACTIVE_CHOICE_DIALOG``, ``native-ui`` on PATH,
    then the bundled per-platform binary. The bundled path is returned even
    when missing so the launch fails with a clear OS error.
    """

    explicit_text = str(explicit or "").strip()
    if explicit_text:
        return ResolvedBinary(path=explicit_text, source="explicit")

    environ = os.environ if env is None else env
    env_text = str(environ.get(DIALOG_BINARY_ENV) or "").strip()
    if env_text:
        return ResolvedBinary(path=env_text, source="env")

    on_path = shutil.which(DIALOG_BINARY_NAME)
    if on_path:
        return ResolvedBinary(path=on_path, source="path")

    return ResolvedBinary(path=str(bundled_binary_path()), source="bundled")
