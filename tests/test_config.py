from __future__ import annotations

from pathlib import Path

import pytest

from interactive_choice.config import (
    DEFAULT_TIMEOUT_SEC,
    ProjectConfigError,
    initialize_project_config,
    load_project_config,
    load_settings,
)


def test_settings_without_config_dir_use_defaults(tmp_path: Path):
    settings = load_settings(workspace_dir=tmp_path)

    assert settings.config_loaded is False
    assert settings.default_timeout_sec == DEFAULT_TIMEOUT_SEC == 60.0
    assert settings.dialog_command == ""
    assert settings.dialog_args == []
    assert settings.logs_enabled is False
    assert settings.config_root == tmp_path.resolve() / ".interactive_choice"


def test_init_writes_default_config(tmp_path: Path):
    config_root = initialize_project_config(workspace_dir=tmp_path)

    assert (config_root / "config.toml").is_file()
    assert (config_root / "logs").is_dir()

    config = load_project_config(config_root=config_root)
    assert config.default_timeout_sec == 60.0
    assert config.dialog_command == ""
    assert config.logs_enabled is True
    assert config.logs_redaction == "default"


def test_init_refuses_existing_dir_unless_forced(tmp_path: Path):
    config_root = initialize_project_config(workspace_dir=tmp_path)
    (config_root / "config.toml").write_text("[dialog]\ndefault_timeout = 5\n", encoding="utf-8")

    with pytest.raises(ProjectConfigError) as excinfo:
        initialize_project_config(workspace_dir=tmp_path)
    assert "already exists" in str(excinfo.value)

    initialize_project_config(workspace_dir=tmp_path, force=True)
    assert load_project_config(config_root=config_root).default_timeout_sec == 60.0


def test_config_values_flow_into_settings(tmp_path: Path):
    config_root = initialize_project_config(workspace_dir=tmp_path)
    (config_root / "config.toml").write_text(
        "\n".join(
            [
                "[dialog]",
                'command = "/usr/local/bin/native-ui"',
                'args = ["--theme", "dark", ""]',
                "default_timeout = 120",
                "",
                "[logs]",
                "enabled = false",
                'redaction = "none"',
                "max_files = 0",
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(workspace_dir=tmp_path)

    assert settings.config_loaded is True
    assert settings.dialog_command == "/usr/local/bin/native-ui"
    assert settings.dialog_args == ["--theme", "dark"]
    assert settings.default_timeout_sec == 120.0
    assert settings.logs_enabled is False
    assert settings.logs_redaction == "none"
    assert settings.logs_max_files == 5


def test_explicit_overrides_beat_config(tmp_path: Path):
    config_root = initialize_project_config(workspace_dir=tmp_path)
    (config_root / "config.toml").write_text(
        '[dialog]\ncommand = "from-config"\ndefault_timeout = 120\n',
        encoding="utf-8",
    )

    settings = load_settings(timeout_sec=15, binary_path="  /tmp/native-ui ", workspace_dir=tmp_path)

    assert settings.default_timeout_sec == 15.0
    assert settings.dialog_command == "/tmp/native-ui"


@pytest.mark.parametrize("timeout", [0, -3])
def test_non_positive_timeout_override_falls_back(tmp_path: Path, timeout):
    assert load_settings(timeout_sec=timeout, workspace_dir=tmp_path).default_timeout_sec == 60.0


def test_invalid_values_fall_back_to_defaults(tmp_path: Path):
    config_root = initialize_project_config(workspace_dir=tmp_path)
    (config_root / "config.toml").write_text(
        '[dialog]\ndefault_timeout = "soon"\nargs = "not-a-list"\n\n[logs]\nredaction = "loud"\n',
        encoding="utf-8",
    )

    config = load_project_config(config_root=config_root)

    assert config.default_timeout_sec == 60.0
    assert config.dialog_args == []
    assert config.logs_redaction == "default"


def test_broken_toml_is_reported(tmp_path: Path):
    config_root = initialize_project_config(workspace_dir=tmp_path)
    (config_root / "config.toml").write_text("[dialog\ncommand = ", encoding="utf-8")

    with pytest.raises(ProjectConfigError) as excinfo:
        load_settings(workspace_dir=tmp_path)
    assert "invalid config file" in str(excinfo.value)


def test_missing_config_file_is_reported(tmp_path: Path):
    with pytest.raises(ProjectConfigError) as excinfo:
        load_project_config(config_root=tmp_path / ".interactive_choice")
    assert "interactive-choice init" in str(excinfo.value)


@pytest.mark.parametrize("literal", ["nan", "inf", "-inf"])
def test_non_finite_default_timeout_falls_back(tmp_path: Path, literal):
    config_root = initialize_project_config(workspace_dir=tmp_path)
    (config_root / "config.toml").write_text("[dialog]\ndefault_timeout = {0}\n".format(literal), encoding="utf-8")

    assert load_settings(workspace_dir=tmp_path).default_timeout_sec == 60.0
