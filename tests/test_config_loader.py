# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for layered configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from shannotate.config import ConfigError
from shannotate.config_loader import CONFIG_FILENAME, ConfigLoader, load_config


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults_without_files(tmp_path: Path, isolated_home: Path) -> None:
    result = ConfigLoader.for_root(tmp_path).load_with_trace()

    assert result.sources == ["defaults"]
    assert result.warnings == []
    assert result.config.shellcheck.executable == "shellcheck"


def test_sources_apply_in_precedence_order(tmp_path: Path, isolated_home: Path) -> None:
    _write(
        isolated_home / CONFIG_FILENAME,
        '[shellcheck]\nshell = "dash"\ntimeout = 3\n[output]\nemoji = false\n',
    )
    _write(
        tmp_path / "pyproject.toml",
        '[project]\nname = "demo"\n\n[tool.shannotate.shellcheck]\nshell = "sh"\ndisabled_inspections = ["2034"]\n',
    )
    _write(tmp_path / CONFIG_FILENAME, '[shellcheck]\nshell = "ksh"\n')

    result = ConfigLoader.for_root(tmp_path).load_with_trace()

    config = result.config
    assert config.shellcheck.shell == "ksh"
    assert config.shellcheck.timeout == 3.0
    assert config.shellcheck.disabled_inspections == ["SC2034"]
    assert config.output.emoji is False
    assert len(result.sources) == 4


def test_explicit_user_and_project_paths(tmp_path: Path) -> None:
    user = _write(tmp_path / "user.toml", "[shellcheck]\ntab_width = 4\n")
    project = _write(tmp_path / "project.toml", '[projection]\nencoding = "codepoint"\n')

    config = ConfigLoader.for_root(tmp_path, user_config=user, project_config=project).load()

    assert config.shellcheck.tab_width == 4
    assert config.projection.encoding.value == "codepoint"


def test_unknown_keys_warn_or_raise(tmp_path: Path, isolated_home: Path) -> None:
    _write(tmp_path / CONFIG_FILENAME, "[shellcheck]\nbogus = 1\n[extras]\nvalue = true\n")

    result = ConfigLoader.for_root(tmp_path).load_with_trace()

    assert any("shellcheck.bogus" in warning for warning in result.warnings)
    assert any("'extras'" in warning for warning in result.warnings)
    with pytest.raises(ConfigError):
        ConfigLoader.for_root(tmp_path).load_with_trace(strict=True)


def test_invalid_toml_raises_config_error(tmp_path: Path, isolated_home: Path) -> None:
    _write(tmp_path / CONFIG_FILENAME, "[shellcheck\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_values_raise_config_error(tmp_path: Path, isolated_home: Path) -> None:
    _write(tmp_path / CONFIG_FILENAME, "[shellcheck]\ntimeout = -1\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_loader_requires_sources() -> None:
    with pytest.raises(ValueError):
        ConfigLoader(sources=[])
