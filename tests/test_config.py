# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shannotate.config import Config, ConfigError, ProjectionConfig, ShellcheckConfig, normalize_code
from shannotate.document import OffsetEncoding


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(2086, "SC2086"), ("2086", "SC2086"), ("sc2086", "SC2086"), (" SC1091 ", "SC1091")],
)
def test_normalize_code(raw: str | int, expected: str) -> None:
    assert normalize_code(raw) == expected


@pytest.mark.parametrize("raw", ["", "SC", "SCabc", "E501"])
def test_normalize_code_rejects_other_identifiers(raw: str) -> None:
    with pytest.raises(ConfigError):
        normalize_code(raw)


def test_defaults() -> None:
    config = Config()

    assert config.shellcheck.executable == "shellcheck"
    assert config.shellcheck.timeout == 10.0
    assert config.shellcheck.shell is None
    assert config.shellcheck.disabled_inspections == []
    assert config.shellcheck.tab_width == 8
    assert config.projection.encoding is OffsetEncoding.UTF16
    assert config.output.format == "pretty"


def test_disabled_inspections_are_normalised() -> None:
    settings = ShellcheckConfig(disabled_inspections=["2086", "sc2086", "SC2034"])

    assert settings.disabled_inspections == ["SC2086", "SC2034"]


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        ShellcheckConfig(disabled_inspections=["bogus"])
    with pytest.raises(ValidationError):
        ShellcheckConfig(timeout=0)
    with pytest.raises(ValidationError):
        ProjectionConfig(outer_region_patterns=["("])


def test_with_disabled_returns_updated_copy() -> None:
    config = Config(shellcheck=ShellcheckConfig(disabled_inspections=["SC2034"]))

    updated = config.with_disabled("2086", "SC2034")

    assert updated.shellcheck.disabled_inspections == ["SC2034", "SC2086"]
    assert config.shellcheck.disabled_inspections == ["SC2034"]


def test_to_dict_is_json_compatible() -> None:
    snapshot = Config().to_dict()

    assert snapshot["projection"] == {"encoding": "utf16", "outer_region_patterns": []}
