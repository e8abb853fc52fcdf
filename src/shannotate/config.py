# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the shannotate package."""

from __future__ import annotations

import re
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shannotate.core.models import SHELLCHECK_CODE_PREFIX
from shannotate.document import OffsetEncoding
from shannotate.projector import DEFAULT_TAB_WIDTH

DEFAULT_EXECUTABLE: Final[str] = "shellcheck"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0
DEFAULT_WIKI_LINK_COUNT: Final[int] = 10

_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?:SC)?(\d+)$", re.IGNORECASE)


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def normalize_code(raw: str | int) -> str:
    """Return ``raw`` rendered as a canonical ``SC<number>`` identifier.

    Args:
        raw: Code such as ``2086``, ``"2086"`` or ``"sc2086"``.

    Returns:
        str: Canonical identifier, e.g. ``"SC2086"``.

    Raises:
        ConfigError: If ``raw`` is not a shellcheck code.
    """

    match = _CODE_PATTERN.match(str(raw).strip())
    if match is None:
        raise ConfigError(f"invalid shellcheck code '{raw}'")
    return f"{SHELLCHECK_CODE_PREFIX}{int(match.group(1))}"


class ShellcheckConfig(BaseModel):
    """Settings controlling how the shellcheck executable is invoked."""

    model_config = ConfigDict(validate_assignment=True)

    executable: str = DEFAULT_EXECUTABLE
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    shell: str | None = None
    disabled_inspections: list[str] = Field(default_factory=list)
    wiki_link_count: int = Field(default=DEFAULT_WIKI_LINK_COUNT, ge=0)
    tab_width: int = Field(default=DEFAULT_TAB_WIDTH, ge=1)

    @field_validator("disabled_inspections", mode="before")
    @classmethod
    def _normalise_codes(cls, value: object) -> object:
        """Canonicalise and deduplicate disabled inspection codes.

        Args:
            value: Raw list supplied by a configuration source.

        Returns:
            object: Normalised list, or the original value for pydantic to reject.
        """

        if isinstance(value, (str, int)):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return value
        try:
            return list(dict.fromkeys(normalize_code(item) for item in value))
        except ConfigError as exc:
            raise ValueError(str(exc)) from exc


class ProjectionConfig(BaseModel):
    """Settings controlling how findings are mapped onto documents."""

    model_config = ConfigDict(validate_assignment=True)

    encoding: OffsetEncoding = OffsetEncoding.UTF16
    outer_region_patterns: list[str] = Field(default_factory=list)

    @field_validator("outer_region_patterns")
    @classmethod
    def _check_patterns(cls, value: list[str]) -> list[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid outer region pattern '{pattern}': {exc}") from exc
        return value


class OutputConfig(BaseModel):
    """Configuration for controlling console output."""

    model_config = ConfigDict(validate_assignment=True)

    emoji: bool = True
    color: bool = True
    format: Literal["pretty", "concise", "json"] = "pretty"
    debug: bool = False


class Config(BaseModel):
    """Top-level configuration assembled from every configuration source."""

    model_config = ConfigDict(validate_assignment=True)

    shellcheck: ShellcheckConfig = Field(default_factory=ShellcheckConfig)
    projection: ProjectionConfig = Field(default_factory=ProjectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-compatible snapshot of the configuration."""

        return self.model_dump(mode="json")

    def with_disabled(self, *codes: str) -> Config:
        """Return a copy whose shellcheck section also disables ``codes``.

        Args:
            *codes: Inspection codes to add to the exclusion list.

        Returns:
            Config: Updated configuration; ``self`` is left unchanged.
        """

        merged = [*self.shellcheck.disabled_inspections, *(normalize_code(code) for code in codes)]
        shellcheck = self.shellcheck.model_copy(update={"disabled_inspections": list(dict.fromkeys(merged))})
        return self.model_copy(update={"shellcheck": shellcheck})


__all__ = [
    "Config",
    "ConfigError",
    "DEFAULT_EXECUTABLE",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_WIKI_LINK_COUNT",
    "OutputConfig",
    "ProjectionConfig",
    "ShellcheckConfig",
    "normalize_code",
]
