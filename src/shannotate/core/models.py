# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the shannotate package."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shannotate.core.severity import HighlightSeverity, severity_for_level

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]

SHELLCHECK_CODE_PREFIX: Final[str] = "SC"

_WIRE_CONFIG: Final[ConfigDict] = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


def _default_end_coordinates(data: object) -> object:
    """Fill ``endLine``/``endColumn`` from the start coordinates when omitted."""

    if not isinstance(data, Mapping):
        return data
    payload = dict(data)
    if "endLine" not in payload and "end_line" not in payload and "line" in payload:
        payload["endLine"] = payload["line"]
    if "endColumn" not in payload and "end_column" not in payload and "column" in payload:
        payload["endColumn"] = payload["column"]
    return payload


class Replacement(BaseModel):
    """Describe one text substitution proposed by shellcheck.

    Coordinates share the coordinate space of the owning diagnostic: 1-based
    lines and 1-based columns on the exact text given to the tool.
    """

    model_config = _WIRE_CONFIG

    line: int
    column: int
    end_line: int = Field(alias="endLine")
    end_column: int = Field(alias="endColumn")
    replacement: str = ""

    @model_validator(mode="before")
    @classmethod
    def _fill_end(cls, data: object) -> object:
        return _default_end_coordinates(data)


class Fix(BaseModel):
    """Ordered set of replacements that together resolve a diagnostic."""

    model_config = _WIRE_CONFIG

    replacements: tuple[Replacement, ...] = Field(default_factory=tuple)

    @field_validator("replacements", mode="before")
    @classmethod
    def _coerce_replacements(cls, value: object) -> object:
        """Treat a JSON ``null`` replacement list as empty."""

        return () if value is None else value


class ShellcheckDiagnostic(BaseModel):
    """One shellcheck finding as emitted by ``--format=json``.

    Field aliases are the tool's wire names and must not change.
    """

    model_config = _WIRE_CONFIG

    line: int
    end_line: int = Field(alias="endLine")
    column: int
    end_column: int = Field(alias="endColumn")
    level: str | None = None
    message: str = ""
    code: int = 0
    fix: Fix | None = None

    @model_validator(mode="before")
    @classmethod
    def _fill_end(cls, data: object) -> object:
        return _default_end_coordinates(data)

    @field_validator("code", mode="before")
    @classmethod
    def _coerce_code(cls, value: object) -> object:
        """Accept ``SC2086`` style identifiers in addition to bare integers.

        Args:
            value: Raw ``code`` entry from the payload.

        Returns:
            object: Integer-compatible value handed to pydantic validation.
        """

        if value is None:
            return 0
        if isinstance(value, str):
            text = value.strip().upper().removeprefix(SHELLCHECK_CODE_PREFIX)
            return text or 0
        return value

    @property
    def sc_code(self) -> str:
        """Return the rule identifier rendered as ``SC<code>``."""

        return f"{SHELLCHECK_CODE_PREFIX}{self.code}"

    @property
    def severity(self) -> HighlightSeverity:
        """Return the highlight severity derived from :attr:`level`."""

        return severity_for_level(self.level)

    @property
    def has_fix(self) -> bool:
        """Return whether the diagnostic carries at least one replacement."""

        return self.fix is not None and bool(self.fix.replacements)


class TextRange(BaseModel):
    """Half-open ``[start, end)`` interval of document offsets."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> TextRange:
        """Reject ranges whose end precedes their start.

        Returns:
            TextRange: The validated range.

        Raises:
            ValueError: If ``end`` is smaller than ``start``.
        """

        if self.end < self.start:
            raise ValueError(f"invalid range [{self.start}, {self.end})")
        return self

    @classmethod
    def create(cls, start: int, end: int) -> TextRange:
        """Return a range spanning ``start`` (inclusive) to ``end`` (exclusive)."""

        return cls(start=start, end=end)

    @property
    def length(self) -> int:
        """Return the number of offset units covered by the range."""

        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        """Return whether the range covers no offset units."""

        return self.start == self.end

    def contains(self, other: TextRange) -> bool:
        """Return whether ``other`` lies entirely inside this range.

        Args:
            other: Candidate range to test.

        Returns:
            bool: ``True`` when ``other`` starts no earlier and ends no later.
        """

        return self.start <= other.start and other.end <= self.end


class ProjectedDiagnostic(BaseModel):
    """Pair a shellcheck finding with its document range."""

    model_config = ConfigDict(frozen=True)

    range: TextRange
    diagnostic: ShellcheckDiagnostic

    @property
    def severity(self) -> HighlightSeverity:
        """Return the highlight severity of the wrapped diagnostic."""

        return self.diagnostic.severity


__all__ = [
    "Fix",
    "JsonScalar",
    "JsonValue",
    "ProjectedDiagnostic",
    "Replacement",
    "SHELLCHECK_CODE_PREFIX",
    "ShellcheckDiagnostic",
    "TextRange",
]
