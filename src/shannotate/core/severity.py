# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Final


class HighlightSeverity(str, Enum):
    """Highlight levels attached to projected shellcheck findings."""

    ERROR = "error"
    WARNING = "warning"
    WEAK_WARNING = "weak_warning"


_LEVEL_TO_SEVERITY: Final[Mapping[str, HighlightSeverity]] = {
    "error": HighlightSeverity.ERROR,
    "warning": HighlightSeverity.WARNING,
}


def severity_for_level(level: str | None) -> HighlightSeverity:
    """Map a shellcheck ``level`` onto a :class:`HighlightSeverity`.

    Only ``"error"`` and ``"warning"`` are recognised. Every other value,
    including ``info``, ``style`` and a missing level, degrades to
    :attr:`HighlightSeverity.WEAK_WARNING`.

    Args:
        level: Level string reported by shellcheck or ``None`` when absent.

    Returns:
        HighlightSeverity: Severity used when highlighting the finding.
    """

    if level is None:
        return HighlightSeverity.WEAK_WARNING
    return _LEVEL_TO_SEVERITY.get(level, HighlightSeverity.WEAK_WARNING)


_SEVERITY_TO_SARIF_LEVEL: Final[dict[HighlightSeverity, str]] = {
    HighlightSeverity.ERROR: "error",
    HighlightSeverity.WARNING: "warning",
    HighlightSeverity.WEAK_WARNING: "note",
}


def severity_to_sarif(severity: HighlightSeverity) -> str:
    """Map :class:`HighlightSeverity` to a SARIF reporting level.

    Args:
        severity: Severity value to translate.

    Returns:
        str: SARIF level string compatible with SARIF output.
    """
    return _SEVERITY_TO_SARIF_LEVEL.get(severity, "warning")


__all__ = ["HighlightSeverity", "severity_for_level", "severity_to_sarif"]
