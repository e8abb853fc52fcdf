# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core models and severity helpers."""

from __future__ import annotations

from .models import Fix, ProjectedDiagnostic, Replacement, ShellcheckDiagnostic, TextRange
from .severity import HighlightSeverity, severity_for_level, severity_to_sarif

__all__ = [
    "Fix",
    "HighlightSeverity",
    "ProjectedDiagnostic",
    "Replacement",
    "ShellcheckDiagnostic",
    "TextRange",
    "severity_for_level",
    "severity_to_sarif",
]
