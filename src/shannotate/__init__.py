# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project shellcheck diagnostics onto shell-script source ranges."""

from __future__ import annotations

from .annotator import Annotation, ShellcheckAnnotator
from .core.models import Fix, ProjectedDiagnostic, Replacement, ShellcheckDiagnostic, TextRange
from .core.severity import HighlightSeverity, severity_for_level
from .document import Document, OffsetEncoding
from .messages import format_message, quote_message
from .projector import ProjectionError, offset_for, project, project_all

__version__ = "0.1.0"

__all__ = [
    "Annotation",
    "Document",
    "Fix",
    "HighlightSeverity",
    "OffsetEncoding",
    "ProjectedDiagnostic",
    "ProjectionError",
    "Replacement",
    "ShellcheckAnnotator",
    "ShellcheckDiagnostic",
    "TextRange",
    "__version__",
    "format_message",
    "offset_for",
    "project",
    "project_all",
    "quote_message",
    "severity_for_level",
]
