# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render annotations for terminals and machine consumers."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Final

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shannotate.annotator import Annotation
from shannotate.core.models import JsonValue
from shannotate.core.severity import HighlightSeverity, severity_to_sarif

_SEVERITY_STYLES: Final[dict[HighlightSeverity, str]] = {
    HighlightSeverity.ERROR: "bold red",
    HighlightSeverity.WARNING: "yellow",
    HighlightSeverity.WEAK_WARNING: "cyan",
}
_SEVERITY_LABELS: Final[dict[HighlightSeverity, str]] = {
    HighlightSeverity.ERROR: "error",
    HighlightSeverity.WARNING: "warning",
    HighlightSeverity.WEAK_WARNING: "weak warning",
}


def serialize_annotation(annotation: Annotation) -> dict[str, JsonValue]:
    """Convert an annotation into a JSON-friendly mapping."""

    return {
        "code": annotation.code,
        "severity": annotation.severity.value,
        "sarif_level": severity_to_sarif(annotation.severity),
        "message": annotation.message,
        "line": annotation.line,
        "column": annotation.column,
        "end_line": annotation.end_line,
        "end_column": annotation.end_column,
        "start_offset": annotation.range.start,
        "end_offset": annotation.range.end,
        "fixable": annotation.has_fix,
        "actions": [action.label for action in annotation.actions],
    }


def render_json(results: Mapping[str, Sequence[Annotation]]) -> str:
    """Return a JSON document mapping each file to its serialized annotations."""

    payload = {path: [serialize_annotation(item) for item in annotations] for path, annotations in results.items()}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def render_concise(path: str, annotations: Sequence[Annotation]) -> list[str]:
    """Return ``file:line:col: severity SCxxxx message`` lines for ``annotations``."""

    return [
        f"{path}:{item.line}:{item.column}: {_SEVERITY_LABELS[item.severity]} {item.code} {item.message}"
        for item in annotations
    ]


def render_pretty(console: Console, path: str, annotations: Sequence[Annotation]) -> None:
    """Print a Rich table summarising ``annotations`` for ``path``.

    Args:
        console: Console receiving the table.
        path: Display path of the annotated file.
        annotations: Findings to render.
    """

    table = Table(title=escape(path), box=box.SIMPLE, expand=False)
    table.add_column("Location", style="bold")
    table.add_column("Severity")
    table.add_column("Code")
    table.add_column("Message", overflow="fold")
    for item in annotations:
        style = _SEVERITY_STYLES[item.severity]
        location = f"{item.line}:{item.column}"
        fix_marker = " (fixable)" if item.has_fix else ""
        table.add_row(
            location,
            f"[{style}]{_SEVERITY_LABELS[item.severity]}[/]",
            item.code,
            escape(f"{item.message}{fix_marker}"),
        )
    console.print(table)


__all__ = ["render_concise", "render_json", "render_pretty", "serialize_annotation"]
