# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project shellcheck line/column findings onto document offset ranges.

Shellcheck reports 1-based lines and columns measured on the exact text it
was given. Editors address text by character offsets, so every finding is
translated relative to the start of its line, walking the line one character
at a time: a surrogate pair advances the offset by two units but the column by
one, and a tab advances the column to the next tab stop.

Projection is pure. A finding that cannot be placed inside the document, or
that lands entirely inside embedded foreign content, is dropped on its own
without affecting the rest of the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Final

from shannotate.core.models import ProjectedDiagnostic, ShellcheckDiagnostic, TextRange
from shannotate.document import Document, is_high_surrogate, is_low_surrogate

LOGGER = logging.getLogger(__name__)

DEFAULT_TAB_WIDTH: Final[int] = 8
_TAB: Final[str] = "\t"


class ProjectionError(ValueError):
    """Raised when a line/column pair cannot be translated into an offset."""


def offset_for(
    document: Document,
    line_index: int,
    column: int,
    *,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> int:
    """Translate a 0-based line and 1-based column into a document offset.

    Args:
        document: Document whose line table anchors the translation.
        line_index: Line number counted from zero.
        column: Column counted from one, in the linter's coordinate space.
        tab_width: Distance between tab stops in the linter's output.

    Returns:
        int: Offset of the character at ``column``. The value is not clamped
        and may exceed :attr:`Document.length` when the column runs past the
        end of the text.

    Raises:
        ProjectionError: If ``line_index`` names no line or ``column`` is below one.
    """

    if column < 1:
        raise ProjectionError(f"column must be >= 1, got {column}")
    try:
        offset = document.line_start_offset(line_index)
    except IndexError as exc:
        raise ProjectionError(str(exc)) from exc

    chars = document.chars
    size = len(chars)
    current = 1
    while current < column:
        if offset >= size:
            # Past the end of the text every remaining column is one unit.
            return offset + (column - current)
        char = chars[offset]
        current = _next_tab_stop(current, tab_width) if char == _TAB else current + 1
        offset += _unit_width(chars, offset, size)
    return offset


def _next_tab_stop(column: int, tab_width: int) -> int:
    """Return the 1-based column following a tab typed at ``column``."""

    return column + tab_width - (column - 1) % tab_width


def _unit_width(chars: str, offset: int, size: int) -> int:
    """Return how many offset units the character at ``offset`` occupies."""

    if is_high_surrogate(chars[offset]) and offset + 1 < size and is_low_surrogate(chars[offset + 1]):
        return 2
    return 1


def project(
    document: Document,
    diagnostic: ShellcheckDiagnostic,
    outer_regions: Iterable[TextRange] = (),
    *,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> ProjectedDiagnostic | None:
    """Project ``diagnostic`` onto ``document``.

    Args:
        document: Document the diagnostic was computed against.
        diagnostic: Shellcheck finding to place.
        outer_regions: Spans of embedded foreign content.
        tab_width: Distance between tab stops in the linter's output.

    Returns:
        ProjectedDiagnostic | None: Range paired with the untouched diagnostic,
        or ``None`` when the finding is excluded.
    """

    try:
        start = offset_for(document, diagnostic.line - 1, diagnostic.column, tab_width=tab_width)
        end = offset_for(document, diagnostic.end_line - 1, diagnostic.end_column, tab_width=tab_width)
    except ProjectionError as exc:
        LOGGER.debug("Skipping %s: %s", diagnostic.sc_code, exc)
        return None
    if end == start:
        end = start + 1
    if end < start:
        LOGGER.debug("Skipping %s: end offset %d precedes start %d", diagnostic.sc_code, end, start)
        return None

    candidate = TextRange.create(start, end)
    if not TextRange.create(0, document.length).contains(candidate):
        LOGGER.debug("Skipping %s: range %s outside document", diagnostic.sc_code, candidate)
        return None
    if any(region.contains(candidate) for region in outer_regions):
        LOGGER.debug("Skipping %s: range %s inside outer region", diagnostic.sc_code, candidate)
        return None
    return ProjectedDiagnostic(range=candidate, diagnostic=diagnostic)


def project_all(
    document: Document,
    diagnostics: Iterable[ShellcheckDiagnostic],
    outer_regions: Iterable[TextRange] = (),
    *,
    revision: int | None = None,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> list[ProjectedDiagnostic]:
    """Project a batch of diagnostics, dropping excluded entries individually.

    Args:
        document: Document the diagnostics were computed against.
        diagnostics: Shellcheck findings to place.
        outer_regions: Spans of embedded foreign content.
        revision: Modification stamp the batch was computed for. When given
            and different from the document's stamp, the batch is discarded.
        tab_width: Distance between tab stops in the linter's output.

    Returns:
        list[ProjectedDiagnostic]: Projected findings in input order.
    """

    if revision is not None and revision != document.modification_stamp:
        LOGGER.debug("Discarding batch for revision %d; document is at %d", revision, document.modification_stamp)
        return []
    regions: Sequence[TextRange] = tuple(outer_regions)
    projected: list[ProjectedDiagnostic] = []
    for diagnostic in diagnostics:
        result = project(document, diagnostic, regions, tab_width=tab_width)
        if result is not None:
            projected.append(result)
    return projected


__all__ = [
    "DEFAULT_TAB_WIDTH",
    "ProjectionError",
    "offset_for",
    "project",
    "project_all",
]
