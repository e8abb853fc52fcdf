# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Quick-fix actions attached to projected shellcheck findings."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Annotated, Final, Literal

from pydantic import BaseModel, ConfigDict, Field

from shannotate.config import Config, normalize_code
from shannotate.core.models import Fix
from shannotate.document import Document
from shannotate.projector import DEFAULT_TAB_WIDTH, ProjectionError, offset_for

SUPPRESSION_PREFIX: Final[str] = "# shellcheck disable="
_SUPPRESSION_RE: Final[re.Pattern[str]] = re.compile(r"^(?P<indent>\s*)# shellcheck disable=(?P<codes>[\w,-]+)\s*$")
_INDENT_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t]*")
_CRLF: Final[str] = "\r\n"

_Span = tuple[int, int, int, str]


class StaleDocumentError(RuntimeError):
    """Raised when an action computed for one revision is applied to another."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"document changed since revision {expected} (now {actual})")
        self.expected = expected
        self.actual = actual


def apply_fix(
    document: Document,
    fix: Fix,
    revision: int,
    *,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> Document:
    """Apply every replacement of ``fix`` to ``document``.

    All offsets are computed against the original text first; edits are then
    applied from the end of the document backwards so earlier offsets stay valid.

    Args:
        document: Document the fix was computed for.
        fix: Replacements proposed by shellcheck.
        revision: Modification stamp the fix belongs to.
        tab_width: Distance between tab stops in the linter's output.

    Returns:
        Document: New revision holding the fixed text.

    Raises:
        StaleDocumentError: If ``document`` is no longer at ``revision``.
        ProjectionError: If a replacement cannot be placed inside the document.
    """

    if document.modification_stamp != revision:
        raise StaleDocumentError(revision, document.modification_stamp)
    return _apply_spans(document, _fix_spans(document, fix, tab_width=tab_width))


def apply_fixes(
    document: Document,
    fixes: Sequence[Fix],
    revision: int,
    *,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> tuple[Document, int]:
    """Apply several independent fixes computed for the same revision.

    Fixes are accepted in order; a fix whose replacements overlap one already
    accepted, or that cannot be placed inside the document, is skipped whole.

    Args:
        document: Document the fixes were computed for.
        fixes: Fixes to apply, usually one per finding.
        revision: Modification stamp the fixes belong to.
        tab_width: Distance between tab stops in the linter's output.

    Returns:
        tuple[Document, int]: New revision and the number of fixes applied.

    Raises:
        StaleDocumentError: If ``document`` is no longer at ``revision``.
    """

    if document.modification_stamp != revision:
        raise StaleDocumentError(revision, document.modification_stamp)
    accepted: list[_Span] = []
    applied = 0
    for fix in fixes:
        try:
            spans = _fix_spans(document, fix, tab_width=tab_width, first_index=len(accepted))
        except ProjectionError:
            continue
        if any(_overlaps(span, other) for span in spans for other in accepted):
            continue
        accepted.extend(spans)
        applied += 1
    if not applied:
        return document, 0
    return _apply_spans(document, accepted), applied


def _fix_spans(document: Document, fix: Fix, *, tab_width: int, first_index: int = 0) -> list[_Span]:
    """Return ``(start, end, index, text)`` edits for every replacement of ``fix``."""

    spans: list[_Span] = []
    for index, replacement in enumerate(fix.replacements, start=first_index):
        start = offset_for(document, replacement.line - 1, replacement.column, tab_width=tab_width)
        end = offset_for(document, replacement.end_line - 1, replacement.end_column, tab_width=tab_width)
        if not 0 <= start <= end <= document.length:
            raise ProjectionError(f"replacement [{start}, {end}) outside document of length {document.length}")
        spans.append((start, end, index, replacement.replacement))
    return spans


def _overlaps(first: _Span, second: _Span) -> bool:
    """Return whether two edits touch the same text."""

    first_start, first_end, _, _ = first
    second_start, second_end, _, _ = second
    if first_start == first_end or second_start == second_end:
        return second_start < first_start < second_end or first_start < second_start < first_end
    return first_start < second_end and second_start < first_end


def _apply_spans(document: Document, spans: Sequence[_Span]) -> Document:
    """Apply ``spans`` from the end of the document backwards as one new revision."""

    sequence = document.chars
    for start, end, _index, text in sorted(spans, reverse=True):
        sequence = f"{sequence[:start]}{document.encode_units(text)}{sequence[end:]}"
    return document.with_units(sequence)


def insert_suppression(document: Document, offset: int, code: str) -> Document:
    """Insert a ``# shellcheck disable=`` directive above the line holding ``offset``.

    When the preceding line already carries a disable directive, ``code`` is
    appended to it instead of adding another line.

    Args:
        document: Document to edit.
        offset: Offset inside the offending line.
        code: Shellcheck code to suppress.

    Returns:
        Document: New revision with the directive in place.
    """

    code = normalize_code(code)
    line_index = document.line_number(offset)
    if line_index > 0:
        previous = _SUPPRESSION_RE.match(document.line_text(line_index - 1))
        if previous is not None:
            codes = previous.group("codes").split(",")
            if code in codes:
                return document
            start = document.line_start_offset(line_index - 1)
            end = document.line_end_offset(line_index - 1)
            directive = f"{previous.group('indent')}{SUPPRESSION_PREFIX}{','.join([*codes, code])}"
            return document.replace(start, end, directive)
    indent_match = _INDENT_RE.match(document.line_text(line_index))
    indent = indent_match.group(0) if indent_match else ""
    line_start = document.line_start_offset(line_index)
    line_end = document.line_end_offset(line_index)
    newline = _CRLF if document.chars[line_end : line_end + 2] == _CRLF else "\n"
    return document.replace(line_start, line_start, f"{indent}{SUPPRESSION_PREFIX}{code}{newline}")


class ApplyFixAction(BaseModel):
    """Apply the replacements shellcheck proposes for a finding."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fix"] = "fix"
    label: str
    fix: Fix
    revision: int

    def apply(self, document: Document, config: Config) -> tuple[Document, Config]:
        return apply_fix(document, self.fix, self.revision, tab_width=config.shellcheck.tab_width), config


class SuppressAction(BaseModel):
    """Suppress one finding with an inline directive comment."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["suppress"] = "suppress"
    label: str
    code: str
    offset: int

    def apply(self, document: Document, config: Config) -> tuple[Document, Config]:
        return insert_suppression(document, self.offset, self.code), config


class DisableInspectionAction(BaseModel):
    """Disable an inspection code for every subsequent run."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["disable"] = "disable"
    label: str
    code: str

    def apply(self, document: Document, config: Config) -> tuple[Document, Config]:
        return document, disable_inspection(config, self.code)


def disable_inspection(config: Config, code: str) -> Config:
    """Return a copy of ``config`` that excludes ``code`` from shellcheck runs."""

    return config.with_disabled(code)


AnnotationAction = Annotated[
    ApplyFixAction | SuppressAction | DisableInspectionAction,
    Field(discriminator="kind"),
]


__all__ = [
    "AnnotationAction",
    "ApplyFixAction",
    "DisableInspectionAction",
    "SUPPRESSION_PREFIX",
    "StaleDocumentError",
    "SuppressAction",
    "apply_fix",
    "apply_fixes",
    "disable_inspection",
    "insert_suppression",
]
