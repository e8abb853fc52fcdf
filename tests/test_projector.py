# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for translating shellcheck coordinates into document offsets."""

from __future__ import annotations

import pytest

from shannotate.core.models import ShellcheckDiagnostic, TextRange
from shannotate.document import Document, OffsetEncoding
from shannotate.projector import ProjectionError, offset_for, project, project_all


def _diagnostic(line: int, column: int, end_line: int, end_column: int, **extra: object) -> ShellcheckDiagnostic:
    payload: dict[str, object] = {
        "line": line,
        "column": column,
        "endLine": end_line,
        "endColumn": end_column,
        "level": "warning",
        "code": 2086,
        "message": "Double quote to prevent globbing and word splitting.",
    }
    payload.update(extra)
    return ShellcheckDiagnostic.model_validate(payload)


def test_offset_for_counts_columns_from_line_start() -> None:
    document = Document("a\nbcd\n")
    assert offset_for(document, 0, 1) == 0
    assert offset_for(document, 1, 1) == 2
    assert offset_for(document, 1, 3) == 4


def test_offset_for_expands_tabs_to_tab_width() -> None:
    document = Document("\tfoo\n")
    assert offset_for(document, 0, 9) == 1
    assert offset_for(document, 0, 10) == 2
    assert offset_for(document, 0, 5, tab_width=4) == 1


def test_offset_for_counts_surrogate_pairs_as_two_units() -> None:
    text = "\U0001f600a\n"
    assert offset_for(Document(text), 0, 2) == 2
    assert offset_for(Document(text, encoding=OffsetEncoding.CODEPOINT), 0, 2) == 1


def test_offset_for_handles_crlf_line_endings() -> None:
    document = Document("a\r\nb\r\n")
    assert offset_for(document, 1, 1) == 3


def test_offset_for_runs_past_end_of_text() -> None:
    document = Document("ab")
    assert offset_for(document, 0, 3) == 2
    assert offset_for(document, 0, 5) == 4


@pytest.mark.parametrize(("line_index", "column"), [(-1, 1), (5, 1), (0, 0)])
def test_offset_for_rejects_invalid_coordinates(line_index: int, column: int) -> None:
    with pytest.raises(ProjectionError):
        offset_for(Document("echo\n"), line_index, column)


def test_project_maps_finding_onto_range() -> None:
    document = Document("echo $x\n")
    diagnostic = _diagnostic(1, 6, 1, 8)

    projected = project(document, diagnostic)

    assert projected is not None
    assert projected.range == TextRange.create(5, 7)
    assert projected.diagnostic is diagnostic


def test_project_widens_zero_width_range_to_one_unit() -> None:
    projected = project(Document("echo $x\n"), _diagnostic(1, 6, 1, 6))

    assert projected is not None
    assert projected.range == TextRange.create(5, 6)


def test_project_accepts_range_ending_at_document_end() -> None:
    projected = project(Document("ab"), _diagnostic(1, 1, 1, 3))

    assert projected is not None
    assert projected.range == TextRange.create(0, 2)


def test_project_drops_range_outside_document() -> None:
    assert project(Document("ab"), _diagnostic(1, 1, 1, 5)) is None
    assert project(Document(""), _diagnostic(1, 1, 1, 1)) is None


def test_project_drops_reversed_and_unmappable_findings() -> None:
    document = Document("echo $x\n")
    assert project(document, _diagnostic(1, 5, 1, 2)) is None
    assert project(document, _diagnostic(9, 1, 9, 2)) is None


def test_project_drops_findings_inside_outer_regions() -> None:
    document = Document("echo {{ $x }}\n")
    inside = _diagnostic(1, 9, 1, 11)
    straddling = _diagnostic(1, 1, 1, 9)
    regions = [TextRange.create(5, 13)]

    assert project(document, inside, regions) is None
    assert project(document, straddling, regions) is not None


def test_project_all_keeps_valid_entries_in_order() -> None:
    document = Document("echo $x\necho $y\n")
    diagnostics = [
        _diagnostic(2, 6, 2, 8, code=2034),
        _diagnostic(7, 1, 7, 2),
        _diagnostic(1, 6, 1, 8),
    ]

    projected = project_all(document, diagnostics)

    assert [item.range for item in projected] == [TextRange.create(13, 15), TextRange.create(5, 7)]
    assert [item.diagnostic.code for item in projected] == [2034, 2086]


def test_project_all_discards_batch_for_other_revision() -> None:
    document = Document("echo $x\n", modification_stamp=4)

    assert project_all(document, [_diagnostic(1, 6, 1, 8)], revision=3) == []
    assert len(project_all(document, [_diagnostic(1, 6, 1, 8)], revision=4)) == 1


def test_projected_severity_follows_level() -> None:
    projected = project(Document("echo $x\n"), _diagnostic(1, 6, 1, 8, level="error"))

    assert projected is not None
    assert projected.severity.value == "error"


def test_lone_carriage_return_is_an_ordinary_column() -> None:
    document = Document("a\rb\necho $x\n")

    projected = project(document, _diagnostic(2, 6, 2, 8))

    assert projected is not None
    assert projected.range == TextRange.create(9, 11)
    assert document.chars[9:11] == "$x"


def test_crlf_lines_keep_carriage_return_as_last_column() -> None:
    document = Document("x=1\r\necho $x\r\n")

    assert offset_for(document, 1, 6) == 10
    assert offset_for(document, 0, 4) == 3


def test_offset_for_advances_tabs_to_next_tab_stop() -> None:
    assert offset_for(Document("ab\tc\n"), 0, 9) == 3
    assert offset_for(Document("a\tb\n"), 0, 5, tab_width=4) == 2
    assert offset_for(Document("\t\tx\n"), 0, 17) == 2
