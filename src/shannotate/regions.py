# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate embedded foreign-language regions inside shell documents."""

from __future__ import annotations

import re
from collections.abc import Iterable

from shannotate.core.models import TextRange
from shannotate.document import Document, OffsetEncoding


def _unit_offsets(document: Document) -> list[int] | None:
    """Return a code-point index to document offset table, or ``None`` when they coincide."""

    if document.encoding is OffsetEncoding.CODEPOINT or len(document.chars) == len(document.text):
        return None
    table = [0]
    for char in document.text:
        table.append(table[-1] + (2 if ord(char) > 0xFFFF else 1))
    return table


def find_outer_regions(document: Document, patterns: Iterable[str | re.Pattern[str]]) -> list[TextRange]:
    """Return the spans of ``document`` matched by any of ``patterns``.

    Matching runs on the document's code points; the resulting ranges are
    expressed in the document's offset units. Empty matches are ignored.

    Args:
        document: Document to scan.
        patterns: Regular expressions describing embedded content, for example
            template markers such as ``\\{\\{.*?\\}\\}``.

    Returns:
        list[TextRange]: Matched regions ordered by start offset.
    """

    compiled = [re.compile(pattern) if isinstance(pattern, str) else pattern for pattern in patterns]
    if not compiled:
        return []
    table = _unit_offsets(document)
    regions: list[TextRange] = []
    for pattern in compiled:
        for match in pattern.finditer(document.text):
            start, end = match.span()
            if start == end:
                continue
            if table is not None:
                start, end = table[start], table[end]
            regions.append(TextRange.create(start, end))
    regions.sort(key=lambda region: (region.start, region.end))
    return regions


__all__ = ["find_outer_regions"]
