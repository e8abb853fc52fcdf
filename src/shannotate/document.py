# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""In-memory text documents addressed by character offsets."""

from __future__ import annotations

from bisect import bisect_right
from enum import Enum
from pathlib import Path
from typing import Final

_BMP_MAX: Final[int] = 0xFFFF
_SUPPLEMENTARY_BASE: Final[int] = 0x10000
_HIGH_SURROGATE_BASE: Final[int] = 0xD800
_LOW_SURROGATE_BASE: Final[int] = 0xDC00
_SURROGATE_MASK: Final[int] = 0x3FF
_CR: Final[str] = "\r"
_LF: Final[str] = "\n"


class OffsetEncoding(str, Enum):
    """Units in which document offsets are counted."""

    UTF16 = "utf16"
    CODEPOINT = "codepoint"


def to_utf16_units(text: str) -> str:
    """Return ``text`` re-expressed as one Python character per UTF-16 code unit.

    Characters outside the Basic Multilingual Plane are split into their
    surrogate pair, mirroring how editors built on UTF-16 strings index text.

    Args:
        text: Source text made of Unicode code points.

    Returns:
        str: Text whose length equals its UTF-16 length.
    """

    if all(ord(char) <= _BMP_MAX for char in text):
        return text
    units: list[str] = []
    for char in text:
        code_point = ord(char)
        if code_point <= _BMP_MAX:
            units.append(char)
            continue
        code_point -= _SUPPLEMENTARY_BASE
        units.append(chr(_HIGH_SURROGATE_BASE + (code_point >> 10)))
        units.append(chr(_LOW_SURROGATE_BASE + (code_point & _SURROGATE_MASK)))
    return "".join(units)


def from_utf16_units(units: str) -> str:
    """Join surrogate pairs produced by :func:`to_utf16_units` back into code points."""

    return units.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def is_high_surrogate(char: str) -> bool:
    """Return whether ``char`` is the leading half of a UTF-16 surrogate pair."""

    return _HIGH_SURROGATE_BASE <= ord(char) < _LOW_SURROGATE_BASE


def is_low_surrogate(char: str) -> bool:
    """Return whether ``char`` is the trailing half of a UTF-16 surrogate pair."""

    return _LOW_SURROGATE_BASE <= ord(char) <= _LOW_SURROGATE_BASE + _SURROGATE_MASK


def _compute_line_starts(sequence: str) -> tuple[int, ...]:
    """Return the offset at which each line of ``sequence`` begins.

    Only ``\\n`` terminates a line, as in shellcheck. A ``\\r`` stays on its
    line as an ordinary column, so ``\\r\\n`` text keeps the ``\\r`` as the last
    character of each line. A trailing ``\\n`` opens a final empty line.
    """

    starts = [0]
    starts.extend(index + 1 for index, char in enumerate(sequence) if char == _LF)
    return tuple(starts)


class Document:
    """Immutable text buffer exposing a line-offset table.

    Offsets count units of :attr:`encoding`; with the default UTF-16 encoding a
    character outside the BMP spans two offsets. Each derived document receives
    a larger :attr:`modification_stamp`, which callers use to reject results
    computed against an older revision.
    """

    __slots__ = ("_encoding", "_line_starts", "_modification_stamp", "_sequence", "_text")

    def __init__(
        self,
        text: str,
        *,
        encoding: OffsetEncoding = OffsetEncoding.UTF16,
        modification_stamp: int = 0,
    ) -> None:
        """Initialise the document from ``text``.

        Args:
            text: Full document contents.
            encoding: Units in which offsets are expressed.
            modification_stamp: Revision tag of this content.
        """

        self._text = text
        self._encoding = OffsetEncoding(encoding)
        self._sequence = to_utf16_units(text) if self._encoding is OffsetEncoding.UTF16 else text
        self._line_starts = _compute_line_starts(self._sequence)
        self._modification_stamp = modification_stamp

    @classmethod
    def from_path(
        cls,
        path: Path,
        *,
        encoding: OffsetEncoding = OffsetEncoding.UTF16,
        modification_stamp: int | None = None,
    ) -> Document:
        """Load a document from ``path`` decoded as UTF-8.

        Line endings are kept exactly as stored so offsets match the bytes
        shellcheck reads.

        Args:
            path: File to read.
            encoding: Units in which offsets are expressed.
            modification_stamp: Explicit revision tag; defaults to the file's
                modification time in nanoseconds.

        Returns:
            Document: Document holding the file contents.
        """

        with path.open(encoding="utf-8", newline="") as handle:
            text = handle.read()
        stamp = path.stat().st_mtime_ns if modification_stamp is None else modification_stamp
        return cls(text, encoding=encoding, modification_stamp=stamp)

    @property
    def text(self) -> str:
        """Return the document contents as Python code points."""

        return self._text

    @property
    def chars(self) -> str:
        """Return the character sequence indexed by document offsets."""

        return self._sequence

    @property
    def encoding(self) -> OffsetEncoding:
        return self._encoding

    @property
    def modification_stamp(self) -> int:
        return self._modification_stamp

    @property
    def length(self) -> int:
        """Return the document length in offset units."""

        return len(self._sequence)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_start_offset(self, line_index: int) -> int:
        """Return the offset at which the 0-based ``line_index`` begins.

        Args:
            line_index: Line number counted from zero.

        Returns:
            int: Offset of the first character on the line.

        Raises:
            IndexError: If ``line_index`` does not name a line of the document.
        """

        if line_index < 0 or line_index >= len(self._line_starts):
            raise IndexError(f"line index {line_index} outside 0..{len(self._line_starts) - 1}")
        return self._line_starts[line_index]

    def line_end_offset(self, line_index: int) -> int:
        """Return the offset just past the last character of ``line_index``, excluding the terminator."""

        start = self.line_start_offset(line_index)
        end = self._line_starts[line_index + 1] if line_index + 1 < len(self._line_starts) else len(self._sequence)
        if end > start and self._sequence[end - 1] == _LF:
            end -= 1
        if end > start and self._sequence[end - 1] == _CR:
            end -= 1
        return end

    def line_number(self, offset: int) -> int:
        """Return the 0-based line index containing ``offset``.

        Args:
            offset: Document offset, clamped into ``[0, length]``.

        Returns:
            int: Index of the line holding the offset.
        """

        clamped = min(max(offset, 0), len(self._sequence))
        return bisect_right(self._line_starts, clamped) - 1

    def line_text(self, line_index: int) -> str:
        """Return the characters of ``line_index`` without its terminator."""

        start = self.line_start_offset(line_index)
        return self._decode(self._sequence[start : self.line_end_offset(line_index)])

    def replace(self, start: int, end: int, replacement: str) -> Document:
        """Return a new revision with ``[start, end)`` replaced by ``replacement``.

        Args:
            start: First offset replaced.
            end: Offset just past the replaced span.
            replacement: Text inserted in place of the span.

        Returns:
            Document: Updated document with an incremented modification stamp.

        Raises:
            IndexError: If the span does not lie inside the document.
        """

        if not 0 <= start <= end <= len(self._sequence):
            raise IndexError(f"span [{start}, {end}) outside document of length {len(self._sequence)}")
        return self.with_units(self._sequence[:start] + self.encode_units(replacement) + self._sequence[end:])

    def encode_units(self, text: str) -> str:
        """Return ``text`` expressed in this document's offset units."""

        return to_utf16_units(text) if self._encoding is OffsetEncoding.UTF16 else text

    def with_units(self, sequence: str) -> Document:
        """Return the next revision built from a sequence in offset units."""

        return self.with_text(self._decode(sequence))

    def with_text(self, text: str) -> Document:
        """Return a document holding ``text`` as the next revision."""

        return Document(text, encoding=self._encoding, modification_stamp=self._modification_stamp + 1)

    def save(self, path: Path) -> None:
        """Write the document to ``path`` as UTF-8 without translating line endings."""

        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(self._text)

    def _decode(self, sequence: str) -> str:
        if self._encoding is OffsetEncoding.UTF16:
            return from_utf16_units(sequence)
        return sequence

    def __repr__(self) -> str:
        return (
            f"Document(length={self.length}, lines={self.line_count}, "
            f"encoding={self._encoding.value}, stamp={self._modification_stamp})"
        )


__all__ = [
    "Document",
    "OffsetEncoding",
    "from_utf16_units",
    "is_high_surrogate",
    "is_low_surrogate",
    "to_utf16_units",
]
