# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Message formatting helpers for shellcheck findings."""

from __future__ import annotations

from typing import Final
from xml.sax.saxutils import escape

from shannotate.core.models import SHELLCHECK_CODE_PREFIX, ShellcheckDiagnostic

QUOTE_LIMIT: Final[int] = 60
ELLIPSIS: Final[str] = "..."
WIKI_BASE_URL: Final[str] = "https://github.com/koalaman/shellcheck/wiki/"
_XML_ENTITIES: Final[dict[str, str]] = {"\"": "&quot;", "'": "&#39;"}


def format_message(message: str) -> str:
    """Return ``message`` without a single trailing period.

    Args:
        message: Message text reported by shellcheck.

    Returns:
        str: Display form of the message.
    """

    return message[:-1] if message.endswith(".") else message


def quote_message(message: str, limit: int = QUOTE_LIMIT) -> str:
    """Return ``message`` wrapped in single quotes for use inside action labels.

    Messages longer than ``limit`` characters are cut to ``limit`` characters
    followed by an ellipsis.

    Args:
        message: Message text, usually already passed through :func:`format_message`.
        limit: Maximum number of message characters kept.

    Returns:
        str: Quoted, possibly truncated message.
    """

    shortened = message if len(message) <= limit else f"{message[:limit]}{ELLIPSIS}"
    return f"'{shortened}'"


def wiki_url(code: int | str) -> str:
    """Return the shellcheck wiki page documenting ``code``."""

    text = str(code).upper()
    if not text.startswith(SHELLCHECK_CODE_PREFIX):
        text = f"{SHELLCHECK_CODE_PREFIX}{text}"
    return f"{WIKI_BASE_URL}{text}"


def tooltip_html(diagnostic: ShellcheckDiagnostic) -> str:
    """Render the HTML tooltip shown for ``diagnostic``.

    Args:
        diagnostic: Finding whose message and wiki link are rendered.

    Returns:
        str: HTML fragment with the escaped message and a wiki link.
    """

    code = diagnostic.sc_code
    return (
        "<html>"
        f"<p>{escape(diagnostic.message, _XML_ENTITIES)}</p>"
        f"<p>See <a href='{wiki_url(code)}'>{code}</a>.</p>"
        "</html>"
    )


__all__ = [
    "ELLIPSIS",
    "QUOTE_LIMIT",
    "WIKI_BASE_URL",
    "format_message",
    "quote_message",
    "tooltip_html",
    "wiki_url",
]
