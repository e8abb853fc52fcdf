# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console output for shannotate: status lines, section rules and debug routing.

User-facing output goes through Rich consoles built from :class:`OutputConfig`.
Internal tracing uses module level :mod:`logging` loggers under the
``shannotate`` namespace, which ``--debug`` routes to a :class:`RichHandler`.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from functools import cache
from typing import Final

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

from shannotate.config import OutputConfig

PACKAGE_LOGGER_NAME: Final[str] = "shannotate"


class Status(str, Enum):
    """Kinds of one-line status messages shown to the user."""

    INFO = "info"
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


# Each status renders as (emoji prefix, Rich style).
_STATUS_DECORATIONS: Final[dict[Status, tuple[str, str]]] = {
    Status.INFO: ("ℹ️ ", "cyan"),
    Status.OK: ("✅ ", "green"),
    Status.WARN: ("⚠️ ", "yellow"),
    Status.FAIL: ("❌ ", "red"),
}


def _stdout_is_tty() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def _build_console(color: bool, emoji: bool, tty: bool) -> Console:
    """Return the console for one combination of output preferences.

    No ``file`` is bound, so the console writes to whatever ``sys.stdout`` is
    at print time.
    """

    styled = color and tty
    return Console(
        color_system="auto" if styled else None,
        force_terminal=tty,
        no_color=not styled,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def console_for(output: OutputConfig) -> Console:
    """Return the shared console honouring the ``color`` and ``emoji`` settings of ``output``."""

    return _build_console(output.color, output.emoji, _stdout_is_tty())


def status(kind: Status, message: str, output: OutputConfig) -> None:
    """Print ``message`` as a single status line.

    Args:
        kind: Status whose emoji prefix and colour decorate the line.
        message: Text to show. It is printed literally, never as Rich markup.
        output: Output preferences selecting emoji and colour.
    """

    prefix, style = _STATUS_DECORATIONS[kind]
    text = Text(f"{prefix}{message}" if output.emoji else message)
    if output.color:
        text.stylize(style)
    console_for(output).print(text)


def section(title: str, output: OutputConfig) -> None:
    """Print a header separating per-file output blocks."""

    console = console_for(output)
    if output.color:
        console.print()
        console.print(Rule(Text(title)))
    else:
        console.print(Text(f"\n--- {title} ---"))


def configure_debug_logging(enabled: bool) -> None:
    """Route package debug records to a Rich handler when ``enabled`` is true.

    Args:
        enabled: Whether internal ``logging`` records should be shown.
    """

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.handlers = [handler for handler in logger.handlers if not isinstance(handler, RichHandler)]
    if not enabled:
        logger.setLevel(logging.WARNING)
        return
    logger.addHandler(RichHandler(show_time=False, show_path=False, markup=False))
    logger.setLevel(logging.DEBUG)


__all__ = [
    "PACKAGE_LOGGER_NAME",
    "Status",
    "configure_debug_logging",
    "console_for",
    "section",
    "status",
]
