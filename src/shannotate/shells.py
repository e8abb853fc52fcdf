# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell dialect detection from script shebang lines."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePosixPath
from typing import Final

KNOWN_SHELLS: Final[tuple[str, ...]] = ("bash", "dash", "ksh", "sh")
DEFAULT_SHELL: Final[str] = "bash"
SHEBANG_PREFIX: Final[str] = "#!"
_ENV_COMMAND: Final[str] = "env"


def read_shebang(text: str) -> str | None:
    """Return the interpreter command from the first line of ``text``.

    Args:
        text: Script contents.

    Returns:
        str | None: Text following ``#!`` without surrounding whitespace, or
        ``None`` when the script has no shebang.
    """

    first_line = text.lstrip("\ufeff").split("\n", 1)[0].rstrip("\r")
    if not first_line.startswith(SHEBANG_PREFIX):
        return None
    return first_line[len(SHEBANG_PREFIX) :].strip() or None


def _interpreter_name(command: str) -> str | None:
    """Return the interpreter basename named by a shebang command.

    ``/usr/bin/env`` is looked through, skipping its own options and
    ``NAME=value`` assignments.
    """

    parts = command.split()
    if not parts:
        return None
    name = PurePosixPath(parts[0]).name
    if name != _ENV_COMMAND:
        return name
    for part in parts[1:]:
        if part.startswith("-") or "=" in part:
            continue
        return PurePosixPath(part).name
    return None


def detect_shell(
    text: str,
    *,
    known: Sequence[str] = KNOWN_SHELLS,
    default: str = DEFAULT_SHELL,
) -> str:
    """Return the shell dialect shellcheck should assume for ``text``.

    Args:
        text: Script contents.
        known: Dialects shellcheck understands.
        default: Dialect used when the shebang is missing or names another program.

    Returns:
        str: Shell dialect passed to ``--shell``.
    """

    command = read_shebang(text)
    if command is None:
        return default
    name = _interpreter_name(command)
    return name if name in known else default


__all__ = ["DEFAULT_SHELL", "KNOWN_SHELLS", "detect_shell", "read_shebang"]
