# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Invoke the shellcheck executable on in-memory script text."""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .config import normalize_code
from .runtime.process import DEFAULT_ENCODING, TIMEOUT_RETURNCODE, CommandOptions, run_command

LOGGER = logging.getLogger(__name__)

ALWAYS_EXCLUDED: Final[tuple[str, ...]] = ("SC1091",)
STDIN_MARKER: Final[str] = "-"


def build_execution_params(
    shell: str,
    excluded_codes: Iterable[str] = (),
    *,
    wiki_link_count: int = 10,
) -> list[str]:
    """Return the shellcheck arguments used to lint text read from stdin.

    ``SC1091`` (not following sourced files) is always excluded because the
    script is linted without its on-disk neighbours.

    Args:
        shell: Dialect passed to ``--shell``.
        excluded_codes: Additional codes to suppress.
        wiki_link_count: Value for ``--wiki-link-count``.

    Returns:
        list[str]: Arguments following the executable path.
    """

    params = [
        "--color=never",
        "--format=json",
        "--severity=style",
        f"--shell={shell}",
        f"--wiki-link-count={wiki_link_count}",
    ]
    seen: set[str] = set()
    for code in (*ALWAYS_EXCLUDED, *excluded_codes):
        normalised = normalize_code(code)
        if normalised in seen:
            continue
        seen.add(normalised)
        params.append(f"--exclude={normalised}")
    params.append(STDIN_MARKER)
    return params


def resolve_executable(executable: str | Path) -> Path | None:
    """Return the absolute path of ``executable`` when it can be run.

    Args:
        executable: Absolute path or command name looked up on ``PATH``.

    Returns:
        Path | None: Executable path, or ``None`` when missing or not executable.
    """

    candidate = Path(executable).expanduser()
    if not candidate.is_absolute() and candidate.parent == Path():
        found = shutil.which(str(candidate))
        return Path(found) if found else None
    if candidate.is_file() and os.access(candidate, os.X_OK):
        return candidate.resolve()
    return None


def is_valid_executable(executable: str | Path | None) -> bool:
    """Return whether ``executable`` names a runnable file."""

    if executable is None or not str(executable).strip():
        return False
    return resolve_executable(executable) is not None


@dataclass(frozen=True, slots=True)
class InvocationResult:
    """Captured output of one linter run."""

    returncode: int
    stdout: str
    stderr: str = ""
    timed_out: bool = False


@runtime_checkable
class ToolInvoker(Protocol):
    """Run an external linter on script text supplied via stdin."""

    def invoke(self, executable: Path, params: Sequence[str], content: str) -> InvocationResult:
        """Return the captured result of running ``executable`` with ``params``.

        Raises:
            OSError: If the process cannot be started.
        """

        raise NotImplementedError


class SubprocessInvoker:
    """Default :class:`ToolInvoker` backed by :func:`run_command`."""

    def __init__(self, *, timeout: float, encoding: str = DEFAULT_ENCODING) -> None:
        """Initialise the invoker.

        Args:
            timeout: Seconds to wait before abandoning the process.
            encoding: Encoding used for the script text and the tool output.
        """

        self._options = CommandOptions(check=False, timeout=timeout, encoding=encoding)

    def invoke(self, executable: Path, params: Sequence[str], content: str) -> InvocationResult:
        LOGGER.debug("Running %s %s", executable, " ".join(params))
        completed = run_command([str(executable), *params], input_text=content, options=self._options)
        return InvocationResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            timed_out=completed.returncode == TIMEOUT_RETURNCODE,
        )


__all__ = [
    "ALWAYS_EXCLUDED",
    "InvocationResult",
    "SubprocessInvoker",
    "ToolInvoker",
    "build_execution_params",
    "is_valid_executable",
    "resolve_executable",
]
