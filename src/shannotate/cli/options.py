# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer option declarations and the option bundle shared by commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from ..config import Config, normalize_code
from ..shells import KNOWN_SHELLS


class OutputFormat(str, Enum):
    """Report formats understood by ``shannotate check``."""

    PRETTY = "pretty"
    CONCISE = "concise"
    JSON = "json"


FILES_ARGUMENT = Annotated[
    list[Path],
    typer.Argument(
        help="Shell scripts to lint.",
        exists=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]
ROOT_OPTION = Annotated[
    Path | None,
    typer.Option("--root", "-r", help="Project root used to discover configuration (defaults to the cwd)."),
]
SHELL_OPTION = Annotated[
    str | None,
    typer.Option("--shell", "-s", help=f"Shell dialect override ({', '.join(KNOWN_SHELLS)})."),
]
EXCLUDE_OPTION = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-e", help="Shellcheck code to suppress (repeatable)."),
]
EXECUTABLE_OPTION = Annotated[
    str | None,
    typer.Option("--shellcheck", help="Path or name of the shellcheck executable."),
]
FORMAT_OPTION = Annotated[
    OutputFormat | None,
    typer.Option("--format", "-f", help="Report format.", case_sensitive=False),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
COLOR_OPTION = Annotated[
    bool,
    typer.Option("--color/--no-color", help="Toggle coloured output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Show internal debug logging."),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", help="Print fixed scripts instead of writing them."),
]


def normalize_cli_values(values: Sequence[str] | None) -> tuple[str, ...]:
    """Return sanitized CLI values preserving order."""

    if not values:
        return ()
    return tuple(stripped for entry in values if entry and (stripped := entry.strip()))


@dataclass(slots=True)
class CheckCLIOptions:
    """Capture CLI overrides supplied to the lint commands."""

    files: tuple[Path, ...]
    root: Path
    shell: str | None
    exclude: tuple[str, ...]
    executable: str | None
    output_format: OutputFormat | None
    emoji: bool
    color: bool
    debug: bool

    def apply_to(self, config: Config) -> Config:
        """Return ``config`` updated with the command line overrides.

        Args:
            config: Configuration resolved from files.

        Returns:
            Config: Configuration used for the run.
        """

        updated = config.with_disabled(*(normalize_code(code) for code in self.exclude))
        shellcheck_updates: dict[str, object] = {}
        if self.shell is not None:
            shellcheck_updates["shell"] = self.shell
        if self.executable is not None:
            shellcheck_updates["executable"] = self.executable
        output_updates: dict[str, object] = {"emoji": self.emoji and updated.output.emoji}
        output_updates["color"] = self.color and updated.output.color
        output_updates["debug"] = self.debug or updated.output.debug
        if self.output_format is not None:
            output_updates["format"] = self.output_format.value
        return updated.model_copy(
            update={
                "shellcheck": updated.shellcheck.model_copy(update=shellcheck_updates),
                "output": updated.output.model_copy(update=output_updates),
            },
        )


__all__ = [
    "COLOR_OPTION",
    "CheckCLIOptions",
    "DEBUG_OPTION",
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "EXCLUDE_OPTION",
    "EXECUTABLE_OPTION",
    "FILES_ARGUMENT",
    "FORMAT_OPTION",
    "OutputFormat",
    "ROOT_OPTION",
    "SHELL_OPTION",
    "normalize_cli_values",
]
