# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared helpers for CLI command implementations."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import OutputConfig
from ..logging import Status, status


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Status line printer bound to the output settings of one command run."""

    output: OutputConfig

    def fail(self, message: str) -> None:
        status(Status.FAIL, message, self.output)

    def warn(self, message: str) -> None:
        status(Status.WARN, message, self.output)

    def ok(self, message: str) -> None:
        status(Status.OK, message, self.output)

    def info(self, message: str) -> None:
        status(Status.INFO, message, self.output)


def build_cli_logger(*, emoji: bool, color: bool) -> CLILogger:
    """Return a ``CLILogger`` for command line flags seen before configuration loads."""

    return CLILogger(OutputConfig(emoji=emoji, color=color))


__all__ = ["CLIError", "CLILogger", "build_cli_logger"]
