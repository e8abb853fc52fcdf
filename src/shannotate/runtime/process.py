# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; arguments are passed as a list and
# ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final, Literal

CommandOverrideValue = Path | Mapping[str, str] | bool | float | str | None
CommandOptionKey = Literal["cwd", "env", "check", "timeout", "encoding"]
CommandOverrideMapping = Mapping[CommandOptionKey, CommandOverrideValue]

TIMEOUT_RETURNCODE: Final[int] = 124
DEFAULT_ENCODING: Final[str] = "utf-8"

_COMMAND_KEYS: Final[frozenset[CommandOptionKey]] = frozenset({"cwd", "env", "check", "timeout", "encoding"})


@dataclass(slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    timeout: float | None = None
    encoding: str = DEFAULT_ENCODING

    def with_overrides(self, overrides: CommandOverrideMapping) -> CommandOptions:
        """Return a new options instance with ``overrides`` applied.

        Args:
            overrides: Mapping of option names to replacement values.

        Returns:
            CommandOptions: Updated options instance with overrides applied.

        Raises:
            TypeError: If ``overrides`` includes an unknown option name or a value
                with an incompatible type.
            ValueError: When a timeout override is negative.
        """

        unknown = [key for key in overrides if key not in _COMMAND_KEYS]
        if unknown:
            message = ", ".join(sorted(unknown))
            raise TypeError(f"Unknown command option(s): {message}")
        cwd = self.cwd if "cwd" not in overrides else self._coerce_cwd_override(overrides["cwd"])
        env = self.env if "env" not in overrides else self._coerce_env_override(overrides["env"])
        check = self.check if "check" not in overrides else self._coerce_bool_override(overrides["check"], "check")
        timeout = self.timeout if "timeout" not in overrides else self._coerce_timeout_override(overrides["timeout"])
        encoding = (
            self.encoding if "encoding" not in overrides else self._coerce_encoding_override(overrides["encoding"])
        )
        return CommandOptions(cwd=cwd, env=env, check=check, timeout=timeout, encoding=encoding)

    @staticmethod
    def _coerce_cwd_override(value: CommandOverrideValue) -> Path | None:
        if value is None or isinstance(value, Path):
            return value
        raise TypeError("cwd override must be a pathlib.Path or None")

    @staticmethod
    def _coerce_env_override(value: CommandOverrideValue) -> Mapping[str, str] | None:
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise TypeError("env override must be a mapping of strings to strings")
        validated: dict[str, str] = {}
        for key, entry in value.items():
            if not isinstance(key, str) or not isinstance(entry, str):
                raise TypeError("env override must map strings to strings")
            validated[key] = entry
        return validated

    @staticmethod
    def _coerce_bool_override(value: CommandOverrideValue, option: str) -> bool:
        if isinstance(value, bool):
            return value
        raise TypeError(f"{option} override must be a boolean value")

    @staticmethod
    def _coerce_timeout_override(value: CommandOverrideValue) -> float | None:
        """Return a validated timeout override.

        Args:
            value: Override candidate for the timeout value.

        Returns:
            float | None: Normalised timeout value in seconds.

        Raises:
            TypeError: If the override is not numeric.
            ValueError: When the override is negative.
        """

        if value is None:
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            coerced = float(value)
            if coerced < 0:
                raise ValueError("timeout override must be non-negative")
            return coerced
        raise TypeError("timeout override must be a number or None")

    @staticmethod
    def _coerce_encoding_override(value: CommandOverrideValue) -> str:
        if isinstance(value, str) and value:
            return value
        raise TypeError("encoding override must be a non-empty string")


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            command: Normalised command sequence that was executed.
            returncode: Exit status reported by the subprocess.
            stdout: Captured standard output stream.
            stderr: Captured standard error stream.
        """
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _ensure_text(value: str | bytes | None, encoding: str) -> str | None:
    """Return ``value`` decoded to text when supplied as ``bytes``."""

    if value is None or isinstance(value, str):
        return value
    return value.decode(encoding, errors="replace")


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    input_text: str | None = None,
    options: CommandOptions | None = None,
    overrides: CommandOverrideMapping | None = None,
) -> CompletedProcess[str]:
    """Execute ``args``, optionally feeding ``input_text`` on standard input.

    Output is always captured. Text crossing the process boundary is encoded
    and decoded with :attr:`CommandOptions.encoding`.

    Args:
        args: Command and argument sequence to execute.
        input_text: Text written to the child's standard input, which is then
            closed. ``None`` connects standard input to ``/dev/null``.
        options: Base options configuring execution semantics.
        overrides: Keyword overrides applied to a cloned ``options`` instance.

    Returns:
        CompletedProcess: Subprocess execution metadata. A timeout yields
        return code ``124`` with a note appended to ``stderr``.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        SubprocessExecutionError: When ``check`` is true and the process exits
            with a non-zero status.
        TypeError: If an unknown override key is supplied.
    """

    normalized = _normalize_args(args)
    resolved_options = (options or CommandOptions()).with_overrides(dict(overrides or {}))
    encoding = resolved_options.encoding

    try:
        raw = subprocess.run(  # nosec B603 - argument list, no shell expansion
            normalized,
            cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
            env=dict(resolved_options.env) if resolved_options.env is not None else None,
            check=False,
            capture_output=True,
            input=input_text.encode(encoding) if input_text is not None else None,
            stdin=subprocess.DEVNULL if input_text is None else None,
            timeout=resolved_options.timeout,
        )
        completed: CompletedProcess[str] = subprocess.CompletedProcess(
            args=normalized,
            returncode=raw.returncode,
            stdout=_ensure_text(raw.stdout, encoding) or "",
            stderr=_ensure_text(raw.stderr, encoding) or "",
        )
    except subprocess.TimeoutExpired as exc:
        stdout = _ensure_text(exc.stdout, encoding) or ""
        stderr = _ensure_text(exc.stderr, encoding)
        timeout_value = resolved_options.timeout
        timeout_msg = (
            f"Command timed out after {timeout_value:.1f}s" if timeout_value is not None else "Command timed out"
        )
        combined_stderr = f"{stderr}\n{timeout_msg}" if stderr else timeout_msg
        completed = subprocess.CompletedProcess(
            args=normalized,
            returncode=TIMEOUT_RETURNCODE,
            stdout=stdout,
            stderr=combined_stderr,
        )

    if resolved_options.check and completed.returncode != 0:
        raise SubprocessExecutionError(normalized, completed.returncode, completed.stdout, completed.stderr)

    return completed


__all__ = [
    "CommandOptionKey",
    "CommandOptions",
    "CommandOverrideMapping",
    "CommandOverrideValue",
    "DEFAULT_ENCODING",
    "SubprocessExecutionError",
    "TIMEOUT_RETURNCODE",
    "run_command",
]
