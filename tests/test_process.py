# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the subprocess wrapper."""

from __future__ import annotations

import subprocess

import pytest

from shannotate.runtime import process
from shannotate.runtime.process import (
    TIMEOUT_RETURNCODE,
    CommandOptions,
    SubprocessExecutionError,
    run_command,
)


class _RunRecorder:
    def __init__(self, *, returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.kwargs: dict[str, object] = {}
        self.args: list[str] = []

    def __call__(self, args: list[str], **kwargs: object) -> subprocess.CompletedProcess[bytes]:
        self.args = args
        self.kwargs = kwargs
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, self.stderr)


def test_run_command_encodes_input_and_decodes_output(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _RunRecorder(returncode=1, stdout='[{"code": 2086}]'.encode())
    monkeypatch.setattr(process.subprocess, "run", recorder)

    completed = run_command(
        ["/usr/bin/shellcheck", "-"],
        input_text="echo \U0001f600\n",
        options=CommandOptions(check=False, timeout=3.0),
    )

    assert recorder.args == ["/usr/bin/shellcheck", "-"]
    assert recorder.kwargs["input"] == "echo \U0001f600\n".encode()
    assert recorder.kwargs["stdin"] is None
    assert recorder.kwargs["capture_output"] is True
    assert recorder.kwargs["timeout"] == 3.0
    assert completed.returncode == 1
    assert completed.stdout == '[{"code": 2086}]'
    assert completed.stderr == ""


def test_run_command_without_input_reads_devnull(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _RunRecorder()
    monkeypatch.setattr(process.subprocess, "run", recorder)

    run_command(["/usr/bin/shellcheck", "--version"])

    assert recorder.kwargs["input"] is None
    assert recorder.kwargs["stdin"] is subprocess.DEVNULL


def test_run_command_maps_timeout_to_returncode(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(args: list[str], **kwargs: object) -> subprocess.CompletedProcess[bytes]:
        raise subprocess.TimeoutExpired(args, 2.0, output=b"partial", stderr=None)

    monkeypatch.setattr(process.subprocess, "run", fake_run)

    completed = run_command(
        ["/usr/bin/shellcheck", "-"],
        input_text="sleep 10\n",
        options=CommandOptions(check=False, timeout=2.0),
    )

    assert completed.returncode == TIMEOUT_RETURNCODE
    assert completed.stdout == "partial"
    assert completed.stderr == "Command timed out after 2.0s"


def test_run_command_raises_on_failure_when_checked(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(process.subprocess, "run", _RunRecorder(returncode=3, stderr=b"bad flag"))

    with pytest.raises(SubprocessExecutionError) as excinfo:
        run_command(["/usr/bin/shellcheck", "--bogus"])

    assert excinfo.value.returncode == 3
    assert excinfo.value.stderr == "bad flag"


def test_run_command_requires_resolvable_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(process.shutil, "which", lambda _name: None)

    with pytest.raises(FileNotFoundError):
        run_command(["shellcheck"])
    with pytest.raises(ValueError):
        run_command([])


def test_command_options_overrides_are_validated() -> None:
    base = CommandOptions()

    assert base.with_overrides({"timeout": 5}).timeout == 5.0
    assert base.with_overrides({"check": False}).check is False
    with pytest.raises(TypeError):
        base.with_overrides({"shell": True})  # type: ignore[dict-item]
    with pytest.raises(ValueError):
        base.with_overrides({"timeout": -1})
