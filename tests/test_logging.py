# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for console logging helpers."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from shannotate.config import OutputConfig
from shannotate.logging import PACKAGE_LOGGER_NAME, Status, configure_debug_logging, console_for, section, status

PLAIN = OutputConfig(emoji=False, color=False)


def test_status_lines_render_plain_text(capsys: pytest.CaptureFixture[str]) -> None:
    status(Status.OK, "all good", PLAIN)
    status(Status.WARN, "careful", PLAIN)
    status(Status.FAIL, "broken [not markup]", PLAIN)

    assert capsys.readouterr().out.splitlines() == ["all good", "careful", "broken [not markup]"]


def test_status_prefixes_emoji_when_enabled(capsys: pytest.CaptureFixture[str]) -> None:
    status(Status.OK, "done", OutputConfig(emoji=True, color=False))

    assert capsys.readouterr().out.strip() == "✅ done"


def test_console_for_reuses_console_per_preferences() -> None:
    assert console_for(PLAIN) is console_for(OutputConfig(emoji=False, color=False, format="json"))
    assert console_for(PLAIN) is not console_for(OutputConfig(emoji=True, color=False))


def test_section_without_colour(capsys: pytest.CaptureFixture[str]) -> None:
    section("run.sh", PLAIN)

    assert "--- run.sh ---" in capsys.readouterr().out


def test_configure_debug_logging_toggles_handler() -> None:
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    configure_debug_logging(True)
    assert logger.level == logging.DEBUG
    assert sum(isinstance(handler, RichHandler) for handler in logger.handlers) == 1

    configure_debug_logging(True)
    assert sum(isinstance(handler, RichHandler) for handler in logger.handlers) == 1

    configure_debug_logging(False)
    assert logger.level == logging.WARNING
    assert not any(isinstance(handler, RichHandler) for handler in logger.handlers)
