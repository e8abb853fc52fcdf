# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse shellcheck JSON output into diagnostic models."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import cast

from pydantic import ValidationError

from shannotate.core.models import JsonValue, ShellcheckDiagnostic

LOGGER = logging.getLogger(__name__)


def _load_json(stdout: str) -> JsonValue:
    """Decode ``stdout`` returning ``None`` when it is not valid JSON."""

    stdout = stdout.strip()
    if not stdout:
        return []
    try:
        return cast(JsonValue, json.loads(stdout))
    except json.JSONDecodeError as exc:
        LOGGER.debug("Unparseable shellcheck output: %s", exc)
        return None


def _iter_entries(payload: JsonValue) -> Iterator[Mapping[str, JsonValue]]:
    """Yield the diagnostic objects of a ``--format=json`` array.

    ``json1`` output is not accepted: it counts a tab as one column, which
    does not match the tab stops used for projection.
    """

    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes, bytearray)):
        return
    for item in payload:
        if isinstance(item, Mapping):
            yield item


def parse_shellcheck_payload(payload: JsonValue) -> list[ShellcheckDiagnostic]:
    """Validate decoded shellcheck JSON into :class:`ShellcheckDiagnostic` models.

    Args:
        payload: Decoded JSON emitted by shellcheck.

    Returns:
        list[ShellcheckDiagnostic]: Valid entries in tool order. Entries that
        fail validation are skipped.
    """

    diagnostics: list[ShellcheckDiagnostic] = []
    for entry in _iter_entries(payload):
        try:
            diagnostics.append(ShellcheckDiagnostic.model_validate(entry))
        except ValidationError as exc:
            LOGGER.debug("Skipping malformed shellcheck entry %r: %s", entry, exc)
    return diagnostics


def parse_shellcheck_output(stdout: str) -> list[ShellcheckDiagnostic]:
    """Parse raw shellcheck standard output.

    Args:
        stdout: Text written by ``shellcheck --format=json``.

    Returns:
        list[ShellcheckDiagnostic]: Parsed findings; empty when the output is
        blank or cannot be decoded.
    """

    payload = _load_json(stdout)
    if payload is None:
        return []
    return parse_shellcheck_payload(payload)


__all__ = ["parse_shellcheck_output", "parse_shellcheck_payload"]
