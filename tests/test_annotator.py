# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the three-phase shellcheck annotator."""

from __future__ import annotations

from pathlib import Path

import pytest

from shannotate.annotator import ShellcheckAnnotator, ShellcheckResponse
from shannotate.config import Config, ProjectionConfig, ShellcheckConfig
from shannotate.core.models import ShellcheckDiagnostic, TextRange
from shannotate.core.severity import HighlightSeverity
from shannotate.document import Document
from shannotate.fixes import ApplyFixAction, DisableInspectionAction, SuppressAction
from shannotate.invoker import InvocationResult
from tests.helpers.shellcheck import SC2034_ENTRY, SC2086_ENTRY, FakeInvoker, findings


def _config(executable: Path, **shellcheck: object) -> Config:
    return Config(shellcheck=ShellcheckConfig(executable=str(executable), **shellcheck))


def test_collect_information_snapshots_document(fake_shellcheck: Path) -> None:
    annotator = ShellcheckAnnotator(_config(fake_shellcheck, disabled_inspections=["2034"]), invoker=FakeInvoker())
    document = Document("#!/bin/sh\necho $x\n", modification_stamp=11)

    info = annotator.collect_information(document)

    assert info.file_content == "#!/bin/sh\necho $x\n"
    assert info.modification_stamp == 11
    assert "--shell=sh" in info.execution_params
    assert "--exclude=SC1091" in info.execution_params
    assert "--exclude=SC2034" in info.execution_params
    assert info.execution_params[-1] == "-"


def test_collect_information_prefers_configured_shell(fake_shellcheck: Path) -> None:
    annotator = ShellcheckAnnotator(_config(fake_shellcheck, shell="ksh"), invoker=FakeInvoker())

    info = annotator.collect_information(Document("#!/bin/sh\n"))

    assert "--shell=ksh" in info.execution_params


def test_do_annotate_parses_findings(fake_shellcheck: Path) -> None:
    invoker = FakeInvoker(result=findings(SC2086_ENTRY))
    annotator = ShellcheckAnnotator(_config(fake_shellcheck), invoker=invoker)
    info = annotator.collect_information(Document("echo $x\n", modification_stamp=5))

    response = annotator.do_annotate(info)

    assert response is not None
    assert response.timestamp == 5
    assert [item.code for item in response.results] == [2086]
    executable, params, content = invoker.calls[0]
    assert executable == fake_shellcheck.resolve()
    assert params == info.execution_params
    assert content == "echo $x\n"


@pytest.mark.parametrize(
    "result",
    [
        InvocationResult(returncode=2, stdout="", stderr="invalid option"),
        InvocationResult(returncode=124, stdout="", stderr="timed out", timed_out=True),
    ],
)
def test_do_annotate_discards_failed_runs(fake_shellcheck: Path, result: InvocationResult) -> None:
    annotator = ShellcheckAnnotator(_config(fake_shellcheck), invoker=FakeInvoker(result=result))

    assert annotator.do_annotate(annotator.collect_information(Document("echo\n"))) is None


def test_do_annotate_handles_start_failures(fake_shellcheck: Path) -> None:
    invoker = FakeInvoker(error=PermissionError("denied"))
    annotator = ShellcheckAnnotator(_config(fake_shellcheck), invoker=invoker)

    assert annotator.do_annotate(annotator.collect_information(Document("echo\n"))) is None
    assert len(invoker.calls) == 1


def test_do_annotate_skips_missing_executable(tmp_path: Path) -> None:
    invoker = FakeInvoker(result=findings(SC2086_ENTRY))
    annotator = ShellcheckAnnotator(_config(tmp_path / "missing"), invoker=invoker)

    assert annotator.do_annotate(annotator.collect_information(Document("echo $x\n"))) is None
    assert invoker.calls == []


def test_apply_discards_stale_or_missing_responses(fake_shellcheck: Path) -> None:
    annotator = ShellcheckAnnotator(_config(fake_shellcheck), invoker=FakeInvoker())
    document = Document("echo $x\n", modification_stamp=2)
    stale = ShellcheckResponse(results=(ShellcheckDiagnostic.model_validate(SC2086_ENTRY),), timestamp=1)

    assert annotator.apply(document, None) == []
    assert annotator.apply(document, stale) == []


def test_annotate_builds_annotations_with_actions(fake_shellcheck: Path) -> None:
    invoker = FakeInvoker(result=findings(SC2086_ENTRY, SC2034_ENTRY))
    annotator = ShellcheckAnnotator(_config(fake_shellcheck), invoker=invoker)
    document = Document("echo $x\nfoo=1\n", modification_stamp=9)

    annotations = annotator.annotate(document)

    assert [item.code for item in annotations] == ["SC2086", "SC2034"]
    quoted, unused = annotations
    assert quoted.range == TextRange.create(5, 7)
    assert quoted.severity is HighlightSeverity.WEAK_WARNING
    assert quoted.message == "Double quote to prevent globbing and word splitting."
    assert "wiki/SC2086" in quoted.tooltip
    assert quoted.has_fix
    assert [type(action) for action in quoted.actions] == [ApplyFixAction, SuppressAction, DisableInspectionAction]
    assert [action.label for action in quoted.actions] == [
        "Fix 'Double quote to prevent globbing and word splitting'",
        "Suppress 'Double quote to prevent globbing and word splitting'",
        "Disable inspection 'Double quote to prevent globbing and word splitting'",
    ]
    fix_action = quoted.actions[0]
    assert isinstance(fix_action, ApplyFixAction)
    assert fix_action.revision == 9

    assert unused.range == TextRange.create(8, 11)
    assert unused.severity is HighlightSeverity.WARNING
    assert not unused.has_fix
    assert [type(action) for action in unused.actions] == [SuppressAction, DisableInspectionAction]


def test_annotate_skips_findings_inside_configured_regions(fake_shellcheck: Path) -> None:
    config = Config(
        shellcheck=ShellcheckConfig(executable=str(fake_shellcheck)),
        projection=ProjectionConfig(outer_region_patterns=[r"\$x"]),
    )
    annotator = ShellcheckAnnotator(config, invoker=FakeInvoker(result=findings(SC2086_ENTRY)))

    assert annotator.annotate(Document("echo $x\n")) == []


def test_annotate_uses_explicit_outer_regions(fake_shellcheck: Path) -> None:
    annotator = ShellcheckAnnotator(_config(fake_shellcheck), invoker=FakeInvoker(result=findings(SC2086_ENTRY)))
    document = Document("echo $x\n")

    assert annotator.annotate(document, [TextRange.create(0, 8)]) == []
    assert len(annotator.annotate(document, [])) == 1
