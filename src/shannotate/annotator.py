# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run shellcheck on a document and turn its findings into annotations.

The workflow follows the three phases of an editor's external annotator:

1. :meth:`ShellcheckAnnotator.collect_information` snapshots the document text,
   its modification stamp and the shellcheck arguments.
2. :meth:`ShellcheckAnnotator.do_annotate` runs the tool on that snapshot.
3. :meth:`ShellcheckAnnotator.apply` projects the findings onto the current
   document, discarding the whole response when the document has changed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from shannotate.config import Config
from shannotate.core.models import ProjectedDiagnostic, ShellcheckDiagnostic, TextRange
from shannotate.core.severity import HighlightSeverity
from shannotate.document import Document
from shannotate.fixes import AnnotationAction, ApplyFixAction, DisableInspectionAction, SuppressAction
from shannotate.invoker import SubprocessInvoker, ToolInvoker, build_execution_params, resolve_executable
from shannotate.messages import format_message, quote_message, tooltip_html
from shannotate.parsers import parse_shellcheck_output
from shannotate.projector import project_all
from shannotate.regions import find_outer_regions
from shannotate.shells import detect_shell

LOGGER = logging.getLogger(__name__)

SUCCESS_RETURNCODES = frozenset({0, 1})


@dataclass(frozen=True, slots=True)
class CollectedInfo:
    """Snapshot of the document handed to shellcheck."""

    file_content: str
    modification_stamp: int
    execution_params: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ShellcheckResponse:
    """Findings reported for the revision identified by ``timestamp``."""

    results: tuple[ShellcheckDiagnostic, ...]
    timestamp: int


class Annotation(BaseModel):
    """A highlighted finding ready for display."""

    model_config = ConfigDict(frozen=True)

    range: TextRange
    severity: HighlightSeverity
    message: str
    tooltip: str
    code: str
    line: int
    column: int
    end_line: int
    end_column: int
    actions: tuple[AnnotationAction, ...] = Field(default_factory=tuple)

    @property
    def has_fix(self) -> bool:
        return any(isinstance(action, ApplyFixAction) for action in self.actions)


def build_annotation(projected: ProjectedDiagnostic, revision: int) -> Annotation:
    """Return the :class:`Annotation` describing ``projected``.

    Args:
        projected: Finding paired with its document range.
        revision: Modification stamp the finding was computed for.

    Returns:
        Annotation: Display model with quick-fix, suppress and disable actions.
    """

    diagnostic = projected.diagnostic
    formatted = format_message(diagnostic.message)
    quoted = quote_message(formatted)
    code = diagnostic.sc_code
    actions: list[AnnotationAction] = []
    if diagnostic.has_fix and diagnostic.fix is not None:
        actions.append(ApplyFixAction(label=f"Fix {quoted}", fix=diagnostic.fix, revision=revision))
    actions.append(SuppressAction(label=f"Suppress {quoted}", code=code, offset=projected.range.start))
    actions.append(DisableInspectionAction(label=f"Disable inspection {quoted}", code=code))
    return Annotation(
        range=projected.range,
        severity=projected.severity,
        message=diagnostic.message,
        tooltip=tooltip_html(diagnostic),
        code=code,
        line=diagnostic.line,
        column=diagnostic.column,
        end_line=diagnostic.end_line,
        end_column=diagnostic.end_column,
        actions=tuple(actions),
    )


class ShellcheckAnnotator:
    """Produce annotations for shell documents using the shellcheck linter."""

    def __init__(self, config: Config | None = None, *, invoker: ToolInvoker | None = None) -> None:
        """Initialise the annotator.

        Args:
            config: Resolved configuration; defaults are used when omitted.
            invoker: Process runner; a :class:`SubprocessInvoker` honouring the
                configured timeout is used when omitted.
        """

        self._config = config or Config()
        self._invoker = invoker or SubprocessInvoker(timeout=self._config.shellcheck.timeout)

    @property
    def config(self) -> Config:
        return self._config

    def collect_information(self, document: Document) -> CollectedInfo:
        """Snapshot ``document`` together with the shellcheck arguments."""

        settings = self._config.shellcheck
        shell = settings.shell or detect_shell(document.text)
        params = build_execution_params(
            shell,
            settings.disabled_inspections,
            wiki_link_count=settings.wiki_link_count,
        )
        return CollectedInfo(
            file_content=document.text,
            modification_stamp=document.modification_stamp,
            execution_params=tuple(params),
        )

    def do_annotate(self, info: CollectedInfo) -> ShellcheckResponse | None:
        """Run shellcheck on ``info`` and parse its findings.

        Args:
            info: Snapshot produced by :meth:`collect_information`.

        Returns:
            ShellcheckResponse | None: Findings keyed to the snapshot's stamp, or
            ``None`` when the executable is unavailable, cannot start, times out
            or rejects its arguments.
        """

        executable = resolve_executable(self._config.shellcheck.executable)
        if executable is None:
            LOGGER.debug("shellcheck executable %r is not available", self._config.shellcheck.executable)
            return None
        try:
            result = self._invoker.invoke(executable, info.execution_params, info.file_content)
        except OSError as exc:
            LOGGER.error("Failed to run %s: %s", executable, exc)
            return None
        if result.timed_out:
            LOGGER.debug("Execution timeout, shellcheck results discarded")
            return None
        if result.returncode not in SUCCESS_RETURNCODES:
            LOGGER.debug("shellcheck exited with %d: %s", result.returncode, result.stderr.strip())
            return None
        return ShellcheckResponse(
            results=tuple(parse_shellcheck_output(result.stdout)),
            timestamp=info.modification_stamp,
        )

    def apply(
        self,
        document: Document,
        response: ShellcheckResponse | None,
        outer_regions: Iterable[TextRange] | None = None,
    ) -> list[Annotation]:
        """Project ``response`` onto ``document``.

        Args:
            document: Current revision of the document.
            response: Findings returned by :meth:`do_annotate`.
            outer_regions: Embedded foreign-content spans; discovered from the
                configured patterns when omitted.

        Returns:
            list[Annotation]: Annotations in shellcheck order; empty when there
            is no response or it belongs to another revision.
        """

        if response is None:
            return []
        if response.timestamp != document.modification_stamp:
            LOGGER.debug(
                "Discarding stale shellcheck response for revision %d (document at %d)",
                response.timestamp,
                document.modification_stamp,
            )
            return []
        regions: Sequence[TextRange] = (
            tuple(outer_regions)
            if outer_regions is not None
            else tuple(find_outer_regions(document, self._config.projection.outer_region_patterns))
        )
        projected = project_all(
            document,
            response.results,
            regions,
            revision=response.timestamp,
            tab_width=self._config.shellcheck.tab_width,
        )
        return [build_annotation(item, response.timestamp) for item in projected]

    def annotate(self, document: Document, outer_regions: Iterable[TextRange] | None = None) -> list[Annotation]:
        """Run every phase for ``document`` and return its annotations."""

        info = self.collect_information(document)
        return self.apply(document, self.do_annotate(info), outer_regions)


__all__ = [
    "Annotation",
    "CollectedInfo",
    "ShellcheckAnnotator",
    "ShellcheckResponse",
    "build_annotation",
]
