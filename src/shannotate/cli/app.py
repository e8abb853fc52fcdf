# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the ``check`` and ``fix`` commands."""

from __future__ import annotations

from pathlib import Path

import typer

from ..annotator import Annotation, ShellcheckAnnotator
from ..config import Config, ConfigError
from ..config_loader import ConfigLoader
from ..document import Document
from ..fixes import ApplyFixAction, apply_fixes
from ..invoker import is_valid_executable
from ..logging import configure_debug_logging, console_for, section
from ..reporting import render_concise, render_json, render_pretty
from ..shells import KNOWN_SHELLS
from .options import (
    COLOR_OPTION,
    DEBUG_OPTION,
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    EXCLUDE_OPTION,
    EXECUTABLE_OPTION,
    FILES_ARGUMENT,
    FORMAT_OPTION,
    ROOT_OPTION,
    SHELL_OPTION,
    CheckCLIOptions,
    OutputFormat,
    normalize_cli_values,
)
from .shared import CLIError, CLILogger, build_cli_logger

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2

app = typer.Typer(
    name="shannotate",
    help="Project shellcheck findings onto shell-script source ranges.",
    no_args_is_help=True,
    add_completion=False,
)


def _prepare(options: CheckCLIOptions) -> tuple[Config, CLILogger]:
    """Resolve configuration for ``options`` and validate the environment.

    Args:
        options: Parsed command line options.

    Returns:
        tuple[Config, CLILogger]: Effective configuration and a logger bound to it.

    Raises:
        CLIError: If configuration is invalid, the shell is unknown or the
            shellcheck executable is unavailable.
    """

    try:
        loaded = ConfigLoader.for_root(options.root).load_with_trace()
        config = options.apply_to(loaded.config)
    except ConfigError as exc:
        raise CLIError(f"Invalid configuration: {exc}", exit_code=EXIT_USAGE) from exc
    logger = CLILogger(config.output)
    configure_debug_logging(config.output.debug)
    for warning in loaded.warnings:
        logger.warn(warning)
    if config.shellcheck.shell is not None and config.shellcheck.shell not in KNOWN_SHELLS:
        raise CLIError(
            f"Unknown shell '{config.shellcheck.shell}'; expected one of {', '.join(KNOWN_SHELLS)}",
            exit_code=EXIT_USAGE,
        )
    if not is_valid_executable(config.shellcheck.executable):
        raise CLIError(
            f"shellcheck executable '{config.shellcheck.executable}' was not found or is not executable",
            exit_code=EXIT_USAGE,
        )
    return config, logger


def _display_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root.resolve()).as_posix()
    except ValueError:
        return str(path)


def _load_document(path: Path, config: Config) -> Document:
    """Read ``path`` for annotation.

    Raises:
        CLIError: If the file cannot be read or is not valid UTF-8.
    """

    try:
        return Document.from_path(path, encoding=config.projection.encoding)
    except UnicodeDecodeError as exc:
        raise CLIError(f"Cannot read {path}: not valid UTF-8 ({exc.reason})", exit_code=EXIT_USAGE) from exc
    except OSError as exc:
        raise CLIError(f"Cannot read {path}: {exc.strerror or exc}", exit_code=EXIT_USAGE) from exc


def _report(config: Config, results: dict[str, list[Annotation]], logger: CLILogger) -> None:
    """Render ``results`` in the configured output format."""

    output = config.output
    if output.format == OutputFormat.JSON.value:
        typer.echo(render_json(results))
        return
    if output.format == OutputFormat.CONCISE.value:
        for path, annotations in results.items():
            for line in render_concise(path, annotations):
                typer.echo(line)
        return
    console = console_for(output)
    for path, annotations in results.items():
        if annotations:
            render_pretty(console, path, annotations)
    total = sum(len(annotations) for annotations in results.values())
    if total:
        logger.fail(f"shellcheck reported {total} finding(s) in {len(results)} file(s)")
    else:
        logger.ok("No shellcheck findings")


def _options(
    files: list[Path],
    root: Path | None,
    shell: str | None,
    exclude: list[str] | None,
    executable: str | None,
    output_format: OutputFormat | None,
    emoji: bool,
    color: bool,
    debug: bool,
) -> CheckCLIOptions:
    return CheckCLIOptions(
        files=tuple(files),
        root=root or Path.cwd(),
        shell=shell.strip() if shell else None,
        exclude=normalize_cli_values(exclude),
        executable=executable,
        output_format=output_format,
        emoji=emoji,
        color=color,
        debug=debug,
    )


@app.command("check")
def check_command(
    files: FILES_ARGUMENT,
    root: ROOT_OPTION = None,
    shell: SHELL_OPTION = None,
    exclude: EXCLUDE_OPTION = None,
    executable: EXECUTABLE_OPTION = None,
    output_format: FORMAT_OPTION = None,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Lint shell scripts and report projected shellcheck findings.

    Exits with status 1 when any finding is reported and 2 on usage errors,
    including scripts that cannot be read.
    """

    options = _options(files, root, shell, exclude, executable, output_format, emoji, color, debug)
    try:
        config, logger = _prepare(options)
    except CLIError as exc:
        build_cli_logger(emoji=emoji, color=color).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    annotator = ShellcheckAnnotator(config)
    results: dict[str, list[Annotation]] = {}
    unreadable = 0
    for path in options.files:
        try:
            document = _load_document(path, config)
        except CLIError as exc:
            logger.fail(str(exc))
            unreadable += 1
            continue
        results[_display_path(path, options.root)] = annotator.annotate(document)
    _report(config, results, logger)
    if unreadable:
        raise typer.Exit(code=EXIT_USAGE)
    has_findings = any(results.values())
    raise typer.Exit(code=EXIT_FINDINGS if has_findings else EXIT_CLEAN)


@app.command("fix")
def fix_command(
    files: FILES_ARGUMENT,
    root: ROOT_OPTION = None,
    shell: SHELL_OPTION = None,
    exclude: EXCLUDE_OPTION = None,
    executable: EXECUTABLE_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Apply the automatic fixes shellcheck proposes.

    Line endings of the rewritten scripts are preserved. Exits with status 2
    when a script cannot be read.
    """

    options = _options(files, root, shell, exclude, executable, None, emoji, color, debug)
    try:
        config, logger = _prepare(options)
    except CLIError as exc:
        build_cli_logger(emoji=emoji, color=color).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    annotator = ShellcheckAnnotator(config)
    total = 0
    unreadable = 0
    for path in options.files:
        try:
            document = _load_document(path, config)
        except CLIError as exc:
            logger.fail(str(exc))
            unreadable += 1
            continue
        annotations = annotator.annotate(document)
        fixes = [
            action.fix
            for annotation in annotations
            for action in annotation.actions
            if isinstance(action, ApplyFixAction)
        ]
        if not fixes:
            continue
        fixed, applied = apply_fixes(
            document,
            fixes,
            document.modification_stamp,
            tab_width=config.shellcheck.tab_width,
        )
        if not applied:
            continue
        total += applied
        display = _display_path(path, options.root)
        if dry_run:
            section(display, config.output)
            typer.echo(fixed.text, nl=False)
        else:
            fixed.save(path)
            logger.ok(f"Applied {applied} fix(es) to {display}")
    if total == 0:
        logger.info("No automatic fixes available")
    raise typer.Exit(code=EXIT_USAGE if unreadable else EXIT_CLEAN)


__all__ = ["app", "check_command", "fix_command"]
