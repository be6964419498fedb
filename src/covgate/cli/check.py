from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

from covgate.cli._shared import configure_logging, resolve_use_color, stdout_color_allowed
from covgate.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_MISMATCH,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_UNSTABLE,
)
from covgate.config import load_config
from covgate.errors import ConfigError, EvaluationMismatch, ParseError, ReportNotFoundError
from covgate.io import OutputFormat, write_output
from covgate.model.targets import parse_target
from covgate.pipeline import GateRecord, locate_and_run
from covgate.render.json import format_json
from covgate.render.summary import render_summary

_BOOL_FALSE = False


def _fail(exc: Exception, code: int) -> typer.Exit:
    typer.echo(f"ERROR: {exc}", err=True)
    return typer.Exit(code=code)


def _run(
    report: Path | None,
    *,
    config: Path | None,
    target: list[str],
) -> GateRecord:
    cwd = Path.cwd()
    try:
        settings = load_config(config, cwd=cwd)
        targets = tuple(parse_target(t) for t in target) if target else settings.resolved_targets()
    except ConfigError as exc:
        raise _fail(exc, EXIT_CONFIG) from exc

    try:
        return locate_and_run(
            report if report is not None else settings.report,
            targets,
            cwd=cwd,
            report_name=settings.report_name,
            sink=sys.stderr,
        )
    except ReportNotFoundError as exc:
        raise _fail(exc, EXIT_NOINPUT) from exc
    except ParseError as exc:
        raise _fail(exc, EXIT_DATAERR) from exc
    except EvaluationMismatch as exc:
        raise _fail(exc, EXIT_MISMATCH) from exc
    except OSError as exc:
        raise _fail(exc, EXIT_GENERIC) from exc


def check_cmd(
    report: Annotated[
        Path | None,
        typer.Argument(help="rcov index.html, or a directory to search. If omitted, discovery is used."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", help="Read settings from PATH (covgate.toml or pyproject.toml)."),
    ] = None,
    target: Annotated[
        list[str] | None,
        typer.Option(
            "-t",
            "--target",
            help="Target as METRIC=PERCENT, e.g. code_coverage=85 (repeatable, order matters).",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", help="Output format: human or json.", case_sensitive=False),
    ] = OutputFormat.HUMAN,
    output: Annotated[
        Path | None,
        typer.Option("--output", help="Write output to PATH (use '-' for stdout)."),
    ] = None,
    files: Annotated[
        bool,
        typer.Option("--files/--no-files", help="List per-file ratios in human output."),
    ] = True,
    color: Annotated[bool, typer.Option("--color", help="Force color output")] = _BOOL_FALSE,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable color output")] = _BOOL_FALSE,
    quiet: Annotated[bool, typer.Option("-q", "--quiet", help="Emit only errors")] = _BOOL_FALSE,
    verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Emit diagnostic logging")] = _BOOL_FALSE,
) -> None:
    """Parse an rcov report and gate on the configured coverage targets."""
    configure_logging(quiet=quiet, verbose=verbose)

    record = _run(report, config=config, target=target or [])

    if output_format == OutputFormat.JSON:
        text = format_json(record)
    else:
        to_terminal = output is None or output == Path("-")
        use_color = resolve_use_color(
            color=color,
            no_color=no_color,
            color_allowed=to_terminal and stdout_color_allowed(),
        )
        text = render_summary(record, color=use_color, show_files=files)

    if not quiet or output is not None:
        try:
            write_output(text, output)
        except OSError as exc:
            raise _fail(exc, EXIT_GENERIC) from exc
    raise typer.Exit(code=EXIT_OK if record.outcome.passed else EXIT_UNSTABLE)


def register(app: typer.Typer) -> None:
    app.command("check")(check_cmd)


__all__ = ["register"]
