from __future__ import annotations

import typer

from covgate.cli.exit_codes import EXIT_OK
from covgate.model.targets import default_targets
from covgate.model.types import MetricKind


def targets_cmd() -> None:
    """List the known metrics and the default targets."""
    defaults = {t.metric: t.unstable for t in default_targets()}
    width = max(len(kind.value) for kind in MetricKind)
    for kind in MetricKind:
        default = defaults.get(kind)
        suffix = f"  (default {default:g}%)" if default is not None else ""
        typer.echo(f"{kind.value:<{width}}  {kind.display_name}{suffix}")
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("targets")(targets_cmd)


__all__ = ["register"]
