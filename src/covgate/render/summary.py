from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from covgate.model.types import MetricKind

if TYPE_CHECKING:
    from covgate.model.result import CoverageResult
    from covgate.pipeline import GateRecord


def _style_percent(pct: float | None, threshold: float | None) -> str:
    if pct is None:
        return "n/a"
    text = f"{pct:.1f}%"
    if threshold is None:
        return text
    if pct >= threshold:
        return f"[green]{text}[/green]"
    return f"[red]{text}[/red]"


def _count(n: int | None) -> str:
    return "" if n is None else str(n)


def _row(result: CoverageResult, thresholds: dict[MetricKind, float]) -> list[str]:
    row = [escape(result.name), _count(result.total_lines), _count(result.code_lines)]
    row.extend(_style_percent(result.ratio(kind), thresholds.get(kind)) for kind in MetricKind)
    return row


def render_summary(record: GateRecord, *, color: bool = True, show_files: bool = True) -> str:
    """Render a Rich table of the parsed report followed by the gate verdict.

    Percentages are green when they meet the unstable threshold configured for
    their metric and red otherwise.
    """
    thresholds = {t.metric: t.unstable for t in record.targets}
    result = record.result

    table = Table(title="Coverage Report", box=box.SIMPLE_HEAVY, header_style="bold", expand=True)
    table.add_column("Name", overflow="fold")
    table.add_column("Total\nlines", justify="right")
    table.add_column("Lines of\ncode", justify="right")
    for kind in MetricKind:
        table.add_column(kind.display_name.replace(" ", "\n", 1), justify="right")

    if show_files:
        for child in result.files:
            table.add_row(*_row(child, thresholds))
        table.add_section()

    table.add_row(*(f"[bold]{cell}[/bold]" for cell in _row(result, thresholds)))

    outcome = record.outcome
    if outcome.passed:
        verdict = "[green]coverage gate: ok[/green]"
    else:
        metric = outcome.failing_metric
        name = metric.name if metric is not None else "?"
        verdict = f"[red]coverage gate: unstable ({name})[/red]"
    if record.health is not None:
        verdict += f"  health {record.health}%"

    buf = StringIO()
    console = Console(file=buf, force_terminal=color, no_color=not color, width=100)
    console.print()
    console.print(table)
    console.print(verdict)
    return buf.getvalue().rstrip()


__all__ = ["render_summary"]
