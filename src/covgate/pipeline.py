from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

from covgate import logger
from covgate.inputs.discover import DEFAULT_REPORT_NAME, resolve_report_path
from covgate.inputs.rcov import parse_report
from covgate.model.targets import DEFAULT_TARGETS
from covgate.model.thresholds import evaluate, failure_lines, health_score

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from covgate.model.result import CoverageResult
    from covgate.model.targets import MetricTarget
    from covgate.model.thresholds import EvaluationOutcome


@dataclass(frozen=True, slots=True)
class GateRecord:
    """Everything one gate run publishes: the parsed report and its verdict."""

    report: Path
    result: CoverageResult
    outcome: EvaluationOutcome
    targets: tuple[MetricTarget, ...]
    health: int | None = None


def emit_failure(outcome: EvaluationOutcome, sink: TextIO | None = None) -> None:
    """Write the failure message for an unstable *outcome* to *sink* (stderr by default)."""
    lines = failure_lines(outcome)
    if not lines:
        return
    out = sys.stderr if sink is None else sink
    for line in lines:
        out.write(line + "\n")


def run_gate(
    report: Path,
    targets: Sequence[MetricTarget] | None = None,
    *,
    sink: TextIO | None = None,
) -> GateRecord:
    """Parse *report*, evaluate *targets* and publish a :class:`GateRecord`.

    ``ParseError`` and ``EvaluationMismatch`` propagate unchanged; nothing is
    published when either is raised.
    """
    policy = tuple(DEFAULT_TARGETS if targets is None else targets)
    logger.debug("targets: %s", ", ".join(f"{t.metric.name}@{t.unstable:g}" for t in policy) or "<none>")

    result = parse_report(report)
    logger.info("parsed %s (%d files)", report, len(result.files))

    outcome = evaluate(result, policy)
    logger.info("coverage gate: %s", outcome.status.value)
    if not outcome.passed:
        emit_failure(outcome, sink)

    return GateRecord(
        report=report,
        result=result,
        outcome=outcome,
        targets=policy,
        health=health_score(result, policy),
    )


def locate_and_run(
    report: Path | None,
    targets: Sequence[MetricTarget] | None = None,
    *,
    cwd: Path,
    report_name: str = DEFAULT_REPORT_NAME,
    sink: TextIO | None = None,
) -> GateRecord:
    """Resolve the report path (file, directory or *cwd*) and run the gate on it."""
    path = resolve_report_path(report, cwd=cwd, name=report_name)
    logger.info("using report %s", path)
    return run_gate(path, targets, sink=sink)


__all__ = ["GateRecord", "emit_failure", "locate_and_run", "run_gate"]
