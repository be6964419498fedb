from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from covgate.errors import EvaluationMismatch
from covgate.model.targets import DEFAULT_TARGETS
from covgate.model.types import FULL_COVERAGE

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covgate.model.result import CoverageResult
    from covgate.model.targets import MetricTarget
    from covgate.model.types import MetricKind

FAILURE_HEADER = "Code coverage enforcement failed for the following metrics:"


class EvaluationStatus(StrEnum):
    """Outcome of a gate evaluation."""

    OK = "ok"
    UNSTABLE = "unstable"


@dataclass(frozen=True, slots=True)
class EvaluationOutcome:
    """Result of evaluating targets against a coverage result.

    At most one failing target is ever reported: evaluation stops at the
    first target, in configured order, whose ratio is below its threshold.
    """

    status: EvaluationStatus
    failing_target: MetricTarget | None = None
    actual: float | None = None

    @property
    def passed(self) -> bool:
        return self.status is EvaluationStatus.OK

    @property
    def failing_metric(self) -> MetricKind | None:
        return None if self.failing_target is None else self.failing_target.metric


def evaluate(result: CoverageResult, targets: Sequence[MetricTarget] | None = None) -> EvaluationOutcome:
    """Evaluate *targets* in order against the summary ratios of *result*.

    Requirements
    ------------
    - Every examined target must reference a metric present in *result*;
      otherwise :class:`EvaluationMismatch` is raised.
    - ``targets=None`` applies :data:`DEFAULT_TARGETS`.

    Notes
    -----
    The first failing target short-circuits the loop, so which metric is
    reported depends on the configured order, and targets after it are not
    checked at all.
    """
    policy = DEFAULT_TARGETS if targets is None else targets

    for target in policy:
        actual = result.ratio(target.metric)
        if actual is None:
            raise EvaluationMismatch(target.metric)
        if actual < target.unstable:
            return EvaluationOutcome(
                status=EvaluationStatus.UNSTABLE,
                failing_target=target,
                actual=actual,
            )

    return EvaluationOutcome(status=EvaluationStatus.OK)


def failure_lines(outcome: EvaluationOutcome) -> list[str]:
    """Return the human-readable failure message for an unstable outcome."""
    target = outcome.failing_target
    if outcome.passed or target is None:
        return []
    detail = f"    {target.metric.name} ({target.metric.display_name})"
    if outcome.actual is not None:
        detail += f": {outcome.actual:.1f}% < {target.unstable:.1f}%"
    return [FAILURE_HEADER, detail]


def health_score(result: CoverageResult, targets: Sequence[MetricTarget] | None = None) -> int | None:
    """Return the build health (0..100) implied by *targets* with a health range.

    The score is the worst per-target score. A target scores 100 at or above
    ``healthy_max``, 0 at or below ``healthy_min`` and is interpolated linearly
    in between.
    """
    policy = DEFAULT_TARGETS if targets is None else targets
    scores: list[int] = []
    for target in policy:
        if not target.has_health_range:
            continue
        actual = result.ratio(target.metric)
        if actual is None:
            continue
        scores.append(_target_health(actual, target))
    return min(scores) if scores else None


def _target_health(actual: float, target: MetricTarget) -> int:
    # Only called for targets carrying both bounds.
    low = float(target.healthy_min or 0.0)
    high = float(target.healthy_max if target.healthy_max is not None else FULL_COVERAGE)
    if actual >= high:
        return FULL_COVERAGE
    if actual <= low:
        return 0
    return int(FULL_COVERAGE * (actual - low) / (high - low))


__all__ = [
    "FAILURE_HEADER",
    "EvaluationOutcome",
    "EvaluationStatus",
    "evaluate",
    "failure_lines",
    "health_score",
]
