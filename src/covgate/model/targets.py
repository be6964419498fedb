from __future__ import annotations

import math
import re
from dataclasses import dataclass

from covgate.errors import ConfigError
from covgate.model.types import FULL_COVERAGE, MetricKind

_TARGET_PATTERN = re.compile(r"^[a-zA-Z_-]+\s*=")


def _check_percentage(value: float | None, field: str) -> None:
    if value is None:
        return
    if math.isnan(value) or value < 0 or value > float(FULL_COVERAGE):
        msg = f"{field} out of range (0..{FULL_COVERAGE}): {value}"
        raise ConfigError(msg)


@dataclass(frozen=True, slots=True)
class MetricTarget:
    """A configured threshold for one metric.

    Fields
    ------
    metric:
        Metric the rule applies to.
    unstable:
        Ratios strictly below this percentage mark the build unstable.
    healthy_min:
        Ratio at or below which the metric contributes 0% build health.
    healthy_max:
        Ratio at or above which the metric contributes 100% build health.
    """

    metric: MetricKind
    unstable: float
    healthy_min: float | None = None
    healthy_max: float | None = None

    def __post_init__(self) -> None:
        """Reject out-of-range percentages and inverted health ranges."""
        if not isinstance(self.metric, MetricKind):
            msg = f"metric must be a MetricKind, got {self.metric!r}"
            raise ConfigError(msg)
        _check_percentage(self.unstable, "unstable threshold")
        _check_percentage(self.healthy_min, "healthy_min")
        _check_percentage(self.healthy_max, "healthy_max")
        if (
            self.healthy_min is not None
            and self.healthy_max is not None
            and self.healthy_min > self.healthy_max
        ):
            msg = f"healthy_min ({self.healthy_min}) must not exceed healthy_max ({self.healthy_max})"
            raise ConfigError(msg)

    @property
    def has_health_range(self) -> bool:
        return self.healthy_min is not None and self.healthy_max is not None


DEFAULT_TARGETS: tuple[MetricTarget, ...] = (
    MetricTarget(MetricKind.TOTAL_COVERAGE, 80.0),
    MetricTarget(MetricKind.CODE_COVERAGE, 80.0),
)


def default_targets() -> tuple[MetricTarget, ...]:
    """Return the out-of-the-box policy: total and code coverage at 80%."""
    return DEFAULT_TARGETS


def parse_target(expression: str) -> MetricTarget:
    """Parse a target expression like 'code_coverage=75' or 'total-coverage=80%'."""
    if not expression or not expression.strip():
        msg = "target expression must be non-empty"
        raise ConfigError(msg)

    token = expression.strip()
    if not _TARGET_PATTERN.match(token):
        msg = f"invalid target expression: {token!r}"
        raise ConfigError(msg)

    key, raw_value = token.split("=", 1)
    metric = MetricKind.from_id(key)
    value = raw_value.strip().rstrip("%").strip()
    try:
        unstable = float(value)
    except ValueError as exc:
        msg = f"invalid percentage value in {token!r}: {value!r}"
        raise ConfigError(msg) from exc
    return MetricTarget(metric, unstable)


__all__ = [
    "DEFAULT_TARGETS",
    "MetricTarget",
    "default_targets",
    "parse_target",
]
