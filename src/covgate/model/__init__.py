from covgate.model.result import CoverageResult
from covgate.model.targets import DEFAULT_TARGETS, MetricTarget, default_targets, parse_target
from covgate.model.thresholds import EvaluationOutcome, EvaluationStatus, evaluate, health_score
from covgate.model.types import FULL_COVERAGE, MetricKind

__all__ = [
    "DEFAULT_TARGETS",
    "FULL_COVERAGE",
    "CoverageResult",
    "EvaluationOutcome",
    "EvaluationStatus",
    "MetricKind",
    "MetricTarget",
    "default_targets",
    "evaluate",
    "health_score",
    "parse_target",
]
