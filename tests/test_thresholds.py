import pytest

from covgate.errors import EvaluationMismatch
from covgate.model.result import CoverageResult
from covgate.model.targets import DEFAULT_TARGETS, MetricTarget
from covgate.model.thresholds import (
    FAILURE_HEADER,
    EvaluationOutcome,
    EvaluationStatus,
    evaluate,
    failure_lines,
    health_score,
)
from covgate.model.types import MetricKind

TOTAL = MetricKind.TOTAL_COVERAGE
CODE = MetricKind.CODE_COVERAGE


def _result(total: float | None = None, code: float | None = None) -> CoverageResult:
    ratios = {}
    if total is not None:
        ratios[TOTAL] = total
    if code is not None:
        ratios[CODE] = code
    return CoverageResult("TOTAL", ratios)


def test_all_targets_met() -> None:
    outcome = evaluate(_result(90, 85), [MetricTarget(TOTAL, 80), MetricTarget(CODE, 80)])
    assert outcome == EvaluationOutcome(status=EvaluationStatus.OK)
    assert outcome.passed
    assert outcome.failing_metric is None


def test_ratio_equal_to_threshold_passes() -> None:
    assert evaluate(_result(80, 80)).passed


def test_first_failing_target_in_order_is_reported() -> None:
    result = _result(total=85, code=85)
    a_then_b = [MetricTarget(TOTAL, 90), MetricTarget(CODE, 50)]
    outcome = evaluate(result, a_then_b)
    assert outcome.status is EvaluationStatus.UNSTABLE
    assert outcome.failing_metric is TOTAL
    assert outcome.actual == 85


def test_evaluation_stops_at_first_failure() -> None:
    result = _result(total=10, code=10)
    outcome = evaluate(result, [MetricTarget(CODE, 50), MetricTarget(TOTAL, 50)])
    assert outcome.failing_metric is CODE
    outcome = evaluate(result, [MetricTarget(TOTAL, 50), MetricTarget(CODE, 50)])
    assert outcome.failing_metric is TOTAL


def test_default_targets_match_explicit_80_80() -> None:
    explicit = [MetricTarget(TOTAL, 80), MetricTarget(CODE, 80)]
    for total, code in [(92.5, 78.0), (79.9, 95.0), (80.0, 80.0), (100.0, 0.0)]:
        result = _result(total, code)
        assert evaluate(result) == evaluate(result, explicit)
        assert evaluate(result, None) == evaluate(result, DEFAULT_TARGETS)


def test_unset_metric_raises_mismatch() -> None:
    with pytest.raises(EvaluationMismatch, match="CODE_COVERAGE") as excinfo:
        evaluate(_result(total=90), [MetricTarget(TOTAL, 80), MetricTarget(CODE, 80)])
    assert excinfo.value.metric is CODE


def test_unset_metric_behind_failing_target_is_not_examined() -> None:
    outcome = evaluate(_result(total=10), [MetricTarget(TOTAL, 80), MetricTarget(CODE, 80)])
    assert outcome.failing_metric is TOTAL


def test_empty_target_list_passes() -> None:
    assert evaluate(_result(), []).passed


def test_evaluate_does_not_mutate_inputs() -> None:
    result = _result(50, 50)
    targets = [MetricTarget(TOTAL, 80)]
    evaluate(result, targets)
    assert targets == [MetricTarget(TOTAL, 80)]
    assert result == _result(50, 50)


def test_failure_lines() -> None:
    outcome = evaluate(_result(92.5, 78.0))
    lines = failure_lines(outcome)
    assert lines == [FAILURE_HEADER, "    CODE_COVERAGE (Code coverage): 78.0% < 80.0%"]
    assert failure_lines(evaluate(_result(95, 95))) == []


def test_health_score_interpolates_and_takes_worst() -> None:
    result = _result(total=75, code=95)
    targets = [
        MetricTarget(TOTAL, 0, healthy_min=50, healthy_max=100),
        MetricTarget(CODE, 0, healthy_min=50, healthy_max=90),
    ]
    assert health_score(result, targets) == 50


@pytest.mark.parametrize(
    ("ratio", "expected"),
    [(40.0, 0), (50.0, 0), (60.0, 25), (89.9, 99), (90.0, 100), (100.0, 100)],
)
def test_health_score_bounds(ratio: float, expected: int) -> None:
    target = MetricTarget(CODE, 0, healthy_min=50, healthy_max=90)
    assert health_score(_result(code=ratio), [target]) == expected


def test_health_score_without_ranges_is_none() -> None:
    assert health_score(_result(90, 90)) is None
    assert health_score(_result(90), [MetricTarget(CODE, 0, healthy_min=1, healthy_max=2)]) is None
