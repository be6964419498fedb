import pytest

from covgate.model.result import CoverageResult
from covgate.model.types import MetricKind


def test_ratio_accessors() -> None:
    result = CoverageResult("TOTAL", {MetricKind.TOTAL_COVERAGE: 92.5, MetricKind.CODE_COVERAGE: 78.9})
    assert result.ratio(MetricKind.TOTAL_COVERAGE) == 92.5
    assert result.ratio_int(MetricKind.CODE_COVERAGE) == 78
    assert result.metrics == (MetricKind.TOTAL_COVERAGE, MetricKind.CODE_COVERAGE)


def test_unset_metric_is_none_not_zero() -> None:
    result = CoverageResult("TOTAL", {MetricKind.TOTAL_COVERAGE: 0.0})
    assert result.ratio(MetricKind.TOTAL_COVERAGE) == 0.0
    assert result.ratio(MetricKind.CODE_COVERAGE) is None
    assert result.ratio_int(MetricKind.CODE_COVERAGE) is None
    assert not result.has(MetricKind.CODE_COVERAGE)


@pytest.mark.parametrize("value", [-0.1, 100.01, float("nan")])
def test_out_of_range_ratio_rejected(value: float) -> None:
    with pytest.raises(ValueError, match="out of range"):
        CoverageResult("TOTAL", {MetricKind.CODE_COVERAGE: value})


def test_negative_line_counts_rejected() -> None:
    with pytest.raises(ValueError, match="line counts"):
        CoverageResult("TOTAL", {}, total_lines=-1)


def test_result_is_immutable() -> None:
    source = {MetricKind.TOTAL_COVERAGE: 50.0}
    result = CoverageResult("TOTAL", source)
    source[MetricKind.CODE_COVERAGE] = 10.0
    assert not result.has(MetricKind.CODE_COVERAGE)
    with pytest.raises(TypeError):
        result.ratios[MetricKind.CODE_COVERAGE] = 10.0  # type: ignore[index]
    with pytest.raises(AttributeError):
        result.name = "other"  # type: ignore[misc]


def test_file_lookup_and_iteration() -> None:
    leaf = CoverageResult("lib/a/b.rb", {MetricKind.TOTAL_COVERAGE: 10.0})
    mid = CoverageResult("lib/a", {MetricKind.TOTAL_COVERAGE: 20.0}, files=(leaf,))
    root = CoverageResult("TOTAL", {MetricKind.TOTAL_COVERAGE: 30.0}, files=[mid])  # type: ignore[arg-type]

    assert root.file("lib/a") is mid
    assert root.file("lib/a/b.rb") is None
    assert [r.name for r in root.iter_files()] == ["lib/a", "lib/a/b.rb"]
    assert isinstance(root.files, tuple)


def test_results_compare_by_value() -> None:
    a = CoverageResult("TOTAL", {MetricKind.TOTAL_COVERAGE: 30.0}, total_lines=3)
    b = CoverageResult("TOTAL", {MetricKind.TOTAL_COVERAGE: 30.0}, total_lines=3)
    assert a == b
