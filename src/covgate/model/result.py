from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from covgate.model.types import FULL_COVERAGE, MetricKind

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


@dataclass(frozen=True, slots=True)
class CoverageResult:
    """Coverage ratios for one unit of a report.

    The top-level result is the report summary (``name == "TOTAL"`` for rcov);
    ``files`` holds one child result per source file, each of the same shape.

    Notes
    -----
    - A metric missing from ``ratios`` was not computed by the tool. It is
      reported as ``None``, never as 0%.
    - ``ratios`` is stored as a read-only mapping; results are not mutated
      once built.
    """

    name: str
    ratios: Mapping[MetricKind, float] = field(default_factory=dict)
    total_lines: int | None = None
    code_lines: int | None = None
    source_url: str | None = None
    files: tuple[CoverageResult, ...] = ()

    def __post_init__(self) -> None:
        """Validate ratios and freeze the containers."""
        for kind, value in self.ratios.items():
            if not isinstance(kind, MetricKind):
                msg = f"CoverageResult.ratios keys must be MetricKind, got {kind!r}"
                raise TypeError(msg)
            if math.isnan(value) or value < 0 or value > float(FULL_COVERAGE):
                msg = f"{kind.name} ratio out of range (0..{FULL_COVERAGE}) for {self.name!r}: {value}"
                raise ValueError(msg)
        for count in (self.total_lines, self.code_lines):
            if count is not None and count < 0:
                msg = "CoverageResult line counts must be >= 0"
                raise ValueError(msg)
        object.__setattr__(self, "ratios", MappingProxyType(dict(self.ratios)))
        object.__setattr__(self, "files", tuple(self.files))

    def ratio(self, metric: MetricKind) -> float | None:
        """Return the percentage for *metric*, or ``None`` when it was not computed."""
        return self.ratios.get(metric)

    def ratio_int(self, metric: MetricKind) -> int | None:
        """Return the percentage for *metric* truncated to an integer."""
        value = self.ratios.get(metric)
        return None if value is None else int(value)

    def has(self, metric: MetricKind) -> bool:
        return metric in self.ratios

    @property
    def metrics(self) -> tuple[MetricKind, ...]:
        """Computed metrics, in catalog order."""
        return tuple(kind for kind in MetricKind if kind in self.ratios)

    def file(self, name: str) -> CoverageResult | None:
        for child in self.files:
            if child.name == name:
                return child
        return None

    def iter_files(self) -> Iterator[CoverageResult]:
        """Yield every descendant result depth-first."""
        for child in self.files:
            yield child
            yield from child.iter_files()


__all__ = ["CoverageResult"]
