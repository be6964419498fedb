"""Parse rcov ``index.html`` summary pages into :class:`CoverageResult` trees.

rcov writes one summary table::

    <table class="report">
      <thead><tr>
        <td class="heading">Name</td><td class="heading">Total lines</td>
        <td class="heading">Lines of code</td><td class="heading">Total coverage</td>
        <td class="heading">Code coverage</td>
      </tr></thead>
      <tbody>
        <tr class="light"><td>TOTAL</td><td>1273</td><td>873</td>
          <td><table><tr><td><tt class="coverage_total">76.3%</tt></td>...</tr></table></td>
          ...
        </tr>
        <tr class="dark"><td><a href="lib-foo_rb.html">lib/foo.rb</a></td>...</tr>
      </tbody>
    </table>

Coverage cells nest a bar-chart table, so a cell's value is its whole text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import TYPE_CHECKING

from covgate import logger
from covgate.errors import ParseError, ReportNotFoundError
from covgate.model.result import CoverageResult
from covgate.model.types import FULL_COVERAGE, MetricKind

if TYPE_CHECKING:
    from pathlib import Path

SUMMARY_ROW = "TOTAL"

_PERCENT_RE = re.compile(r"(?P<sign>[-+]?)\s*(?P<value>\d+(?:\.\d+)?)\s*%")
_COUNT_RE = re.compile(r"^\d+$")

_NAME_HEADING = "name"
_TOTAL_LINES_HEADING = "total lines"
_CODE_LINES_HEADING = "lines of code"


@dataclass(slots=True)
class _Cell:
    text: list[str] = field(default_factory=list)
    href: str | None = None
    heading: bool = False

    @property
    def value(self) -> str:
        return " ".join("".join(self.text).split())


@dataclass(slots=True)
class _Row:
    cells: list[_Cell] = field(default_factory=list)
    in_head: bool = False

    @property
    def is_heading(self) -> bool:
        return self.in_head or (bool(self.cells) and all(c.heading for c in self.cells))


class _ReportTableCollector(HTMLParser):
    """Collect the rows of the first ``<table class="report">`` in a page."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.rows: list[_Row] = []
        self.found = False
        self._depth = 0
        self._report_depth: int | None = None
        self._in_head = False
        self._row: _Row | None = None
        self._cell: _Cell | None = None

    @property
    def _at_report_level(self) -> bool:
        return self._report_depth is not None and self._depth == self._report_depth

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        attr = dict(attrs)
        if tag == "table":
            self._depth += 1
            classes = (attr.get("class") or "").split()
            if not self.found and "report" in classes:
                self.found = True
                self._report_depth = self._depth
            return
        if not self._at_report_level:
            if tag == "a" and self._cell is not None and self._cell.href is None:
                self._cell.href = attr.get("href")
            return
        if tag == "thead":
            self._in_head = True
        elif tag == "tr":
            self._close_row()
            self._row = _Row(in_head=self._in_head)
        elif tag in {"td", "th"} and self._row is not None:
            self._close_cell()
            classes = (attr.get("class") or "").split()
            self._cell = _Cell(heading=tag == "th" or "heading" in classes)
        elif tag == "a" and self._cell is not None and self._cell.href is None:
            self._cell.href = attr.get("href")

    def handle_endtag(self, tag: str) -> None:
        if tag == "table":
            if self._at_report_level:
                self._close_row()
                self._report_depth = None
            self._depth = max(0, self._depth - 1)
            return
        if not self._at_report_level:
            return
        if tag == "thead":
            self._close_row()
            self._in_head = False
        elif tag in {"td", "th"}:
            self._close_cell()
        elif tag == "tr":
            self._close_row()

    def handle_data(self, data: str) -> None:
        if self._cell is not None and self._report_depth is not None:
            self._cell.text.append(data)

    def _close_cell(self) -> None:
        if self._cell is not None and self._row is not None:
            self._row.cells.append(self._cell)
        self._cell = None

    def _close_row(self) -> None:
        self._close_cell()
        if self._row is not None and self._row.cells:
            self.rows.append(self._row)
        self._row = None


@dataclass(frozen=True, slots=True)
class _Columns:
    name: int
    total_lines: int | None
    code_lines: int | None
    metrics: dict[MetricKind, int]
    width: int


def _resolve_columns(heading: _Row) -> _Columns:
    name: int | None = None
    total_lines: int | None = None
    code_lines: int | None = None
    metrics: dict[MetricKind, int] = {}

    for idx, cell in enumerate(heading.cells):
        title = cell.value.lower()
        if title == _NAME_HEADING:
            name = idx
        elif title == _TOTAL_LINES_HEADING:
            total_lines = idx
        elif title == _CODE_LINES_HEADING:
            code_lines = idx
        else:
            kind = MetricKind.from_heading(cell.value)
            if kind is not None:
                metrics[kind] = idx

    if name is None:
        msg = "report table has no 'Name' column"
        raise ParseError(msg)
    return _Columns(
        name=name,
        total_lines=total_lines,
        code_lines=code_lines,
        metrics=metrics,
        width=len(heading.cells),
    )


def parse_percentage(text: str) -> float:
    """Parse 'NN%' or 'NN.NN%' into a float in [0, 100].

    The whole cell text must be the percentage; surrounding text is rejected.
    Out-of-range values raise :class:`ParseError` instead of being clamped.
    """
    m = _PERCENT_RE.fullmatch((text or "").strip())
    if not m:
        msg = f"unparseable coverage ratio: {text!r}"
        raise ParseError(msg)
    value = float(m.group("sign") + m.group("value"))
    if value < 0 or value > float(FULL_COVERAGE):
        msg = f"coverage ratio out of range (0..{FULL_COVERAGE}): {text!r}"
        raise ParseError(msg)
    return value


def _parse_count(text: str, column: str) -> int:
    value = text.replace(",", "").strip()
    if not _COUNT_RE.match(value):
        msg = f"invalid {column} value: {text!r}"
        raise ParseError(msg)
    return int(value)


def _count_at(row: _Row, idx: int | None, column: str) -> int | None:
    if idx is None:
        return None
    return _parse_count(row.cells[idx].value, column)


def _build_result(row: _Row, columns: _Columns, *, line: int) -> CoverageResult:
    if len(row.cells) < columns.width:
        msg = f"report row {line} has {len(row.cells)} cells, expected {columns.width}"
        raise ParseError(msg)

    name_cell = row.cells[columns.name]
    name = name_cell.value
    if not name:
        msg = f"report row {line} has an empty name"
        raise ParseError(msg)

    ratios: dict[MetricKind, float] = {}
    for kind, idx in columns.metrics.items():
        try:
            ratios[kind] = parse_percentage(row.cells[idx].value)
        except ParseError as exc:
            msg = f"{name}: {kind.display_name.lower()}: {exc}"
            raise ParseError(msg) from exc

    total_lines = _count_at(row, columns.total_lines, "total lines")
    code_lines = _count_at(row, columns.code_lines, "lines of code")

    return CoverageResult(
        name=name,
        ratios=ratios,
        total_lines=total_lines,
        code_lines=code_lines,
        source_url=name_cell.href,
    )


def parse_html(text: str, *, source: str = "<report>") -> CoverageResult:
    """Parse the text of an rcov summary page.

    Rules
    -----
    - The ``TOTAL`` row becomes the top-level result; it must appear exactly once.
    - Every other body row becomes a child result in ``files``.
    - A metric column missing from the heading leaves that metric unset.
    - Duplicate file names are rejected.
    """
    collector = _ReportTableCollector()
    collector.feed(text)
    collector.close()

    if not collector.found:
        msg = f"no report table found in {source}"
        raise ParseError(msg)

    headings = [row for row in collector.rows if row.is_heading]
    body = [row for row in collector.rows if not row.is_heading]
    if not headings:
        msg = f"report table in {source} has no heading row"
        raise ParseError(msg)
    columns = _resolve_columns(headings[0])

    summary: CoverageResult | None = None
    files: list[CoverageResult] = []
    seen: set[str] = set()
    for line, row in enumerate(body, start=1):
        unit = _build_result(row, columns, line=line)
        if unit.name.upper() == SUMMARY_ROW:
            if summary is not None:
                msg = f"duplicate {SUMMARY_ROW} row in {source}"
                raise ParseError(msg)
            summary = unit
            continue
        if unit.name in seen:
            msg = f"duplicate file entry {unit.name!r} in {source}"
            raise ParseError(msg)
        seen.add(unit.name)
        files.append(unit)

    if summary is None:
        msg = f"no {SUMMARY_ROW} summary row in {source}"
        raise ParseError(msg)

    logger.debug("parsed %d file rows from %s", len(files), source)
    return CoverageResult(
        name=summary.name,
        ratios=summary.ratios,
        total_lines=summary.total_lines,
        code_lines=summary.code_lines,
        source_url=summary.source_url,
        files=tuple(files),
    )


def parse_report(path: Path) -> CoverageResult:
    """Read and parse the rcov summary page at *path*."""
    if not path.exists():
        msg = f"coverage report not found: {path}"
        raise ReportNotFoundError(msg)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"coverage report is not valid UTF-8: {path}"
        raise ParseError(msg) from exc
    except OSError as exc:
        msg = f"failed to read coverage report {path}: {exc}"
        raise ParseError(msg) from exc
    return parse_html(text, source=str(path))


__all__ = [
    "SUMMARY_ROW",
    "parse_html",
    "parse_percentage",
    "parse_report",
]
