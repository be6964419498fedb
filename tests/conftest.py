from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest
from click.testing import CliRunner

DEFAULT_COLUMNS: tuple[str, ...] = ("Name", "Total lines", "Lines of code", "Total coverage", "Code coverage")

_FIELDS: dict[str, str] = {
    "Total lines": "total_lines",
    "Lines of code": "code_lines",
    "Total coverage": "total_coverage",
    "Code coverage": "code_coverage",
}

UnitSpec = Mapping[str, object]


def _coverage_cell(value: object, css: str) -> str:
    # rcov nests a bar-chart table inside every coverage cell
    return (
        '<td><table cellpadding="0" cellspacing="0" align="right"><tr>'
        f'<td><tt class="{css}">{value}</tt>&nbsp;</td>'
        '<td><table class="percent_graph" cellpadding="0" cellspacing="0" width="100"><tr>'
        '<td class="covered" width="76"/><td class="uncovered" width="24"/>'
        "</tr></table></td>"
        "</tr></table></td>"
    )


def _row(name: str, unit: UnitSpec, columns: Sequence[str], css: str) -> str:
    cells: list[str] = []
    for column in columns:
        if column == "Name":
            href = unit.get("href")
            label = f'<a href="{href}">{name}</a>' if href else f"<tt>{name}</tt>"
            cells.append(f"<td>{label}</td>")
        elif column in {"Total coverage", "Code coverage"}:
            cells.append(_coverage_cell(unit.get(_FIELDS[column], ""), _FIELDS[column]))
        else:
            cells.append(f"<td class=\"{_FIELDS[column]}\"><tt>{unit.get(_FIELDS[column], '')}</tt></td>")
    return f'<tr class="{css}">{"".join(cells)}</tr>'


def build_rcov_html(
    summary: UnitSpec | None,
    files: Mapping[str, UnitSpec] | None = None,
    *,
    columns: Sequence[str] = DEFAULT_COLUMNS,
) -> str:
    heading = "".join(f'<td class="heading">{c}</td>' for c in columns)
    rows: list[str] = []
    if summary is not None:
        rows.append(_row("TOTAL", summary, columns, "light"))
    for idx, (name, unit) in enumerate((files or {}).items()):
        rows.append(_row(name, unit, columns, "dark" if idx % 2 == 0 else "light"))
    return (
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" '
        '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">'
        '<html xmlns="http://www.w3.org/1999/xhtml"><head><title>C0 code coverage information</title></head>'
        "<body><h3>C0 code coverage information</h3>"
        '<table class="report">'
        f"<thead><tr>{heading}</tr></thead>"
        f"<tbody>{''.join(rows)}</tbody>"
        "</table>"
        "<p>Generated using the rcov code coverage analysis tool for Ruby version 0.9.8.</p>"
        "</body></html>"
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def rcov_html() -> Callable[..., str]:
    return build_rcov_html


@pytest.fixture
def rcov_report_file(tmp_path: Path) -> Callable[..., Path]:
    def write(
        summary: UnitSpec | None,
        files: Mapping[str, UnitSpec] | None = None,
        *,
        columns: Sequence[str] = DEFAULT_COLUMNS,
        directory: str = "coverage",
        filename: str = "index.html",
    ) -> Path:
        report = tmp_path / directory / filename
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(build_rcov_html(summary, files, columns=columns), encoding="utf-8")
        return report

    return write


@pytest.fixture
def sample_report(rcov_report_file: Callable[..., Path]) -> Path:
    """Report with total 92.5% and code 78.0% coverage and two files."""
    return rcov_report_file(
        {"total_lines": 1273, "code_lines": 873, "total_coverage": "92.5%", "code_coverage": "78.0%"},
        {
            "lib/foo.rb": {
                "href": "lib-foo_rb.html",
                "total_lines": 200,
                "code_lines": 150,
                "total_coverage": "100.0%",
                "code_coverage": "100.0%",
            },
            "lib/bar.rb": {
                "href": "lib-bar_rb.html",
                "total_lines": 1073,
                "code_lines": 723,
                "total_coverage": "91%",
                "code_coverage": "73.45%",
            },
        },
    )
