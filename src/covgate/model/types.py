"""Shared enumerations and constants used across covgate."""

from __future__ import annotations

from enum import StrEnum

from covgate.errors import ConfigError

FULL_COVERAGE: int = 100

_DISPLAY_NAMES: dict[str, str] = {
    "total_coverage": "Total coverage",
    "code_coverage": "Code coverage",
}


class MetricKind(StrEnum):
    """Metrics an rcov report can carry.

    The value is the stable identifier used in configuration files; the
    display name doubles as the column heading in the rcov summary table.
    """

    TOTAL_COVERAGE = "total_coverage"
    CODE_COVERAGE = "code_coverage"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self.value]

    @classmethod
    def from_id(cls, text: str) -> MetricKind:
        """Return the kind named by *text* (case-insensitive, ``-`` or ``_``)."""
        key = (text or "").strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError as exc:
            choices = ", ".join(kind.value for kind in cls)
            msg = f"unknown metric: {text!r}. Available metrics: {choices}"
            raise ConfigError(msg) from exc

    @classmethod
    def from_heading(cls, heading: str) -> MetricKind | None:
        """Return the kind whose report column is titled *heading*, if any."""
        wanted = " ".join(heading.split()).lower()
        for kind in cls:
            if kind.display_name.lower() == wanted:
                return kind
        return None


__all__ = [
    "FULL_COVERAGE",
    "MetricKind",
]
