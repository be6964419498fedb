"""Centralised exception hierarchy for covgate."""

from __future__ import annotations


class CovgateError(Exception):
    """Base class for all custom covgate exceptions."""


class ParseError(CovgateError):
    """Coverage report is missing, unreadable, or does not match the report grammar."""


class ReportNotFoundError(ParseError):
    """Coverage report could not be located on disk."""


class ConfigError(CovgateError, ValueError):
    """Configuration is invalid (unknown metric, out-of-range threshold, unknown key)."""


class EvaluationMismatch(CovgateError):  # noqa: N818
    """A configured target references a metric the report never computed."""

    def __init__(self, metric: object) -> None:
        label = getattr(metric, "name", metric)
        super().__init__(f"target metric {label} is not present in the report")
        self.metric = metric


__all__ = [
    "ConfigError",
    "CovgateError",
    "EvaluationMismatch",
    "ParseError",
    "ReportNotFoundError",
]
