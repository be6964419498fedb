"""Configuration loading for ``covgate``.

Targets are read from ``covgate.toml`` (top-level keys) or from the
``[tool.covgate]`` table of ``pyproject.toml`` and validated eagerly.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from covgate import logger
from covgate.errors import ConfigError
from covgate.inputs.discover import DEFAULT_REPORT_NAME
from covgate.model.targets import DEFAULT_TARGETS, MetricTarget
from covgate.model.types import FULL_COVERAGE, MetricKind

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

CONFIG_FILENAME = "covgate.toml"
PYPROJECT_FILENAME = "pyproject.toml"


class TargetSettings(BaseModel):
    """One ``[[targets]]`` entry."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    metric: MetricKind
    unstable: float = Field(ge=0, le=FULL_COVERAGE)
    healthy_min: float | None = Field(default=None, ge=0, le=FULL_COVERAGE)
    healthy_max: float | None = Field(default=None, ge=0, le=FULL_COVERAGE)

    @field_validator("metric", mode="before")
    @classmethod
    def _metric_from_id(cls, value: object) -> MetricKind:
        if isinstance(value, MetricKind):
            return value
        return MetricKind.from_id(str(value))

    def to_target(self) -> MetricTarget:
        return MetricTarget(
            metric=self.metric,
            unstable=self.unstable,
            healthy_min=self.healthy_min,
            healthy_max=self.healthy_max,
        )


class GateSettings(BaseModel):
    """The whole ``covgate`` configuration table."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    report: Path | None = None
    report_name: str = DEFAULT_REPORT_NAME
    targets: list[TargetSettings] | None = None

    def resolved_targets(self) -> tuple[MetricTarget, ...]:
        """Return configured targets, or the defaults when none were given."""
        if self.targets is None:
            return DEFAULT_TARGETS
        return tuple(t.to_target() for t in self.targets)


def _format_validation_error(exc: ValidationError, source: str) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return f"invalid configuration in {source}: " + "; ".join(parts)


def settings_from_mapping(data: dict[str, Any], *, source: str = "<config>") -> GateSettings:
    """Validate a raw configuration mapping."""
    try:
        settings = GateSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error(exc, source)) from exc
    # cross-field checks (healthy_min <= healthy_max) live on MetricTarget
    settings.resolved_targets()
    return settings


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"failed to read configuration {path}: {exc}"
        raise ConfigError(msg) from exc


def _table_from(path: Path) -> dict[str, Any] | None:
    data = _read_toml(path)
    if path.name != PYPROJECT_FILENAME:
        return data
    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        msg = f"[tool] in {path} must be a table"
        raise ConfigError(msg)
    table = tool.get("covgate")
    if table is not None and not isinstance(table, dict):
        msg = f"[tool.covgate] in {path} must be a table"
        raise ConfigError(msg)
    return table


def load_config(path: Path | None = None, *, cwd: Path | None = None) -> GateSettings:
    """Load settings from *path*, or from ``covgate.toml``/``pyproject.toml`` in *cwd*."""
    base = cwd or Path.cwd()

    if path is not None:
        if not path.exists():
            msg = f"configuration file not found: {path}"
            raise ConfigError(msg)
        candidates = [path]
    else:
        candidates = [base / CONFIG_FILENAME, base / PYPROJECT_FILENAME]

    for candidate in candidates:
        if not candidate.exists():
            continue
        table = _table_from(candidate)
        if table is None:
            continue
        logger.debug("using configuration from %s", candidate)
        settings = settings_from_mapping(table, source=str(candidate))
        if settings.report is not None and not settings.report.is_absolute():
            settings = settings.model_copy(update={"report": candidate.parent / settings.report})
        return settings

    return GateSettings()


__all__ = [
    "CONFIG_FILENAME",
    "LOG_FORMAT",
    "GateSettings",
    "TargetSettings",
    "load_config",
    "settings_from_mapping",
]
