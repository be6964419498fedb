from __future__ import annotations

import json
from functools import cache
from importlib import resources
from typing import TYPE_CHECKING

from jsonschema import validate

from covgate import __version__

if TYPE_CHECKING:
    from covgate.model.result import CoverageResult
    from covgate.model.targets import MetricTarget
    from covgate.pipeline import GateRecord

_SCHEMA_FILES: dict[str, str] = {
    "v1": "schema.json",
}


@cache
def get_schema(version: str = "v1") -> dict[str, object]:
    """Load and cache the JSON schema for the published gate record."""
    try:
        filename = _SCHEMA_FILES[version]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema version: {version!r}. Available versions: {choices}"
        raise ValueError(msg) from exc

    text = resources.files("covgate.data").joinpath(filename).read_text(encoding="utf-8")
    return json.loads(text)


def _result_payload(result: CoverageResult, *, with_files: bool) -> dict[str, object]:
    out: dict[str, object] = {
        "name": result.name,
        "ratios": {kind.value: result.ratios[kind] for kind in result.metrics},
    }
    if result.total_lines is not None:
        out["total_lines"] = result.total_lines
    if result.code_lines is not None:
        out["code_lines"] = result.code_lines
    if result.source_url is not None:
        out["source_url"] = result.source_url
    if with_files:
        out["files"] = [_result_payload(f, with_files=False) for f in result.files]
    return out


def _target_payload(target: MetricTarget) -> dict[str, object]:
    out: dict[str, object] = {"metric": target.metric.value, "unstable": target.unstable}
    if target.healthy_min is not None:
        out["healthy_min"] = target.healthy_min
    if target.healthy_max is not None:
        out["healthy_max"] = target.healthy_max
    return out


def format_json(record: GateRecord) -> str:
    """Render a gate record as schema-validated JSON."""
    outcome = record.outcome
    failing = outcome.failing_metric
    payload: dict[str, object] = {
        "schema": str(get_schema("v1")["$id"]),
        "tool": {"name": "covgate", "version": __version__},
        "report": str(record.report),
        "status": outcome.status.value,
        "failing_metric": None if failing is None else failing.value,
        "health": record.health,
        "targets": [_target_payload(t) for t in record.targets],
        "summary": _result_payload(record.result, with_files=True),
    }

    validate(payload, get_schema("v1"))
    return json.dumps(payload, indent=2, sort_keys=True)


__all__ = ["format_json", "get_schema"]
