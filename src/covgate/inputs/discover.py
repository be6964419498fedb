from __future__ import annotations

from pathlib import Path

from covgate import logger
from covgate.errors import ReportNotFoundError

DEFAULT_REPORT_NAME = "index.html"


def find_reports(root: Path, name: str = DEFAULT_REPORT_NAME) -> tuple[Path, ...]:
    """Return files under *root* whose name matches *name* case-insensitively.

    Shallower paths come first, ties are broken lexicographically, so the
    first candidate is stable across runs.
    """
    if not root.is_dir():
        return ()
    wanted = name.lower()
    found = [p for p in root.rglob("*") if p.name.lower() == wanted and p.is_file()]
    return tuple(sorted(found, key=lambda p: (len(p.relative_to(root).parts), p.as_posix())))


def resolve_report_path(
    path: Path | None,
    *,
    cwd: Path,
    name: str = DEFAULT_REPORT_NAME,
) -> Path:
    """Resolve the report to parse.

    Rules
    -----
    - An explicit file is used as-is (it must exist).
    - An explicit directory is searched; the first candidate wins.
    - Otherwise `cwd` is searched.
    """
    if path is not None and not path.is_absolute():
        path = cwd / path

    if path is not None and path.is_file():
        return path.resolve()
    if path is not None and not path.exists():
        msg = f"coverage report not found: {path}"
        raise ReportNotFoundError(msg)

    root = path if path is not None else cwd
    candidates = find_reports(root, name)
    if not candidates:
        msg = f"no {name} report found under {root}"
        raise ReportNotFoundError(msg)
    if len(candidates) > 1:
        logger.info("found %d candidate reports, using %s", len(candidates), candidates[0])
    return candidates[0].resolve()


__all__ = ["DEFAULT_REPORT_NAME", "find_reports", "resolve_report_path"]
