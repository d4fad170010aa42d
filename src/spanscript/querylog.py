"""Statement log: one JSON line per executed or rejected statement.

Entries go to ``~/.spanscript/logs/<project>/<YYYY-MM-DD>.jsonl`` where
<project> is the working directory turned into a slug. Day files past the
retention window are pruned when the CLI starts.
"""

from __future__ import annotations

import contextlib
import json
import os
from dataclasses import asdict, dataclass, field
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

DEFAULT_RETENTION_DAYS = 30
_LOG_ROOT = Path.home() / ".spanscript" / "logs"
_DAY_FORMAT = "%Y-%m-%d"


@dataclass
class LogEntry:
    sql: str
    kind: str
    db: str | None = None
    row_count: int | None = None
    duration_ms: float | None = None
    error: str | None = None
    blocked: bool = False
    ts: str = field(default_factory=lambda: datetime.now(UTC).isoformat())


def _project_slug() -> str:
    """Working directory as a single path component: /a/b -> a-b."""
    return os.getcwd().replace("/", "-").lstrip("-")


def _project_dir() -> Path:
    return _LOG_ROOT / _project_slug()


def _day_of(log_file: Path) -> date | None:
    try:
        return datetime.strptime(log_file.stem, _DAY_FORMAT).date()
    except ValueError:
        return None


def log_query(
    *,
    sql: str,
    kind: str,
    db: str | None = None,
    row_count: int | None = None,
    duration_ms: float | None = None,
    error: str | None = None,
    blocked: bool = False,
) -> None:
    entry = LogEntry(
        sql=sql,
        kind=kind,
        db=db,
        row_count=row_count,
        duration_ms=duration_ms,
        error=error,
        blocked=blocked,
    )
    target = _project_dir() / f"{datetime.now(UTC).strftime(_DAY_FORMAT)}.jsonl"
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("a") as f:
        f.write(json.dumps(asdict(entry), default=str) + "\n")


def cleanup_old_logs(*, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
    """Delete this project's day files older than ``retention_days``; return how many."""
    project_dir = _project_dir()
    if not project_dir.is_dir():
        return 0

    oldest_kept = datetime.now(UTC).date() - timedelta(days=retention_days)
    expired = [
        log_file
        for log_file in project_dir.glob("*.jsonl")
        if (day := _day_of(log_file)) is not None and day < oldest_kept
    ]
    for log_file in expired:
        log_file.unlink()

    # Only succeeds once the directory is empty.
    with contextlib.suppress(OSError):
        project_dir.rmdir()
    return len(expired)
