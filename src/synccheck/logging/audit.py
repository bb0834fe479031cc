"""Structured JSONL audit log utilities."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

_PATH_KEYS = {"path", "output_file", "from_path", "to_path", "config", "audit_log"}
_INT_KEYS = {
    "depth",
    "entry_count",
    "skipped_count",
    "missing_count",
    "mismatched_size_count",
    "added_count",
}
_BOOL_KEYS = {"verbose", "show_added", "check", "out_of_sync"}


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """Sanitized record of a single command run."""

    timestamp: str
    command: str
    ok: bool
    error_code: str | None
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(arguments: dict[str, object]) -> dict[str, object]:
    """Reduce command arguments and counters to log-safe values.

    Paths, counters and flags are kept verbatim. Lists such as excluded names
    are recorded by length only.
    """
    sanitized: dict[str, object] = {}
    for key in sorted(arguments.keys()):
        value = arguments[key]
        if key in _PATH_KEYS and (isinstance(value, str) or value is None):
            sanitized[key] = value
            continue
        if key in _PATH_KEYS and isinstance(value, Path):
            sanitized[key] = str(value)
            continue
        if key in _INT_KEYS and isinstance(value, int) and not isinstance(value, bool):
            sanitized[key] = value
            continue
        if key in _BOOL_KEYS and isinstance(value, bool):
            sanitized[key] = value
            continue
        if isinstance(value, (list, tuple)):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, dict):
            sanitized[f"{key}_type"] = "dict"
            sanitized[f"{key}_keys"] = sorted(str(k) for k in value.keys())
            continue
        if isinstance(value, (int, float, bool)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, str):
            sanitized[f"{key}_present"] = True
            sanitized[f"{key}_length"] = len(value)
            continue
        sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlAuditLogger:
    """Append-only JSONL log with one event per synccheck command run."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: AuditEvent) -> None:
        """Write event as a single sorted-key JSON line."""
        line = json.dumps(asdict(event), sort_keys=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")
