"""JSON snapshot persistence for Db."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import BinaryIO, TextIO

from synccheck.index.chunking import chunk_key, validate_depth
from synccheck.index.db import Db
from synccheck.index.models import Entry


class SnapshotDecodeError(ValueError):
    """Raised when persisted snapshot bytes do not describe a valid Db."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def db_to_payload(db: Db) -> dict[str, object]:
    """Return the JSON-ready representation of a Db."""
    return {
        "depth": db.depth,
        "entries": {
            key: {
                "relative_path": entry.relative_path,
                "chunk": list(entry.chunk),
                "size": entry.size,
            }
            for key, entry in db.entries.items()
        },
    }


def db_from_payload(payload: object) -> Db:
    """Rebuild a Db from decoded JSON, rejecting anything out of shape."""
    if not isinstance(payload, dict):
        raise SnapshotDecodeError("Snapshot must be a JSON object.")
    if "depth" not in payload:
        raise SnapshotDecodeError("Snapshot field 'depth' is required.")
    try:
        depth = validate_depth(payload["depth"])
    except ValueError as error:
        raise SnapshotDecodeError(f"Snapshot field 'depth' is invalid: {error}") from error
    if "entries" not in payload:
        raise SnapshotDecodeError("Snapshot field 'entries' is required.")
    entries = payload["entries"]
    if not isinstance(entries, dict):
        raise SnapshotDecodeError("Snapshot field 'entries' must be an object.")

    db = Db(depth=depth)
    for key, raw in entries.items():
        entry = _entry_from_payload(key, raw)
        if len(entry.chunk) > depth + 1:
            raise SnapshotDecodeError(f"Entry '{key}' has a chunk deeper than depth {depth}.")
        if chunk_key(entry.chunk) != key:
            raise SnapshotDecodeError(f"Entry '{key}' does not match its chunk.")
        db.insert(entry)
    return db


def _entry_from_payload(key: str, raw: object) -> Entry:
    if not isinstance(raw, dict):
        raise SnapshotDecodeError(f"Entry '{key}' must be an object.")
    relative_path = raw.get("relative_path")
    chunk = raw.get("chunk")
    size = raw.get("size")
    if not isinstance(relative_path, str):
        raise SnapshotDecodeError(f"Entry '{key}' field 'relative_path' must be a string.")
    if not isinstance(chunk, list) or not chunk:
        raise SnapshotDecodeError(f"Entry '{key}' field 'chunk' must be a non-empty list.")
    if not all(isinstance(segment, str) and _is_segment(segment) for segment in chunk):
        raise SnapshotDecodeError(f"Entry '{key}' field 'chunk' must contain only names.")
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise SnapshotDecodeError(f"Entry '{key}' field 'size' must be a non-negative integer.")
    return Entry(relative_path=relative_path, chunk=tuple(chunk), size=size)


def _is_segment(segment: str) -> bool:
    return bool(segment) and "/" not in segment


def _reject_duplicate_keys(pairs: list[tuple[str, object]]) -> dict[str, object]:
    output: dict[str, object] = {}
    for key, value in pairs:
        if key in output:
            raise SnapshotDecodeError(f"Snapshot repeats key '{key}'.")
        output[key] = value
    return output


def serialize_db(db: Db) -> bytes:
    """Encode a Db as deterministic UTF-8 JSON."""
    text = json.dumps(db_to_payload(db), sort_keys=True)
    return (text + "\n").encode("utf-8")


def deserialize_db(data: bytes) -> Db:
    """Decode bytes produced by serialize_db."""
    try:
        payload = json.loads(data.decode("utf-8"), object_pairs_hook=_reject_duplicate_keys)
    except UnicodeDecodeError as error:
        raise SnapshotDecodeError("Snapshot is not valid UTF-8.") from error
    except json.JSONDecodeError as error:
        raise SnapshotDecodeError(f"Snapshot is not valid JSON: {error.msg}") from error
    return db_from_payload(payload)


def read_db(path: Path) -> Db:
    """Load a snapshot file; OS errors propagate unchanged."""
    return deserialize_db(path.read_bytes())


def write_db(db: Db, path: Path) -> None:
    """Write a snapshot file through a temporary sibling and replace."""
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("wb") as handle:
        handle.write(serialize_db(db))
    tmp.replace(path)


def write_db_stream(db: Db, stream: BinaryIO | TextIO) -> None:
    """Write a snapshot to an open stream such as stdout."""
    data = serialize_db(db)
    if isinstance(stream, io.TextIOBase):
        stream.write(data.decode("utf-8"))
    else:
        stream.write(data)
    stream.flush()
