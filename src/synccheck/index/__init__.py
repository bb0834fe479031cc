"""Snapshot indexing and diffing package."""

from .chunking import (
    DEFAULT_CHUNK_DEPTH,
    MAX_CHUNK_DEPTH,
    ChunkError,
    NoFileNameError,
    NoParentError,
    build_chunk,
    chunk_key,
    validate_depth,
)
from .db import Db, DuplicateChunkError
from .diff import MismatchedChunksError, diff_dbs
from .discovery import WalkerConfig, scan, walk
from .models import DbDiffs, Entry, SkippedPath
from .storage import (
    SnapshotDecodeError,
    db_from_payload,
    db_to_payload,
    deserialize_db,
    read_db,
    serialize_db,
    write_db,
    write_db_stream,
)

__all__ = [
    "ChunkError",
    "DEFAULT_CHUNK_DEPTH",
    "Db",
    "DbDiffs",
    "DuplicateChunkError",
    "Entry",
    "MAX_CHUNK_DEPTH",
    "MismatchedChunksError",
    "NoFileNameError",
    "NoParentError",
    "SkippedPath",
    "SnapshotDecodeError",
    "WalkerConfig",
    "build_chunk",
    "chunk_key",
    "db_from_payload",
    "db_to_payload",
    "deserialize_db",
    "diff_dbs",
    "read_db",
    "scan",
    "serialize_db",
    "validate_depth",
    "walk",
    "write_db",
    "write_db_stream",
]
