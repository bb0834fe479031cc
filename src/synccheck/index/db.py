"""In-memory snapshot keyed by chunk, with collision detection on insert."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from synccheck.index.chunking import DEFAULT_CHUNK_DEPTH, ChunkError, validate_depth
from synccheck.index.diff import diff_dbs
from synccheck.index.discovery import WalkerConfig, walk
from synccheck.index.models import DbDiffs, Entry


class DuplicateChunkError(ChunkError):
    """Raised when an inserted entry's chunk is already held by another entry."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Duplicate chunk for {path}")
        self.path = path


class Db:
    """Snapshot of one directory tree: chunk depth plus entries keyed by chunk."""

    __slots__ = ("_depth", "_entries")

    def __init__(self, depth: int = DEFAULT_CHUNK_DEPTH) -> None:
        self._depth = validate_depth(depth)
        self._entries: dict[str, Entry] = {}

    @classmethod
    def build(cls, root: str | Path, config: WalkerConfig | None = None) -> Db:
        """Walk root and insert every entry, failing on the first duplicate chunk."""
        settings = config or WalkerConfig()
        db = cls(depth=settings.depth)
        for entry in walk(root, settings):
            db.insert(entry)
        return db

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def entries(self) -> Mapping[str, Entry]:
        """Read-only view of entries in insertion order."""
        return MappingProxyType(self._entries)

    def insert(self, entry: Entry) -> None:
        """Add entry under its chunk key; an occupied key is never overwritten."""
        key = entry.key
        if key in self._entries:
            raise DuplicateChunkError(entry.relative_path)
        self._entries[key] = entry

    def get(self, key: str) -> Entry | None:
        return self._entries.get(key)

    def diffs_from(self, reference: Db, include_added: bool = False) -> DbDiffs:
        """Compare this snapshot, as current, against a reference snapshot."""
        return diff_dbs(current=self, reference=reference, include_added=include_added)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Db):
            return NotImplemented
        return self._depth == other._depth and self._entries == other._entries

    def __repr__(self) -> str:
        return f"Db(depth={self._depth}, entries={len(self._entries)})"
