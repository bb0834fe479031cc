"""Typed models for snapshot state."""

from __future__ import annotations

from dataclasses import dataclass

from synccheck.index.chunking import chunk_key


@dataclass(slots=True, frozen=True)
class Entry:
    """Represents one file observed during a walk."""

    relative_path: str
    chunk: tuple[str, ...]
    size: int

    @property
    def key(self) -> str:
        """Return the map key used for this entry inside a Db."""
        return chunk_key(self.chunk)


@dataclass(slots=True, frozen=True)
class SkippedPath:
    """A walked path that could not be turned into an Entry."""

    path: str
    reason: str


@dataclass(slots=True, frozen=True)
class DbDiffs:
    """Classification of reference entries against a current snapshot."""

    missing: tuple[Entry, ...]
    mismatched_size: tuple[Entry, ...]
    added: tuple[Entry, ...] = ()

    def out_of_sync(self) -> bool:
        """Return True when any reference entry is missing or changed size."""
        return bool(self.missing) or bool(self.mismatched_size)

    def missing_paths(self) -> list[str]:
        return [entry.relative_path for entry in self.missing]

    def mismatched_size_paths(self) -> list[str]:
        return [entry.relative_path for entry in self.mismatched_size]
