"""Reference-driven snapshot comparison."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from synccheck.index.models import DbDiffs, Entry

if TYPE_CHECKING:
    from synccheck.index.db import Db


@dataclass(slots=True, frozen=True)
class MismatchedChunksError(Exception):
    """Raised when two snapshots were built with different chunk depths."""

    current_depth: int
    reference_depth: int

    def __str__(self) -> str:
        return (
            f"Snapshots use different chunk depths: current={self.current_depth}, "
            f"reference={self.reference_depth}"
        )


def diff_dbs(current: Db, reference: Db, include_added: bool = False) -> DbDiffs:
    """Classify reference entries as missing from or size-mismatched in current.

    Only reference entries are scanned, so files that exist solely in current
    are never reported as missing or mismatched. With include_added, a second
    pass collects those current-only entries into `added`.
    """
    if current.depth != reference.depth:
        raise MismatchedChunksError(
            current_depth=current.depth,
            reference_depth=reference.depth,
        )

    current_entries = current.entries
    missing: list[Entry] = []
    mismatched_size: list[Entry] = []
    for key, entry in reference.entries.items():
        found = current_entries.get(key)
        if found is None:
            missing.append(entry)
            continue
        if found.size != entry.size:
            mismatched_size.append(entry)

    added: list[Entry] = []
    if include_added:
        reference_entries = reference.entries
        for key, entry in current_entries.items():
            if key not in reference_entries:
                added.append(entry)

    return DbDiffs(
        missing=tuple(missing),
        mismatched_size=tuple(mismatched_size),
        added=tuple(added),
    )
