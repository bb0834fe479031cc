"""Lazy directory walking that turns regular files into snapshot entries."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from synccheck.index.chunking import (
    DEFAULT_CHUNK_DEPTH,
    NoFileNameError,
    NoParentError,
    build_chunk,
    validate_depth,
)
from synccheck.index.models import Entry, SkippedPath

SKIP_NO_PARENT = "no_parent"
SKIP_NO_FILE_NAME = "no_file_name"
SKIP_STAT_FAILED = "stat_failed"
SKIP_UNREADABLE_DIRECTORY = "unreadable_directory"


@dataclass(slots=True, frozen=True)
class WalkerConfig:
    """Walk settings: exact base names to exclude and chunk depth."""

    exclude: tuple[str, ...] = ()
    depth: int = DEFAULT_CHUNK_DEPTH

    def __post_init__(self) -> None:
        validate_depth(self.depth)


def walk(root: str | Path, config: WalkerConfig | None = None) -> Iterator[Entry]:
    """Yield an Entry for every indexable regular file under root.

    Files whose metadata or chunk cannot be read are dropped. Use scan() to
    observe them.
    """
    for item in scan(root, config):
        if isinstance(item, Entry):
            yield item


def scan(root: str | Path, config: WalkerConfig | None = None) -> Iterator[Entry | SkippedPath]:
    """Yield entries and tagged skips in deterministic traversal order.

    Directories are listed in sorted name order, files of a directory are
    yielded before its subdirectories are entered, and symlinks below root are
    neither followed nor yielded. A root that is itself a symlink is followed.
    Entries keep the path as observed from root, while chunks are derived from
    the absolute path so a relative root still has named parents.
    """
    settings = config or WalkerConfig()
    excluded = frozenset(settings.exclude)
    root_path = Path(root)

    if root_path.is_file():
        if root_path.name not in excluded:
            yield _build_entry(root_path, settings.depth)
        return

    stack: list[Path] = [root_path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError:
            yield SkippedPath(path=str(current), reason=SKIP_UNREADABLE_DIRECTORY)
            continue
        subdirs: list[Path] = []
        for dir_entry in ordered_entries:
            full_path = current / dir_entry.name
            if dir_entry.is_dir(follow_symlinks=False):
                subdirs.append(full_path)
                continue
            if not dir_entry.is_file(follow_symlinks=False):
                continue
            if dir_entry.name in excluded:
                continue
            yield _build_entry(full_path, settings.depth)
        stack.extend(reversed(subdirs))


def _build_entry(full_path: Path, depth: int) -> Entry | SkippedPath:
    observed = str(full_path)
    try:
        size = full_path.stat().st_size
    except OSError:
        return SkippedPath(path=observed, reason=SKIP_STAT_FAILED)
    try:
        chunk = build_chunk(os.path.abspath(full_path), depth)
    except NoParentError:
        return SkippedPath(path=observed, reason=SKIP_NO_PARENT)
    except NoFileNameError:
        return SkippedPath(path=observed, reason=SKIP_NO_FILE_NAME)
    return Entry(relative_path=observed, chunk=chunk, size=size)
