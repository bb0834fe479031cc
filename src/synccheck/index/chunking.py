"""Root-independent chunk keys derived from trailing path segments."""

from __future__ import annotations

from pathlib import PurePath

DEFAULT_CHUNK_DEPTH = 2
MAX_CHUNK_DEPTH = 64

_UNNAMEABLE = ("", ".", "..")


class ChunkError(Exception):
    """Base class for chunk derivation and chunk insertion failures."""


class NoParentError(ChunkError):
    """Raised when a needed parent directory has no nameable component."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No nameable parent for {path}")
        self.path = path


class NoFileNameError(ChunkError):
    """Raised when the final path component is not a file name."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No file name in {path}")
        self.path = path


def validate_depth(depth: object) -> int:
    """Return depth unchanged when it is a usable chunk depth."""
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise ValueError("Chunk depth must be an integer.")
    if depth < 0:
        raise ValueError("Chunk depth must be >= 0.")
    if depth > MAX_CHUNK_DEPTH:
        raise ValueError(f"Chunk depth must be <= {MAX_CHUNK_DEPTH}.")
    return depth


def build_chunk(path: str | PurePath, depth: int = DEFAULT_CHUNK_DEPTH) -> tuple[str, ...]:
    """Build the chunk for a file from up to `depth` parent names plus its base name.

    Ancestors are consumed innermost first and the result is ordered outermost
    to innermost. Walking stops early once an ancestor has no further parent,
    but a parent that exists without a usable name (the filesystem root, `.`
    or `..`) fails with NoParentError instead of yielding a shorter chunk.
    """
    pure = PurePath(path)
    names: list[str] = []
    current = pure
    for _ in range(depth):
        parent = current.parent
        if parent == current:
            break
        if parent.name in _UNNAMEABLE:
            raise NoParentError(str(path))
        names.append(parent.name)
        current = parent
    file_name = pure.name
    if file_name in _UNNAMEABLE:
        raise NoFileNameError(str(path))
    names.reverse()
    names.append(file_name)
    return tuple(names)


def chunk_key(chunk: tuple[str, ...]) -> str:
    """Join chunk segments into the platform-independent map key."""
    return "/".join(chunk)
