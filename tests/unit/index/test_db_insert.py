from __future__ import annotations

from pathlib import Path

import pytest

from synccheck.index import ChunkError, Db, DuplicateChunkError, Entry, WalkerConfig


def _entry(path: str, chunk: tuple[str, ...], size: int) -> Entry:
    return Entry(relative_path=path, chunk=chunk, size=size)


def test_insert_keys_entries_by_chunk() -> None:
    db = Db(depth=2)
    entry = _entry("/srv/a/b/f1.txt", ("a", "b", "f1.txt"), 10)

    db.insert(entry)

    assert len(db) == 1
    assert db.get("a/b/f1.txt") == entry
    assert "a/b/f1.txt" in db
    assert list(db) == [entry]


def test_duplicate_chunk_is_rejected_and_first_entry_kept() -> None:
    db = Db(depth=2)
    first = _entry("/one/a/b/f.txt", ("a", "b", "f.txt"), 1)
    second = _entry("/two/a/b/f.txt", ("a", "b", "f.txt"), 2)
    db.insert(first)

    with pytest.raises(DuplicateChunkError) as excinfo:
        db.insert(second)

    assert excinfo.value.path == "/two/a/b/f.txt"
    assert isinstance(excinfo.value, ChunkError)
    assert db.get("a/b/f.txt") == first
    assert len(db) == 1


def test_entries_view_is_read_only() -> None:
    db = Db()
    db.insert(_entry("/r/a/b/f.txt", ("a", "b", "f.txt"), 1))

    with pytest.raises(TypeError):
        db.entries["x"] = _entry("/r/x", ("x",), 1)  # type: ignore[index]


def test_default_depth_is_two_and_validated() -> None:
    assert Db().depth == 2
    with pytest.raises(ValueError):
        Db(depth=-1)


def test_equality_compares_depth_and_entries() -> None:
    entry = _entry("/r/a/b/f.txt", ("a", "b", "f.txt"), 1)
    left = Db(depth=2)
    right = Db(depth=2)
    left.insert(entry)
    right.insert(entry)

    assert left == right
    assert left != Db(depth=3)


def test_build_fails_when_two_files_share_a_chunk(tmp_path: Path) -> None:
    (tmp_path / "x" / "photos").mkdir(parents=True)
    (tmp_path / "y" / "photos").mkdir(parents=True)
    (tmp_path / "x" / "photos" / "a.jpg").write_bytes(b"1")
    (tmp_path / "y" / "photos" / "a.jpg").write_bytes(b"22")

    with pytest.raises(DuplicateChunkError) as excinfo:
        Db.build(tmp_path, WalkerConfig(depth=1))

    assert excinfo.value.path == str(tmp_path / "y" / "photos" / "a.jpg")


def test_build_succeeds_when_depth_disambiguates(tmp_path: Path) -> None:
    (tmp_path / "x" / "photos").mkdir(parents=True)
    (tmp_path / "y" / "photos").mkdir(parents=True)
    (tmp_path / "x" / "photos" / "a.jpg").write_bytes(b"1")
    (tmp_path / "y" / "photos" / "a.jpg").write_bytes(b"22")

    db = Db.build(tmp_path, WalkerConfig(depth=2))

    assert db.get("x/photos/a.jpg") is not None
    assert db.get("y/photos/a.jpg") is not None
