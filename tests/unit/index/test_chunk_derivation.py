from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from synccheck.index import (
    NoFileNameError,
    NoParentError,
    build_chunk,
    chunk_key,
    validate_depth,
)


def test_depth_two_uses_two_parent_names_and_file_name() -> None:
    chunk = build_chunk(PurePosixPath("/root/thing/whatever/file.txt"), depth=2)

    assert chunk == ("thing", "whatever", "file.txt")
    assert chunk_key(chunk) == "thing/whatever/file.txt"


def test_chunk_is_independent_of_tree_root() -> None:
    first = build_chunk(PurePosixPath("/mnt/backup/photos/2024/a.jpg"), depth=2)
    second = build_chunk(PurePosixPath("/home/me/photos/2024/a.jpg"), depth=2)

    assert first == second


def test_depth_zero_uses_file_name_only() -> None:
    assert build_chunk(PurePosixPath("/a/b/c.txt"), depth=0) == ("c.txt",)


def test_depth_three_includes_three_parents() -> None:
    chunk = build_chunk(PurePosixPath("/x/a/b/c/f.bin"), depth=3)

    assert chunk == ("a", "b", "c", "f.bin")


def test_relative_path_with_enough_parents() -> None:
    assert build_chunk(PurePosixPath("a/b/f.txt"), depth=2) == ("a", "b", "f.txt")


def test_path_shallower_than_depth_below_root_fails_with_no_parent() -> None:
    with pytest.raises(NoParentError):
        build_chunk(PurePosixPath("/only/file.txt"), depth=2)


def test_file_directly_under_root_fails_with_no_parent() -> None:
    with pytest.raises(NoParentError):
        build_chunk(PurePosixPath("/file.txt"), depth=1)


def test_bare_relative_file_name_fails_with_no_parent() -> None:
    with pytest.raises(NoParentError):
        build_chunk(PurePosixPath("file.txt"), depth=1)


def test_parent_dot_dot_is_not_a_nameable_parent() -> None:
    with pytest.raises(NoParentError):
        build_chunk(PurePosixPath("a/../b/f.txt"), depth=3)


def test_root_path_has_no_file_name() -> None:
    with pytest.raises(NoFileNameError):
        build_chunk(PurePosixPath("/"), depth=2)


def test_dot_dot_is_not_a_file_name() -> None:
    with pytest.raises(NoFileNameError):
        build_chunk(PurePosixPath("a/b/.."), depth=0)


def test_errors_carry_the_offending_path() -> None:
    with pytest.raises(NoParentError) as excinfo:
        build_chunk(PurePosixPath("/only/file.txt"), depth=2)

    assert excinfo.value.path == "/only/file.txt"


@pytest.mark.parametrize("depth", [-1, 65, True, "2", 1.5])
def test_invalid_depth_is_rejected(depth: object) -> None:
    with pytest.raises(ValueError):
        validate_depth(depth)


def test_depth_bounds_are_accepted() -> None:
    assert validate_depth(0) == 0
    assert validate_depth(64) == 64
