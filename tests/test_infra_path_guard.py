"""Tests for storage path guardrails."""

import os
from pathlib import Path

import pytest

from filesmanager.domain.errors import PathEscapeError
from filesmanager.infrastructure.storage.path_guard import (
    PathKind,
    is_within,
    normalize_root,
    relative_to_root,
    resolve_path,
)


@pytest.fixture
def root(tmp_path):
    return tmp_path / "root"


def test_resolve_file_inside_root(root):
    resolved = resolve_path(root, "a/b/report.txt", PathKind.FILE)
    assert resolved == root / "a" / "b" / "report.txt"
    assert resolved.is_absolute()


def test_resolve_collapses_dot_segments(root):
    resolved = resolve_path(root, "a/./b/../c//report.txt", PathKind.FILE)
    assert resolved == root / "a" / "c" / "report.txt"


def test_resolution_does_not_touch_filesystem(root):
    resolve_path(root, "deep/nested/file.bin", PathKind.FILE)
    assert not root.exists()


@pytest.mark.parametrize(
    "relative",
    ["../outside.txt", "a/../../outside.txt", "a/b/../../../../etc/passwd", "../root-evil/x.txt"],
)
@pytest.mark.parametrize("kind", [PathKind.FILE, PathKind.DIRECTORY])
def test_traversal_is_rejected(root, relative, kind):
    with pytest.raises(PathEscapeError):
        resolve_path(root, relative, kind)


def test_escape_error_is_a_value_error(root):
    with pytest.raises(ValueError):
        resolve_path(root, "..", PathKind.DIRECTORY)


def test_root_is_a_valid_directory_but_not_a_file(root):
    assert resolve_path(root, "", PathKind.DIRECTORY) == root
    assert resolve_path(root, ".", PathKind.DIRECTORY) == root
    assert resolve_path(root, "a/..", PathKind.DIRECTORY) == root
    with pytest.raises(PathEscapeError):
        resolve_path(root, "", PathKind.FILE)
    with pytest.raises(PathEscapeError):
        resolve_path(root, "a/..", PathKind.FILE)


def test_file_directly_under_root_is_allowed(root):
    assert resolve_path(root, "notes.txt", PathKind.FILE) == root / "notes.txt"


@pytest.mark.skipif(os.name == "nt", reason="posix absolute paths")
def test_absolute_paths_must_point_inside_root(root):
    with pytest.raises(PathEscapeError):
        resolve_path(root, "/etc/passwd", PathKind.FILE)
    inside = str(root / "a" / "b.txt")
    assert resolve_path(root, inside, PathKind.FILE) == root / "a" / "b.txt"


def test_is_within_does_not_match_sibling_prefix(tmp_path):
    assert is_within(tmp_path / "root", tmp_path / "root" / "x")
    assert is_within(tmp_path / "root", tmp_path / "root")
    assert not is_within(tmp_path / "root", tmp_path / "root-evil")


def test_normalize_root_requires_a_value():
    with pytest.raises(ValueError) as info:
        normalize_root("   ")
    assert not isinstance(info.value, PathEscapeError)


def test_normalize_root_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert normalize_root("~/store/../files") == Path(os.path.abspath(tmp_path / "files"))


def test_relative_to_root_uses_forward_slashes(root):
    assert relative_to_root(root, root / "2025" / "Janvier") == "2025/Janvier"
