import os
from pathlib import Path

import pytest

from bucket_mirror.errors import DirectoryError, RootError, UnsafeKeyError
from bucket_mirror.paths import (
    ensure_parent_dir,
    ensure_root,
    is_pseudo_directory,
    map_path,
    safe_path,
)


class TestMapPath:
    def test_preserves_segments(self):
        assert map_path("root", "b/c/d.txt") == os.path.join("root", "b", "c", "d.txt")

    def test_flat_key(self):
        assert map_path("/data/mirror", "a.txt") == os.path.join("/data/mirror", "a.txt")


class TestPseudoDirectory:
    @pytest.mark.parametrize("key", ["", "d/", "a/b/"])
    def test_markers(self, key):
        assert is_pseudo_directory(key)

    @pytest.mark.parametrize("key", ["a.txt", "d/e", "/x"])
    def test_regular_keys(self, key):
        assert not is_pseudo_directory(key)


class TestSafePath:
    def test_nested_key_allowed(self, tmp_path: Path):
        assert safe_path(str(tmp_path), "a/b.txt") == str(tmp_path / "a" / "b.txt")

    @pytest.mark.parametrize("key", ["../x", "a/../../x", "..", "."])
    def test_escaping_keys_rejected(self, tmp_path: Path, key):
        with pytest.raises(UnsafeKeyError):
            safe_path(str(tmp_path), key)

    def test_inner_dotdot_staying_inside_is_allowed(self, tmp_path: Path):
        path = safe_path(str(tmp_path), "a/../b.txt")
        assert os.path.abspath(path) == str(tmp_path / "b.txt")


class TestDirectories:
    def test_parent_chain_created(self, tmp_path: Path):
        target = tmp_path / "x" / "y" / "z.txt"
        ensure_parent_dir(str(target))
        assert (tmp_path / "x" / "y").is_dir()

    def test_existing_parent_is_fine(self, tmp_path: Path):
        (tmp_path / "x").mkdir()
        ensure_parent_dir(str(tmp_path / "x" / "z.txt"))
        ensure_parent_dir(str(tmp_path / "x" / "z.txt"))

    def test_parent_blocked_by_file(self, tmp_path: Path):
        (tmp_path / "x").write_bytes(b"")
        with pytest.raises(DirectoryError):
            ensure_parent_dir(str(tmp_path / "x" / "z.txt"))

    def test_null_byte_in_parent(self, tmp_path: Path):
        with pytest.raises(DirectoryError):
            ensure_parent_dir(str(tmp_path / "a\x00b" / "z.txt"))

    def test_null_byte_in_root(self, tmp_path: Path):
        with pytest.raises(RootError):
            ensure_root(str(tmp_path / "r\x00"))

    def test_root_created_and_idempotent(self, tmp_path: Path):
        root = tmp_path / "r"
        ensure_root(str(root))
        ensure_root(str(root))
        assert root.is_dir()

    def test_root_blocked_by_file(self, tmp_path: Path):
        (tmp_path / "r").write_bytes(b"")
        with pytest.raises(RootError):
            ensure_root(str(tmp_path / "r"))
