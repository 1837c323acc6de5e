"""Tests for the filesystem operations engine."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from fileman.errors import ErrorKind
from fileman.filesystem import FileOperations, remove_tree
from fileman.protocols import FileOperationsEngine

# Permission checks are bypassed for the superuser.
skip_if_root = pytest.mark.skipif(
    hasattr(os, "geteuid") and os.geteuid() == 0,
    reason="permission bits are not enforced for root",
)


class TestFileOperationsProtocol:
    """Tests for protocol conformance."""

    def test_satisfies_protocol(self, ops: FileOperations) -> None:
        """Test FileOperations satisfies FileOperationsEngine structurally."""
        assert isinstance(ops, FileOperationsEngine)


class TestListDirectory:
    """Tests for list_directory."""

    def test_lists_files_and_directories(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test listing returns one entry per immediate child."""
        (tmp_path / "notes.txt").write_text("abc")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "nested.txt").write_text("not listed")

        result = ops.list_directory(tmp_path)

        assert result.success
        entries = {e.name: e for e in result.value}
        assert set(entries) == {"notes.txt", "sub"}
        assert entries["notes.txt"].is_directory is False
        assert entries["notes.txt"].size == 3
        assert entries["sub"].is_directory is True
        assert entries["sub"].size == 0

    def test_empty_directory(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test an empty directory yields an empty list, not an error."""
        empty = tmp_path / "empty"
        empty.mkdir()

        result = ops.list_directory(empty)

        assert result.success
        assert result.value == []

    def test_missing_directory(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test listing a missing directory fails NOT_FOUND."""
        result = ops.list_directory(tmp_path / "missing")

        assert not result.success
        assert result.error.kind is ErrorKind.NOT_FOUND
        assert result.error.path == tmp_path / "missing"
        assert result.error.context == "listing directory"

    def test_listing_a_file_is_io_failure(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test listing a regular file is classified as an I/O failure."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        result = ops.list_directory(target)

        assert result.error.kind is ErrorKind.IO_FAILURE

    def test_dangling_symlink_listed(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test a symlink to a missing target is listed rather than failing the listing."""
        (tmp_path / "a.txt").write_text("abc")
        (tmp_path / "dangling").symlink_to(tmp_path / "gone")

        result = ops.list_directory(tmp_path)

        assert result.success
        entries = {e.name: e for e in result.value}
        assert set(entries) == {"a.txt", "dangling"}
        assert entries["dangling"].is_directory is False

    def test_entry_vanishing_mid_listing_skipped(
        self, ops: FileOperations, tmp_path: Path
    ) -> None:
        """Test a child removed between enumeration and stat is left out."""
        (tmp_path / "a.txt").write_text("abc")
        (tmp_path / "b.txt").write_text("def")
        real_iterdir = Path.iterdir

        def iterdir_then_remove(self: Path):
            children = list(real_iterdir(self))
            (tmp_path / "b.txt").unlink()
            return iter(children)

        with patch.object(Path, "iterdir", iterdir_then_remove):
            result = ops.list_directory(tmp_path)

        assert result.success
        assert [e.name for e in result.value] == ["a.txt"]


class TestCreateFile:
    """Tests for create_file."""

    def test_create_with_content(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test creating a file writes its content."""
        target = tmp_path / "demo.txt"

        result = ops.create_file(target, "Hello world from FileManager!")

        assert result.success
        assert result.value == target
        assert target.read_text(encoding="utf-8") == "Hello world from FileManager!"

    @pytest.mark.parametrize("content", ["", None])
    def test_create_empty(self, ops: FileOperations, tmp_path: Path, content: str | None) -> None:
        """Test empty or missing content produces a zero-byte file."""
        target = tmp_path / "empty.txt"

        result = ops.create_file(target, content)

        assert result.success
        assert target.stat().st_size == 0

    def test_existing_file_not_overwritten(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test creating over an existing file fails and keeps its content."""
        target = tmp_path / "keep.txt"
        target.write_text("original")

        result = ops.create_file(target, "replacement")

        assert result.error.kind is ErrorKind.ALREADY_EXISTS
        assert target.read_text() == "original"

    def test_existing_directory(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test creating a file where a directory exists fails ALREADY_EXISTS."""
        (tmp_path / "dir").mkdir()

        result = ops.create_file(tmp_path / "dir")

        assert result.error.kind is ErrorKind.ALREADY_EXISTS

    def test_missing_parent(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test creating a file in a missing directory fails NOT_FOUND."""
        result = ops.create_file(tmp_path / "nope" / "file.txt", "x")

        assert result.error.kind is ErrorKind.NOT_FOUND

    def test_race_with_external_creation(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test a file appearing between check and write is never overwritten.

        The existence check and the write are not atomic; exclusive-create
        turns a lost race into ALREADY_EXISTS.
        """
        target = tmp_path / "race.txt"
        real_exists = Path.exists

        def exists_then_create(path: Path) -> bool:
            found = real_exists(path)
            if path == target and not found:
                target.write_text("written by someone else")
            return found

        with patch.object(Path, "exists", exists_then_create):
            result = ops.create_file(target, "mine")

        assert result.error.kind is ErrorKind.ALREADY_EXISTS
        assert target.read_text() == "written by someone else"


class TestCreateDirectory:
    """Tests for create_directory."""

    def test_create(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test creating a directory."""
        result = ops.create_directory(tmp_path / "SubFolder")

        assert result.success
        assert (tmp_path / "SubFolder").is_dir()

    def test_existing(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test creating an existing directory fails ALREADY_EXISTS."""
        (tmp_path / "SubFolder").mkdir()

        result = ops.create_directory(tmp_path / "SubFolder")

        assert result.error.kind is ErrorKind.ALREADY_EXISTS

    def test_no_implicit_parents(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test only one level is created; a missing parent fails NOT_FOUND."""
        result = ops.create_directory(tmp_path / "a" / "b")

        assert result.error.kind is ErrorKind.NOT_FOUND
        assert not (tmp_path / "a").exists()


class TestReadFile:
    """Tests for read_file."""

    def test_read_round_trip(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test reading returns exactly what was written, line endings included."""
        target = tmp_path / "lines.txt"
        content = "first\r\nsecond\nthird ✓"
        ops.create_file(target, content)

        result = ops.read_file(target)

        assert result.value == content

    def test_read_empty(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test reading a zero-byte file returns an empty string."""
        target = tmp_path / "empty.txt"
        ops.create_file(target, "")

        assert ops.read_file(target).value == ""

    def test_read_missing(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test reading a missing file fails NOT_FOUND."""
        result = ops.read_file(tmp_path / "missing.txt")

        assert result.error.kind is ErrorKind.NOT_FOUND
        assert result.error.message == "The file or directory could not be found."

    def test_read_invalid_utf8(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test undecodable content is classified UNEXPECTED."""
        target = tmp_path / "binary.bin"
        target.write_bytes(b"\xff\xfe\xfa")

        result = ops.read_file(target)

        assert result.error.kind is ErrorKind.UNEXPECTED


class TestUpdateFile:
    """Tests for update_file."""

    def test_update_replaces_content(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test update truncates then writes rather than appending."""
        target = tmp_path / "demo.txt"
        target.write_text("Hello world from FileManager! plus a long tail")

        result = ops.update_file(target, "Updated content successfully!")

        assert result.success
        assert target.read_text() == "Updated content successfully!"

    def test_update_missing(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test updating a missing file fails NOT_FOUND and creates nothing."""
        target = tmp_path / "missing.txt"

        result = ops.update_file(target, "content")

        assert result.error.kind is ErrorKind.NOT_FOUND
        assert not target.exists()

    @skip_if_root
    def test_update_read_only(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test updating a read-only file fails PERMISSION_DENIED."""
        target = tmp_path / "locked.txt"
        target.write_text("locked")
        target.chmod(0o444)
        try:
            result = ops.update_file(target, "changed")
        finally:
            target.chmod(0o644)

        assert result.error.kind is ErrorKind.PERMISSION_DENIED
        assert target.read_text() == "locked"

    def test_update_not_writable_per_access_check(
        self, ops: FileOperations, tmp_path: Path
    ) -> None:
        """Test the writability check is consulted before opening."""
        target = tmp_path / "demo.txt"
        target.write_text("keep")

        with patch("fileman.filesystem.os.access", return_value=False):
            result = ops.update_file(target, "changed")

        assert result.error.kind is ErrorKind.PERMISSION_DENIED
        assert target.read_text() == "keep"

    def test_update_closes_descriptor_when_open_fails(
        self, ops: FileOperations, tmp_path: Path
    ) -> None:
        """Test the raw descriptor is closed if wrapping it in a file object fails."""
        target = tmp_path / "demo.txt"
        target.write_text("keep")
        real_open = os.open
        opened: list[int] = []

        def tracking_open(*args, **kwargs) -> int:
            fd = real_open(*args, **kwargs)
            opened.append(fd)
            return fd

        with (
            patch("fileman.filesystem.os.open", side_effect=tracking_open),
            patch("fileman.filesystem.open", side_effect=OSError(5, "boom"), create=True),
        ):
            result = ops.update_file(target, "changed")

        assert result.error.kind is ErrorKind.IO_FAILURE
        assert len(opened) == 1
        with pytest.raises(OSError):
            os.fstat(opened[0])

    def test_update_after_external_delete(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test a file removed between check and write is not recreated."""
        target = tmp_path / "gone.txt"
        target.write_text("x")
        real_access = os.access

        def access_then_delete(path: os.PathLike[str], mode: int) -> bool:
            allowed = real_access(path, mode)
            target.unlink()
            return allowed

        with patch("fileman.filesystem.os.access", access_then_delete):
            result = ops.update_file(target, "new")

        assert result.error.kind is ErrorKind.NOT_FOUND
        assert not target.exists()


class TestRename:
    """Tests for rename."""

    def test_rename_file(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test renaming moves content to the new name."""
        old = tmp_path / "demo.txt"
        new = tmp_path / "renamed_demo.txt"
        old.write_text("content")

        result = ops.rename(old, new)

        assert result.value == new
        assert not old.exists()
        assert new.read_text() == "content"

    def test_rename_directory(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test renaming a directory keeps its children."""
        (tmp_path / "before").mkdir()
        (tmp_path / "before" / "child.txt").write_text("c")

        ops.rename(tmp_path / "before", tmp_path / "after")

        assert (tmp_path / "after" / "child.txt").read_text() == "c"

    def test_rename_missing(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test renaming a missing path fails NOT_FOUND."""
        result = ops.rename(tmp_path / "missing", tmp_path / "other")

        assert result.error.kind is ErrorKind.NOT_FOUND

    def test_rename_onto_existing(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test renaming onto an existing path fails and touches neither."""
        old = tmp_path / "old.txt"
        new = tmp_path / "new.txt"
        old.write_text("old content")
        new.write_text("new content")

        result = ops.rename(old, new)

        assert result.error.kind is ErrorKind.ALREADY_EXISTS
        assert result.error.path == new
        assert old.read_text() == "old content"
        assert new.read_text() == "new content"


class TestDelete:
    """Tests for delete."""

    def test_delete_file(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test deleting a single file."""
        target = tmp_path / "renamed_demo.txt"
        target.write_text("x")

        result = ops.delete(target)

        assert result.success
        assert not target.exists()

    def test_delete_nested_tree(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test deleting a directory removes every descendant."""
        tree = tmp_path / "tree"
        (tree / "a" / "b" / "c").mkdir(parents=True)
        (tree / "top.txt").write_text("1")
        (tree / "a" / "mid.txt").write_text("2")
        (tree / "a" / "b" / "c" / "deep.txt").write_text("3")
        (tree / "empty").mkdir()

        result = ops.delete(tree)

        assert result.success
        assert not tree.exists()
        assert all(e.name != "tree" for e in ops.list_directory(tmp_path).value)

    def test_delete_missing(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test deleting a missing path fails NOT_FOUND."""
        result = ops.delete(tmp_path / "missing")

        assert result.error.kind is ErrorKind.NOT_FOUND

    def test_delete_does_not_follow_symlinks(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test a symlink inside a deleted tree is removed without touching its target."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "precious.txt").write_text("keep")
        tree = tmp_path / "tree"
        tree.mkdir()
        (tree / "link").symlink_to(outside, target_is_directory=True)

        ops.delete(tree)

        assert not tree.exists()
        assert (outside / "precious.txt").read_text() == "keep"

    def test_delete_dangling_symlink(self, ops: FileOperations, tmp_path: Path) -> None:
        """Test a dangling symlink counts as existing and can be deleted."""
        link = tmp_path / "dangling"
        link.symlink_to(tmp_path / "nowhere")

        result = ops.delete(link)

        assert result.success
        assert not link.is_symlink()

    def test_partial_failure_keeps_removed_nodes_removed(
        self, ops: FileOperations, tmp_path: Path
    ) -> None:
        """Test a failure mid-traversal aborts with no rollback."""
        tree = tmp_path / "tree"
        tree.mkdir()
        (tree / "first.txt").write_text("1")
        (tree / "second.txt").write_text("2")
        real_unlink = Path.unlink
        calls: list[Path] = []

        def failing_unlink(path: Path, missing_ok: bool = False) -> None:
            calls.append(path)
            if len(calls) == 2:
                raise PermissionError(13, "Permission denied", str(path))
            real_unlink(path, missing_ok=missing_ok)

        with patch.object(Path, "unlink", failing_unlink):
            result = ops.delete(tree)

        assert result.error.kind is ErrorKind.PERMISSION_DENIED
        assert result.error.path == calls[1]
        assert not calls[0].exists()
        assert calls[1].exists()
        assert tree.exists()


class TestRemoveTree:
    """Tests for the post-order traversal."""

    def test_children_removed_before_parents(self, tmp_path: Path) -> None:
        """Test no directory is removed while it still has children."""
        tree = tmp_path / "tree"
        (tree / "x" / "y").mkdir(parents=True)
        (tree / "x" / "y" / "f.txt").write_text("f")
        (tree / "x" / "g.txt").write_text("g")
        real_rmdir = Path.rmdir
        removed: list[Path] = []

        def checking_rmdir(path: Path) -> None:
            assert list(path.iterdir()) == []
            removed.append(path)
            real_rmdir(path)

        with patch.object(Path, "rmdir", checking_rmdir):
            remove_tree(tree)

        assert removed == [tree / "x" / "y", tree / "x", tree]
