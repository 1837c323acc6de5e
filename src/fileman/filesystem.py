"""Filesystem operations engine.

FileOperations wraps standard library Path, os and shutil calls behind
primitives that validate their own preconditions and return an
OperationResult rather than raising.

Each primitive checks existence and then acts. The two steps are not atomic:
another process may create or remove the same path in between. Where an
exclusive primitive exists it is used for the act (exclusive-create for new
files, open-without-create for updates) so a lost race surfaces as a
classified error instead of silently overwriting or creating data.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from fileman.errors import classify
from fileman.types import DirectoryEntry, OperationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENCODING = "utf-8"


def _exists(path: Path) -> bool:
    """Check if a path exists, counting dangling symlinks."""
    return path.exists() or path.is_symlink()


def _not_found(message: str, path: Path) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, message, str(path))


def _already_exists(message: str, path: Path) -> FileExistsError:
    return FileExistsError(errno.EEXIST, message, str(path))


def remove_tree(root: Path) -> None:
    """Remove a directory and all of its descendants.

    Walks the tree post-order with an explicit stack: files and symlinks are
    unlinked as they are found, and a directory is removed only once all of
    its children are gone. Symlinks are never followed.

    A failure stops the walk and propagates; nodes already removed stay
    removed.

    Args:
        root: Directory to remove.

    Raises:
        OSError: If any node cannot be removed.
    """
    stack: list[tuple[Path, bool]] = [(root, False)]
    while stack:
        current, expanded = stack.pop()
        if expanded:
            current.rmdir()
            continue
        stack.append((current, True))
        for child in list(current.iterdir()):
            if child.is_dir() and not child.is_symlink():
                stack.append((child, False))
            else:
                child.unlink()


class FileOperations:
    """Production filesystem engine.

    Stateless: every call is self-contained given absolute paths.
    Satisfies the FileOperationsEngine protocol structurally.
    """

    def _attempt(self, context: str, path: Path, action: Callable[[], T]) -> OperationResult[T]:
        """Run an action, converting any failure into a classified result."""
        try:
            value = action()
        except Exception as e:
            logger.debug("Failed %s %s: %s", context, path, e)
            # Prefer the path named by the error (e.g. the rename target).
            filename = getattr(e, "filename", None)
            return OperationResult.failed(classify(e, context, None if filename else path))
        return OperationResult.ok(value)

    def list_directory(self, directory: Path) -> OperationResult[list[DirectoryEntry]]:
        """List the immediate children of a directory."""

        def action() -> list[DirectoryEntry]:
            if not _exists(directory):
                raise _not_found("Directory doesn't exist", directory)
            entries = []
            for child in directory.iterdir():
                try:
                    entries.append(DirectoryEntry.from_path(child))
                except FileNotFoundError:
                    # Removed after enumeration.
                    logger.debug("Skipping vanished entry: %s", child)
            return entries

        return self._attempt("listing directory", directory, action)

    def create_file(self, path: Path, content: str | None = "") -> OperationResult[Path]:
        """Create a new file with optional content.

        None and "" both produce a zero-byte file.
        """

        def action() -> Path:
            if _exists(path):
                raise _already_exists("File already exists", path)
            with path.open("x", encoding=ENCODING, newline="") as handle:
                handle.write(content or "")
            return path

        return self._attempt("creating file", path, action)

    def create_directory(self, path: Path) -> OperationResult[Path]:
        """Create a new directory. The parent must already exist."""

        def action() -> Path:
            if _exists(path):
                raise _already_exists("Directory already exists", path)
            path.mkdir()
            return path

        return self._attempt("creating directory", path, action)

    def read_file(self, path: Path) -> OperationResult[str]:
        """Read the whole file as UTF-8 text."""

        def action() -> str:
            if not _exists(path):
                raise _not_found("File not found", path)
            with path.open(encoding=ENCODING, newline="") as handle:
                return handle.read()

        return self._attempt("reading file", path, action)

    def update_file(self, path: Path, content: str) -> OperationResult[Path]:
        """Overwrite the content of an existing file."""

        def action() -> Path:
            if not _exists(path):
                raise _not_found("File not found", path)
            if not os.access(path, os.W_OK):
                raise PermissionError(errno.EACCES, "Permission denied", str(path))
            # No O_CREAT: a file removed since the check is reported, not recreated.
            fd = os.open(path, os.O_WRONLY | os.O_TRUNC)
            try:
                handle = open(fd, "w", encoding=ENCODING, newline="")
            except BaseException:
                os.close(fd)
                raise
            with handle:
                handle.write(content)
            return path

        return self._attempt("updating file", path, action)

    def rename(self, old_path: Path, new_path: Path) -> OperationResult[Path]:
        """Rename or move a file or directory without overwriting."""

        def action() -> Path:
            if not _exists(old_path):
                raise _not_found("File not found", old_path)
            if _exists(new_path):
                raise _already_exists("File already exists", new_path)
            shutil.move(os.fspath(old_path), os.fspath(new_path))
            return new_path

        return self._attempt("renaming file/directory", old_path, action)

    def delete(self, path: Path) -> OperationResult[Path]:
        """Delete a file, or a directory recursively."""

        def action() -> Path:
            if not _exists(path):
                raise _not_found("File or directory not found", path)
            if path.is_dir() and not path.is_symlink():
                remove_tree(path)
            else:
                path.unlink()
            return path

        return self._attempt("deleting file", path, action)
