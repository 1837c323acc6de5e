"""Session state: the current directory and path resolution."""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path
from typing import TypeVar

from fileman.errors import ClassifiedError, SessionError, classify
from fileman.filesystem import FileOperations
from fileman.protocols import FileOperationsEngine
from fileman.types import DirectoryEntry, OperationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default session root
DEFAULT_ROOT = Path.home() / "FileManager"


def _normalize(path: Path) -> Path:
    """Make a path absolute and collapse '.' and '..' without resolving symlinks."""
    return Path(os.path.normpath(os.path.abspath(path)))


class Session:
    """A cursor over a directory tree.

    Holds the current directory, resolves names against it and delegates to
    a FileOperationsEngine. Not thread-safe: one caller per session.

    Note:
        Prefer using factory methods `create()` or `create_default()` for construction.
    """

    def __init__(self, root: Path, operations: FileOperationsEngine | None = None) -> None:
        """Initialize the session, creating the root directory if needed.

        A failure to create the root is logged and kept in `startup_error`;
        it does not abort construction.

        Args:
            root: Initial current directory.
            operations: Filesystem engine. Defaults to FileOperations.
        """
        self.ops = operations or FileOperations()
        self._current_directory = _normalize(root)
        self.startup_error: ClassifiedError | None = None
        self._ensure_root()

    @classmethod
    def create(cls, root: Path) -> Session:
        """Create a session rooted at a custom directory.

        Args:
            root: Initial current directory.

        Returns:
            Configured Session instance.
        """
        return cls(root=root)

    @classmethod
    def create_default(cls) -> Session:
        """Create a session rooted at ~/FileManager.

        Returns:
            Session configured with the default root.
        """
        return cls(root=DEFAULT_ROOT)

    def _ensure_root(self) -> None:
        root = self._current_directory
        if root.exists():
            return
        try:
            root.mkdir(parents=True, exist_ok=True)
            logger.info("Created working directory: %s", root)
        except OSError as e:
            self.startup_error = classify(e, "initializing session directory", root)
            logger.error("Error %s: %s", self.startup_error.context, self.startup_error.message)

    @property
    def current_directory(self) -> Path:
        """Absolute, normalized current directory."""
        return self._current_directory

    def get_current_directory(self) -> Path:
        """Return the current directory."""
        return self._current_directory

    def resolve(self, name: str | Path) -> Path:
        """Resolve a name against the current directory.

        Args:
            name: Absolute path, or path relative to the current directory.

        Returns:
            Absolute path. Absolute input is returned unchanged.
        """
        path = Path(name)
        if path.is_absolute():
            return path
        return self._current_directory / path

    def _unwrap(self, result: OperationResult[T]) -> T:
        """Return a result's value, or log its error and raise SessionError."""
        if result.error is not None:
            logger.error("Error %s: %s", result.error.context, result.error.message)
            raise SessionError(result.error)
        return result.value  # type: ignore[return-value]

    def _check_not_current(self, path: Path, context: str) -> None:
        """Refuse to remove or move the current directory or any of its ancestors."""
        normalized = _normalize(path)
        current = self._current_directory
        if normalized == current or normalized in current.parents:
            error = classify(
                ValueError(f"Cannot modify the current directory or its parents: {normalized}"),
                context,
                normalized,
            )
            self._unwrap(OperationResult.failed(error))

    def navigate_to(self, target: str | Path) -> Path:
        """Change the current directory.

        Args:
            target: Directory to enter, absolute or relative.

        Returns:
            The new current directory.

        Raises:
            SessionError: NOT_FOUND if the target does not exist, UNEXPECTED if
                it is not a directory. The current directory is left unchanged.
        """
        path = _normalize(self.resolve(target))
        context = "navigating to directory"
        if not path.exists():
            error = classify(
                FileNotFoundError(errno.ENOENT, "Directory not found", str(path)), context, path
            )
            return self._unwrap(OperationResult.failed(error))
        if not path.is_dir():
            error = classify(ValueError(f"Not a directory: {path}"), context, path)
            return self._unwrap(OperationResult.failed(error))

        self._current_directory = path
        logger.info("Navigated to: %s", self._current_directory)
        return self._current_directory

    def list_directory(self) -> list[DirectoryEntry]:
        """List the contents of the current directory.

        Returns:
            Entries in filesystem enumeration order (unsorted).
        """
        return self._unwrap(self.ops.list_directory(self._current_directory))

    def create_file(self, name: str | Path, content: str | None = "") -> Path:
        """Create a new file. Fails if anything already exists at `name`."""
        path = self._unwrap(self.ops.create_file(self.resolve(name), content))
        logger.info("File created: %s", path)
        return path

    def create_directory(self, name: str | Path) -> Path:
        """Create a new directory in the current directory."""
        path = self._unwrap(self.ops.create_directory(self.resolve(name)))
        logger.info("Directory created: %s", path)
        return path

    def read_file(self, name: str | Path) -> str:
        """Read a file's full content."""
        return self._unwrap(self.ops.read_file(self.resolve(name)))

    def update_file(self, name: str | Path, content: str) -> Path:
        """Replace a file's content."""
        path = self._unwrap(self.ops.update_file(self.resolve(name), content))
        logger.info("File updated: %s", path)
        return path

    def delete(self, name: str | Path) -> Path:
        """Delete a file, or a directory with everything inside it."""
        target = self.resolve(name)
        self._check_not_current(target, "deleting file")
        path = self._unwrap(self.ops.delete(target))
        logger.info("Deleted: %s", path)
        return path

    def rename(self, old_name: str | Path, new_name: str | Path) -> Path:
        """Rename a file or directory.

        Both names resolve against the current directory, so a relative
        `new_name` containing a separator moves the node.

        Returns:
            The new path.
        """
        old_path = self.resolve(old_name)
        self._check_not_current(old_path, "renaming file/directory")
        new_path =self._unwrap(self.ops.rename(old_path, self.resolve(new_name)))
        logger.info("Renamed: %s -> %s", old_path, new_path)
        return new_path
