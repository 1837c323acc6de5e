"""Shared data types for fileman."""

from __future__ import annotations

import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Generic, TypeVar

from fileman.errors import ClassifiedError, FileManagerError

__all__ = ["DirectoryEntry", "OperationResult"]

T = TypeVar("T")

DIRECTORY_TAG = "[DIR]"
FILE_TAG = "[FILE]"


@dataclass(frozen=True)
class DirectoryEntry:
    """Metadata snapshot of one node found while listing a directory.

    Attributes:
        name: Final path component.
        is_directory: True if the node is a directory.
        size: Size in bytes (0 for directories).
        last_modified: Modification time (UTC).
        path: Absolute path of the node.
    """

    name: str
    is_directory: bool
    size: int
    last_modified: datetime
    path: Path

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.name:
            raise ValueError("name cannot be empty")
        if self.size < 0:
            raise ValueError("size cannot be negative")
        if self.is_directory and self.size != 0:
            raise ValueError("directories must have size 0")

    @classmethod
    def from_path(cls, path: Path) -> DirectoryEntry:
        """Read the attributes of an existing node.

        Args:
            path: Path of the file or directory.

        Returns:
            DirectoryEntry for the node. A dangling symlink is described by
            the link itself and reported as a file.

        Raises:
            OSError: If the node's attributes cannot be read.
        """
        try:
            info = path.stat()
        except FileNotFoundError:
            info = path.lstat()
        is_directory = stat.S_ISDIR(info.st_mode)
        return cls(
            name=path.name,
            is_directory=is_directory,
            size=0 if is_directory else info.st_size,
            last_modified=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc),
            path=path,
        )

    @property
    def tag(self) -> str:
        """Display marker distinguishing directories from files."""
        return DIRECTORY_TAG if self.is_directory else FILE_TAG

    def __str__(self) -> str:
        return f"{self.tag} {self.name}"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Result of a filesystem operation.

    Attributes:
        success: True if the operation completed.
        value: Value produced on success (None on failure).
        error: Classified failure (None on success).
    """

    success: bool
    value: T | None = None
    error: ClassifiedError | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.success and self.error is not None:
            raise ValueError("success=True but error is set")
        if not self.success and self.error is None:
            raise ValueError("success=False requires error")

    @classmethod
    def ok(cls, value: T) -> OperationResult[T]:
        """Build a successful result."""
        return cls(success=True, value=value)

    @classmethod
    def failed(cls, error: ClassifiedError) -> OperationResult[T]:
        """Build a failed result."""
        return cls(success=False, error=error)

    def unwrap(self) -> T:
        """Return the value, raising FileManagerError on failure."""
        if self.error is not None:
            raise FileManagerError(self.error)
        return self.value  # type: ignore[return-value]
