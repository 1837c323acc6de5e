"""Protocol definitions for core abstractions.

Session depends on the engine through this interface rather than the
concrete FileOperations class, so tests can substitute a double (for example
one that simulates another process changing the tree between calls).

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from fileman.types import DirectoryEntry, OperationResult


@runtime_checkable
class FileOperationsEngine(Protocol):
    """Protocol for stateless filesystem primitives.

    Every method takes absolute paths and reports failure through the
    returned OperationResult instead of raising.
    """

    def list_directory(self, directory: Path) -> OperationResult[list[DirectoryEntry]]:
        """List the immediate children of a directory.

        Args:
            directory: Directory to list.

        Returns:
            Result holding one entry per child, in enumeration order.
        """
        ...

    def create_file(self, path: Path, content: str | None = "") -> OperationResult[Path]:
        """Create a new file without overwriting.

        Args:
            path: File to create.
            content: Initial text content.

        Returns:
            Result holding the created path.
        """
        ...

    def create_directory(self, path: Path) -> OperationResult[Path]:
        """Create a single directory level.

        Args:
            path: Directory to create.

        Returns:
            Result holding the created path.
        """
        ...

    def read_file(self, path: Path) -> OperationResult[str]:
        """Read a whole file as UTF-8 text.

        Args:
            path: File to read.

        Returns:
            Result holding the file content.
        """
        ...

    def update_file(self, path: Path, content: str) -> OperationResult[Path]:
        """Replace the content of an existing file.

        Args:
            path: File to update.
            content: New content.

        Returns:
            Result holding the updated path.
        """
        ...

    def rename(self, old_path: Path, new_path: Path) -> OperationResult[Path]:
        """Rename or move a file or directory.

        Args:
            old_path: Existing path.
            new_path: Destination path, which must not exist.

        Returns:
            Result holding the new path.
        """
        ...

    def delete(self, path: Path) -> OperationResult[Path]:
        """Delete a file, or a directory and everything below it.

        Args:
            path: Path to delete.

        Returns:
            Result holding the deleted path.
        """
        ...
