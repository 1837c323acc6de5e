"""Session-based file manager for a rooted directory tree."""

__version__ = "0.1.0"

from fileman.errors import ClassifiedError, ErrorKind, FileManagerError, SessionError
from fileman.filesystem import FileOperations
from fileman.protocols import FileOperationsEngine
from fileman.session import Session
from fileman.types import DirectoryEntry, OperationResult

__all__ = [
    "__version__",
    "ClassifiedError",
    "DirectoryEntry",
    "ErrorKind",
    "FileManagerError",
    "FileOperations",
    "FileOperationsEngine",
    "OperationResult",
    "Session",
    "SessionError",
]
