"""Error classification for filesystem operations.

Low-level failures are mapped onto a closed set of error kinds so callers can
branch on what went wrong without inspecting exception types or messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

__all__ = [
    "ClassifiedError",
    "ErrorKind",
    "FileManagerError",
    "SessionError",
    "classify",
]


class ErrorKind(Enum):
    """Closed taxonomy of filesystem failure categories."""

    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IO_FAILURE = "io_failure"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class ClassifiedError:
    """A failure reduced to its kind plus display text.

    Attributes:
        kind: Category of the failure.
        path: Path the operation was acting on (None if unknown).
        context: Phrase naming the attempted operation, e.g. "creating file".
        message: Human-readable message for the user.
        detail: Original low-level message.
    """

    kind: ErrorKind
    path: Path | None
    context: str
    message: str
    detail: str = ""

    def __str__(self) -> str:
        return f"Error {self.context}: {self.message}"


class FileManagerError(Exception):
    """Error carrying a classified filesystem failure."""

    def __init__(self, error: ClassifiedError) -> None:
        super().__init__(str(error))
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        """Category of the underlying failure."""
        return self.error.kind


class SessionError(FileManagerError):
    """Raised by Session when an operation fails."""

    pass


def _message_for(kind: ErrorKind, exc: BaseException, context: str) -> str:
    if kind is ErrorKind.ALREADY_EXISTS:
        return "A file or directory with that name already exists."
    if kind is ErrorKind.NOT_FOUND:
        return "The file or directory could not be found."
    if kind is ErrorKind.PERMISSION_DENIED:
        return "Permission denied. You do not have access to this file or directory."
    if kind is ErrorKind.IO_FAILURE:
        return f"An I/O error occurred while {context}."
    return f"An unexpected error occurred: {exc}"


def _kind_of(exc: BaseException) -> ErrorKind:
    # Order matters: the specific OSError subclasses before OSError itself.
    if isinstance(exc, FileExistsError):
        return ErrorKind.ALREADY_EXISTS
    if isinstance(exc, FileNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, PermissionError):
        return ErrorKind.PERMISSION_DENIED
    if isinstance(exc, OSError):
        return ErrorKind.IO_FAILURE
    return ErrorKind.UNEXPECTED


def classify(exc: BaseException, context: str, path: Path | None = None) -> ClassifiedError:
    """Classify a raised failure.

    Args:
        exc: The exception that was raised.
        context: Phrase naming the attempted operation ("reading file").
        path: Path being acted on. Defaults to the exception's filename.

    Returns:
        ClassifiedError describing the failure.

    Example:
        >>> classify(FileNotFoundError(2, "No such file"), "reading file").kind
        <ErrorKind.NOT_FOUND: 'not_found'>
    """
    kind = _kind_of(exc)
    if path is None and isinstance(exc, OSError) and exc.filename is not None:
        path = Path(exc.filename)
    return ClassifiedError(
        kind=kind,
        path=path,
        context=context,
        message=_message_for(kind, exc, context),
        detail=str(exc),
    )
