"""Success/failure values returned by fallible filesystem operations.

Provider calls and loaders never raise across the controller boundary; they
return ``Ok`` or ``Err`` and callers branch on the variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    DIRECTORY_READ_FAILED = "directory_read_failed"
    ENTRY_STAT_FAILED = "entry_stat_failed"
    PREVIEW_TOO_LARGE = "preview_too_large"
    PREVIEW_NOT_A_FILE = "preview_not_a_file"
    PREVIEW_READ_FAILED = "preview_read_failed"
    OPERATION_TIMED_OUT = "operation_timed_out"


@dataclass(frozen=True)
class FsError:
    kind: ErrorKind
    message: str
    path: Path | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: FsError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def failure(kind: ErrorKind, message: str, path: Path | None = None) -> Err:
    """Shorthand for ``Err(FsError(...))``."""
    return Err(FsError(kind=kind, message=message, path=path))


def describe_os_error(exc: OSError) -> str:
    """Return a short user-facing reason for an ``OSError``."""
    if isinstance(exc, PermissionError):
        return "permission denied"
    if isinstance(exc, FileNotFoundError):
        return "not found"
    if isinstance(exc, NotADirectoryError):
        return "not a directory"
    reason = exc.strerror or str(exc)
    return reason.lower() if reason else exc.__class__.__name__


__all__ = [
    "ErrorKind",
    "FsError",
    "Ok",
    "Err",
    "Result",
    "failure",
    "describe_os_error",
]
