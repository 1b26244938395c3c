"""Provider interfaces the navigation core reads the outside world through.

Exactly two implementations exist for each: ``local`` for the real machine
and ``memory`` as a deterministic test double.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..entries import Entry
from ..results import Result


@dataclass(frozen=True)
class TerminalSize:
    width: int
    height: int


class FileSystemProvider(ABC):
    """Read-only filesystem access returning ``Ok``/``Err`` values."""

    @abstractmethod
    def read_directory(self, path: Path) -> Result[tuple[Entry, ...]]:
        """List ``path``.

        Children that cannot be stat-ed are skipped; only a failure to read
        the directory itself is reported as ``DIRECTORY_READ_FAILED``.
        """

    @abstractmethod
    def read_file_preview(self, path: Path, max_bytes: int) -> Result[str]:
        """Read a file as text for previewing.

        Files larger than ``max_bytes`` are rejected with
        ``PREVIEW_TOO_LARGE`` before any content is read.
        """

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        pass

    @abstractmethod
    def is_directory(self, path: Path) -> bool:
        pass

    @abstractmethod
    def is_file(self, path: Path) -> bool:
        pass


class EnvironmentProvider(ABC):
    @abstractmethod
    def current_working_directory(self) -> Path:
        pass

    @abstractmethod
    def terminal_size(self) -> TerminalSize:
        pass
