"""Deterministic in-memory providers used by tests and demos.

Children are listed in insertion order. Directory read failures and
individual stat failures can be injected to exercise error paths.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..entries import Entry, EntryKind, make_entry
from ..formatting import format_file_size
from ..results import ErrorKind, Ok, Result, failure
from .base import EnvironmentProvider, FileSystemProvider, TerminalSize


@dataclass
class _Node:
    kind: EntryKind
    content: str = ""
    size: int = 0
    mtime_ns: int = 0
    target: Path | None = None


class InMemoryFileSystemProvider(FileSystemProvider):
    def __init__(self, root: Path = Path("/")) -> None:
        self.root = root
        self._nodes: dict[Path, _Node] = {root: _Node(kind=EntryKind.DIRECTORY)}
        self._directory_failures: dict[Path, str] = {}
        self._stat_failures: set[Path] = set()
        self.directory_reads: list[Path] = []
        self.preview_reads: list[Path] = []

    def _ensure_parents(self, path: Path) -> None:
        for parent in reversed(path.parents):
            if parent not in self._nodes:
                self._nodes[parent] = _Node(kind=EntryKind.DIRECTORY)

    def add_directory(self, path: Path | str, mtime_ns: int = 0) -> Path:
        path = Path(path)
        self._ensure_parents(path)
        self._nodes[path] = _Node(kind=EntryKind.DIRECTORY, mtime_ns=mtime_ns)
        return path

    def add_file(
        self,
        path: Path | str,
        content: str = "",
        size: int | None = None,
        mtime_ns: int = 0,
    ) -> Path:
        path = Path(path)
        self._ensure_parents(path)
        actual_size = len(content.encode("utf-8")) if size is None else size
        self._nodes[path] = _Node(kind=EntryKind.FILE, content=content, size=actual_size, mtime_ns=mtime_ns)
        return path

    def add_symlink(self, path: Path | str, target: Path | str, mtime_ns: int = 0) -> Path:
        path = Path(path)
        self._ensure_parents(path)
        self._nodes[path] = _Node(kind=EntryKind.SYMLINK, target=Path(target), mtime_ns=mtime_ns)
        return path

    def fail_directory(self, path: Path | str, reason: str = "permission denied") -> None:
        """Make ``read_directory(path)`` fail as a whole."""
        self._directory_failures[Path(path)] = reason

    def fail_stat(self, path: Path | str) -> None:
        """Make one child unreadable so listings skip it."""
        self._stat_failures.add(Path(path))

    def _resolve(self, path: Path) -> Path:
        seen: set[Path] = set()
        node = self._nodes.get(path)
        while node is not None and node.kind is EntryKind.SYMLINK and node.target is not None:
            if path in seen:
                break
            seen.add(path)
            path = node.target
            node = self._nodes.get(path)
        return path

    def read_directory(self, path: Path) -> Result[tuple[Entry, ...]]:
        self.directory_reads.append(path)
        if path in self._directory_failures:
            return failure(
                ErrorKind.DIRECTORY_READ_FAILED,
                f"Cannot read {path}: {self._directory_failures[path]}",
                path,
            )
        resolved = self._resolve(path)
        node = self._nodes.get(resolved)
        if node is None:
            return failure(ErrorKind.DIRECTORY_READ_FAILED, f"Cannot read {path}: not found", path)
        if node.kind is not EntryKind.DIRECTORY:
            return failure(ErrorKind.DIRECTORY_READ_FAILED, f"Cannot read {path}: not a directory", path)

        entries = [
            make_entry(child_path.name, child.kind, child.size, child.mtime_ns)
            for child_path, child in self._nodes.items()
            if child_path != resolved
            and child_path.parent == resolved
            and child_path not in self._stat_failures
        ]
        return Ok(tuple(entries))

    def read_file_preview(self, path: Path, max_bytes: int) -> Result[str]:
        self.preview_reads.append(path)
        node = self._nodes.get(self._resolve(path))
        if node is None:
            return failure(ErrorKind.PREVIEW_READ_FAILED, f"Cannot preview {path.name}: not found", path)
        if node.kind is not EntryKind.FILE:
            return failure(ErrorKind.PREVIEW_NOT_A_FILE, f"{path.name} is not a regular file", path)
        if node.size > max_bytes:
            return failure(
                ErrorKind.PREVIEW_TOO_LARGE,
                f"File too large ({format_file_size(node.size)} > {format_file_size(max_bytes)})",
                path,
            )
        return Ok(node.content)

    def path_exists(self, path: Path) -> bool:
        return self._resolve(path) in self._nodes

    def is_directory(self, path: Path) -> bool:
        node = self._nodes.get(self._resolve(path))
        return node is not None and node.kind is EntryKind.DIRECTORY

    def is_file(self, path: Path) -> bool:
        node = self._nodes.get(self._resolve(path))
        return node is not None and node.kind is EntryKind.FILE


class StaticEnvironmentProvider(EnvironmentProvider):
    def __init__(self, cwd: Path = Path("/"), width: int = 80, height: int = 24) -> None:
        self.cwd = cwd
        self.size = TerminalSize(width=width, height=height)

    def current_working_directory(self) -> Path:
        return self.cwd

    def terminal_size(self) -> TerminalSize:
        return self.size
