"""Production providers backed by ``os.scandir`` and the real terminal."""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path

from ..entries import Entry, EntryKind, make_entry
from ..formatting import format_file_size
from ..log import get_logger
from ..results import ErrorKind, Ok, Result, describe_os_error, failure
from .base import EnvironmentProvider, FileSystemProvider, TerminalSize

logger = get_logger(__name__)

BINARY_PROBE_BYTES = 4096
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def decode_text(data: bytes) -> str:
    """Decode using UTF-8, UTF-8 with BOM, then latin-1."""
    for encoding in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _entry_kind(child: os.DirEntry) -> EntryKind:
    if child.is_symlink():
        return EntryKind.SYMLINK
    if child.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    if child.is_file(follow_symlinks=False):
        return EntryKind.FILE
    return EntryKind.UNKNOWN


class LocalFileSystemProvider(FileSystemProvider):
    def read_directory(self, path: Path) -> Result[tuple[Entry, ...]]:
        entries: list[Entry] = []
        try:
            with os.scandir(path) as children:
                for child in children:
                    try:
                        kind = _entry_kind(child)
                        stat = child.stat(follow_symlinks=False)
                    except OSError as exc:
                        logger.warning("skipping %s: %s", child.path, describe_os_error(exc))
                        continue
                    entries.append(make_entry(child.name, kind, int(stat.st_size), int(stat.st_mtime_ns)))
        except OSError as exc:
            return failure(
                ErrorKind.DIRECTORY_READ_FAILED,
                f"Cannot read {path}: {describe_os_error(exc)}",
                path,
            )
        return Ok(tuple(entries))

    def read_file_preview(self, path: Path, max_bytes: int) -> Result[str]:
        try:
            stat = path.stat()
        except OSError as exc:
            return failure(
                ErrorKind.PREVIEW_READ_FAILED,
                f"Cannot preview {path.name}: {describe_os_error(exc)}",
                path,
            )
        if not path.is_file():
            return failure(ErrorKind.PREVIEW_NOT_A_FILE, f"{path.name} is not a regular file", path)
        if stat.st_size > max_bytes:
            return failure(
                ErrorKind.PREVIEW_TOO_LARGE,
                f"File too large ({format_file_size(stat.st_size)} > {format_file_size(max_bytes)})",
                path,
            )
        try:
            with path.open("rb") as handle:
                data = handle.read(max_bytes + 1)
        except OSError as exc:
            return failure(
                ErrorKind.PREVIEW_READ_FAILED,
                f"Cannot preview {path.name}: {describe_os_error(exc)}",
                path,
            )
        if len(data) > max_bytes:
            return failure(
                ErrorKind.PREVIEW_TOO_LARGE,
                f"File too large (> {format_file_size(max_bytes)})",
                path,
            )
        if b"\x00" in data[:BINARY_PROBE_BYTES]:
            return failure(ErrorKind.PREVIEW_READ_FAILED, f"{path.name} is a binary file", path)
        return Ok(sanitize_terminal_text(decode_text(data)))

    def path_exists(self, path: Path) -> bool:
        return path.exists()

    def is_directory(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()


class LocalEnvironmentProvider(EnvironmentProvider):
    def current_working_directory(self) -> Path:
        return Path.cwd()

    def terminal_size(self) -> TerminalSize:
        term = shutil.get_terminal_size((80, 24))
        return TerminalSize(width=max(1, term.columns), height=max(1, term.lines))
