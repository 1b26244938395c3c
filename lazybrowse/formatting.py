"""Display formatting for entry sizes, timestamps, and listing rows."""

from __future__ import annotations

import time

from .entries import Entry, EntryKind

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")
_SECONDS_PER_DAY = 24 * 60 * 60
_KIND_MARKERS = {
    EntryKind.DIRECTORY: "/",
    EntryKind.SYMLINK: "@",
    EntryKind.UNKNOWN: "?",
}


def format_file_size(size: int) -> str:
    """Human-readable byte count: ``0 B``, ``512 B``, ``2.0 KB``, ``15 MB``."""
    if size <= 0:
        return "0 B"
    value = float(size)
    unit_idx = 0
    while value >= 1024 and unit_idx < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit_idx += 1
    if unit_idx == 0:
        return f"{size} B"
    decimals = 1 if value < 10 else 0
    return f"{value:.{decimals}f} {_SIZE_UNITS[unit_idx]}"


def format_modified(mtime_ns: int, now: float | None = None) -> str:
    """Compact modified label: time for today, ``Nd ago`` within a week, else a date."""
    if mtime_ns <= 0:
        return "-"
    seconds = mtime_ns / 1_000_000_000
    current = time.time() if now is None else now
    age_days = int((current - seconds) // _SECONDS_PER_DAY)
    local = time.localtime(seconds)
    if age_days <= 0:
        return time.strftime("%H:%M", local)
    if age_days < 7:
        return f"{age_days}d ago"
    if local.tm_year == time.localtime(current).tm_year:
        return time.strftime("%b %d", local)
    return time.strftime("%Y-%m-%d", local)


def format_entry_row(entry: Entry, width: int = 80, now: float | None = None) -> str:
    """One listing row: name with kind marker, then right-aligned size and date."""
    name = entry.name + _KIND_MARKERS.get(entry.kind, "")
    if entry.is_parent:
        return name[:width]
    size_label = "" if entry.is_dir else format_file_size(entry.size)
    meta = f"{size_label:>9}  {format_modified(entry.mtime_ns, now):>10}"
    name_width = max(1, width - len(meta) - 1)
    if len(name) > name_width:
        name = name[: max(1, name_width - 1)] + "~"
    return f"{name:<{name_width}} {meta}"
