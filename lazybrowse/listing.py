"""Listing pipeline: raw entries -> filtered -> sorted -> partitioned -> parent row.

All functions are pure: they return new lists and never mutate their input.
Sorting relies on Python's stable sort, so entries with equal keys keep
their relative input order.
"""

from __future__ import annotations

import locale
from collections.abc import Callable, Sequence
from pathlib import Path

from .entries import PARENT_ENTRY_NAME, Entry, EntryKind, FilterOptions, SortConfig, SortKey, parent_entry

_KIND_RANK = {
    EntryKind.DIRECTORY: 0,
    EntryKind.FILE: 1,
}
_OTHER_KIND_RANK = 2


def name_sort_key(name: str) -> str:
    """Locale-aware, case-insensitive collation key for entry names."""
    return locale.strxfrm(name.casefold())


def is_root_path(path: Path) -> bool:
    return path.parent == path


def _passes_hidden(entry: Entry, options: FilterOptions) -> bool:
    if options.show_hidden or entry.name == PARENT_ENTRY_NAME:
        return True
    return not entry.name.startswith(".")


def _passes_extensions(entry: Entry, options: FilterOptions) -> bool:
    if not options.extensions or entry.kind is not EntryKind.FILE:
        return True
    return entry.extension is not None and entry.extension in options.extensions


def _passes_search(entry: Entry, query: str) -> bool:
    if not query:
        return True
    return query in entry.name.casefold()


def filter_entries(entries: Sequence[Entry], options: FilterOptions) -> list[Entry]:
    """Apply hidden, extension allow-list, then search-substring tests."""
    query = (options.search_query or "").casefold()
    return [
        entry
        for entry in entries
        if _passes_hidden(entry, options)
        and _passes_extensions(entry, options)
        and _passes_search(entry, query)
    ]


def _sort_key_function(key: SortKey) -> Callable[[Entry], tuple]:
    if key is SortKey.NAME:
        return lambda entry: (name_sort_key(entry.name),)
    if key is SortKey.SIZE:
        return lambda entry: (0 if entry.is_dir else entry.size, name_sort_key(entry.name))
    if key is SortKey.MODIFIED:
        return lambda entry: (entry.mtime_ns, name_sort_key(entry.name))
    if key is SortKey.KIND:
        return lambda entry: (
            _KIND_RANK.get(entry.kind, _OTHER_KIND_RANK),
            name_sort_key(entry.name),
        )
    raise ValueError(f"unsupported sort key: {key!r}")


def sort_entries(entries: Sequence[Entry], config: SortConfig) -> list[Entry]:
    """Sort by ``config.key`` with name as tie-breaker; ``desc`` flips the order."""
    return sorted(entries, key=_sort_key_function(config.key), reverse=config.descending)


def partition_directories_first(entries: Sequence[Entry]) -> list[Entry]:
    """Stable partition: directories first, both halves keep their order."""
    directories = [entry for entry in entries if entry.is_dir]
    others = [entry for entry in entries if not entry.is_dir]
    return directories + others


def with_parent_entry(entries: Sequence[Entry], current_path: Path) -> list[Entry]:
    if is_root_path(current_path):
        return list(entries)
    return [parent_entry(), *entries]


def process(
    raw_entries: Sequence[Entry],
    filter_options: FilterOptions,
    sort_config: SortConfig,
    current_path: Path,
) -> list[Entry]:
    """Run the full listing pipeline for one directory."""
    filtered = filter_entries(raw_entries, filter_options)
    ordered = sort_entries(filtered, sort_config)
    if filter_options.directories_first:
        ordered = partition_directories_first(ordered)
    return with_parent_entry(ordered, current_path)


__all__ = [
    "name_sort_key",
    "is_root_path",
    "filter_entries",
    "sort_entries",
    "partition_directories_first",
    "with_parent_entry",
    "process",
]
