"""Domain datatypes for directory listings and listing configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

PARENT_ENTRY_NAME = ".."


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    UNKNOWN = "unknown"


class SortKey(str, Enum):
    NAME = "name"
    SIZE = "size"
    MODIFIED = "modified"
    KIND = "kind"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Entry:
    """One directory child as observed by a filesystem provider.

    ``hidden`` and ``extension`` are derived from ``name`` by ``make_entry``;
    ``extension`` is lower-cased without the leading dot and is only set for
    non-directory entries.
    """

    name: str
    kind: EntryKind
    size: int = 0
    mtime_ns: int = 0
    hidden: bool = False
    extension: str | None = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_parent(self) -> bool:
        return self.name == PARENT_ENTRY_NAME and self.kind is EntryKind.DIRECTORY


def extension_for_name(name: str) -> str | None:
    """Return lower-cased suffix of ``name`` without the dot, if any.

    Dotfiles such as ``.bashrc`` have no extension.
    """
    stem = name.lstrip(".")
    if "." not in stem:
        return None
    suffix = stem.rsplit(".", 1)[1]
    return suffix.lower() or None


def make_entry(name: str, kind: EntryKind, size: int = 0, mtime_ns: int = 0) -> Entry:
    """Build an ``Entry`` with derived ``hidden``/``extension`` fields."""
    is_dir = kind is EntryKind.DIRECTORY
    return Entry(
        name=name,
        kind=kind,
        size=0 if is_dir else max(0, int(size)),
        mtime_ns=int(mtime_ns),
        hidden=name.startswith(".") and name != PARENT_ENTRY_NAME,
        extension=None if is_dir else extension_for_name(name),
    )


def parent_entry() -> Entry:
    """Synthetic ``..`` row prepended to non-root listings."""
    return Entry(name=PARENT_ENTRY_NAME, kind=EntryKind.DIRECTORY)


def normalize_extension(value: str) -> str:
    return value.strip().lstrip(".").lower()


@dataclass(frozen=True)
class SortConfig:
    key: SortKey = SortKey.NAME
    order: SortOrder = SortOrder.ASC

    @property
    def descending(self) -> bool:
        return self.order is SortOrder.DESC


@dataclass(frozen=True)
class FilterOptions:
    """Listing filter switches.

    ``extensions`` is an allow-list applied to file entries only; ``None`` or
    an empty set disables it. ``search_query`` is matched case-insensitively
    as a substring of the entry name.
    """

    show_hidden: bool = False
    directories_first: bool = True
    extensions: frozenset[str] | None = None
    search_query: str | None = None

    @classmethod
    def create(
        cls,
        *,
        show_hidden: bool = False,
        directories_first: bool = True,
        extensions: object = None,
        search_query: str | None = None,
    ) -> FilterOptions:
        """Build options normalizing extension spellings (``.PY`` -> ``py``)."""
        normalized: frozenset[str] | None = None
        if extensions is not None:
            normalized = frozenset(
                ext for ext in (normalize_extension(str(raw)) for raw in extensions) if ext
            )
        return cls(
            show_hidden=show_hidden,
            directories_first=directories_first,
            extensions=normalized,
            search_query=search_query,
        )


__all__ = [
    "PARENT_ENTRY_NAME",
    "EntryKind",
    "SortKey",
    "SortOrder",
    "Entry",
    "SortConfig",
    "FilterOptions",
    "extension_for_name",
    "make_entry",
    "normalize_extension",
    "parent_entry",
]
