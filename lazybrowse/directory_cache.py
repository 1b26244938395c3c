"""Bounded, time-expiring cache of directory listings keyed by path.

Recency is tracked with an ``OrderedDict`` (oldest first). Expiry is lazy:
``get`` compares entry age against the caller's TTL and reports a miss for
stale entries without deleting them; a later ``put`` overwrites them.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from .entries import Entry
from .log import get_logger

logger = get_logger(__name__)

DIRECTORY_CACHE_MAX_ENTRIES = 100
DIRECTORY_CACHE_MAX_BYTES = 4 * 1024 * 1024
DIRECTORY_CACHE_TTL_SECONDS = 5.0

# Rough per-entry cost of the fixed fields (kind, size, mtime, flags).
_ENTRY_OVERHEAD_BYTES = 48


@dataclass(frozen=True)
class CacheEntry:
    """Cached listing plus its insertion timestamp and approximate size."""

    path: Path
    entries: tuple[Entry, ...]
    stored_at: float
    approx_bytes: int


@dataclass(frozen=True)
class CacheStats:
    size: int
    approx_bytes: int
    hits: int = 0
    misses: int = 0


def approximate_listing_bytes(entries: Iterable[Entry]) -> int:
    """Estimate the serialized size of a listing."""
    total = 0
    for entry in entries:
        total += _ENTRY_OVERHEAD_BYTES + len(entry.name.encode("utf-8", errors="replace"))
        if entry.extension:
            total += len(entry.extension)
    return total


class DirectoryCache:
    """LRU cache of raw directory listings with optional byte budget.

    Listings are stored as tuples of frozen ``Entry`` objects, so callers can
    never mutate what the cache holds.
    """

    def __init__(
        self,
        max_entries: int = DIRECTORY_CACHE_MAX_ENTRIES,
        max_bytes: int | None = DIRECTORY_CACHE_MAX_BYTES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max(1, max_entries)
        self.max_bytes = max_bytes if max_bytes is None else max(1, max_bytes)
        self._clock = clock
        self._entries: OrderedDict[Path, CacheEntry] = OrderedDict()
        self._approx_bytes = 0
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def paths(self) -> list[Path]:
        """Cached paths from least to most recently used."""
        return list(self._entries)

    def get(self, path: Path, ttl: float) -> tuple[Entry, ...] | None:
        """Return the cached listing for ``path`` or ``None`` on miss/expiry."""
        cached = self._entries.get(path)
        if cached is None:
            self._misses += 1
            logger.debug("cache miss: %s", path)
            return None
        if self._clock() - cached.stored_at > ttl:
            self._misses += 1
            logger.debug("cache expired: %s", path)
            return None
        self._entries.move_to_end(path)
        self._hits += 1
        logger.debug("cache hit: %s", path)
        return cached.entries

    def put(self, path: Path, entries: Iterable[Entry]) -> None:
        """Store a listing and evict least-recently-used entries as needed."""
        listing = tuple(entries)
        size = approximate_listing_bytes(listing)
        self._discard(path)
        if self.max_bytes is not None and size > self.max_bytes:
            logger.debug("listing for %s exceeds cache byte budget; not cached", path)
            return

        self._entries[path] = CacheEntry(
            path=path,
            entries=listing,
            stored_at=self._clock(),
            approx_bytes=size,
        )
        self._approx_bytes += size

        while len(self._entries) > self.max_entries:
            self._evict_oldest(1)
        while self.max_bytes is not None and self._approx_bytes > self.max_bytes:
            self._evict_oldest(max(1, len(self._entries) // 2))

    def invalidate(self, path: Path) -> None:
        """Drop one path, e.g. before an explicit refresh."""
        self._discard(path)

    def clear(self) -> None:
        self._entries.clear()
        self._approx_bytes = 0

    def stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            approx_bytes=self._approx_bytes,
            hits=self._hits,
            misses=self._misses,
        )

    def _discard(self, path: Path) -> None:
        previous = self._entries.pop(path, None)
        if previous is not None:
            self._approx_bytes -= previous.approx_bytes

    def _evict_oldest(self, count: int) -> None:
        for _ in range(min(count, len(self._entries))):
            evicted_path, evicted = self._entries.popitem(last=False)
            self._approx_bytes -= evicted.approx_bytes
            logger.debug("cache evict: %s", evicted_path)


__all__ = [
    "DIRECTORY_CACHE_MAX_ENTRIES",
    "DIRECTORY_CACHE_MAX_BYTES",
    "DIRECTORY_CACHE_TTL_SECONDS",
    "CacheEntry",
    "CacheStats",
    "DirectoryCache",
    "approximate_listing_bytes",
]
