"""Runtime services around the navigation core: background I/O, debounce, config."""

from __future__ import annotations

from .debounce import TrailingDebouncer
from .loader import LOAD_DIRECTORY, LOAD_PREVIEW, BackgroundLoader, LoadRequest, LoadResult

__all__ = [
    "TrailingDebouncer",
    "BackgroundLoader",
    "LoadRequest",
    "LoadResult",
    "LOAD_DIRECTORY",
    "LOAD_PREVIEW",
]
