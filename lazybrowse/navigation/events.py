"""Tagged navigation events consumed by ``transition``."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..entries import Entry, FilterOptions, SortConfig


@dataclass(frozen=True)
class RequestDirectory:
    path: Path


@dataclass(frozen=True)
class DirectoryLoaded:
    path: Path
    raw_entries: Sequence[Entry]


@dataclass(frozen=True)
class DirectoryFailed:
    path: Path
    error: str


@dataclass(frozen=True)
class MoveSelection:
    delta: int


@dataclass(frozen=True)
class SelectIndex:
    index: int


@dataclass(frozen=True)
class ChangeSortConfig:
    config: SortConfig


@dataclass(frozen=True)
class ChangeFilterOptions:
    options: FilterOptions


@dataclass(frozen=True)
class EnterSelected:
    pass


NavigationEvent = Union[
    RequestDirectory,
    DirectoryLoaded,
    DirectoryFailed,
    MoveSelection,
    SelectIndex,
    ChangeSortConfig,
    ChangeFilterOptions,
    EnterSelected,
]
