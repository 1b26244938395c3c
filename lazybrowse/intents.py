"""Closed set of user intents produced by input decoding.

Key decoding lives outside the core; it turns key presses into one of these
values and ``NavigationController.handle_intent`` consumes every variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .entries import SortKey, SortOrder


@dataclass(frozen=True)
class MoveUp:
    count: int = 1


@dataclass(frozen=True)
class MoveDown:
    count: int = 1


@dataclass(frozen=True)
class PageUp:
    pass


@dataclass(frozen=True)
class PageDown:
    pass


@dataclass(frozen=True)
class MoveToTop:
    pass


@dataclass(frozen=True)
class MoveToBottom:
    pass


@dataclass(frozen=True)
class EnterSelected:
    pass


@dataclass(frozen=True)
class GoToParent:
    pass


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class ChangeSort:
    key: SortKey
    order: SortOrder = SortOrder.ASC


@dataclass(frozen=True)
class CycleSortKey:
    pass


@dataclass(frozen=True)
class ToggleSortOrder:
    pass


@dataclass(frozen=True)
class ToggleHidden:
    pass


@dataclass(frozen=True)
class ToggleDirectoriesFirst:
    pass


@dataclass(frozen=True)
class SetSearchQuery:
    text: str


@dataclass(frozen=True)
class ClearSearch:
    pass


@dataclass(frozen=True)
class SetExtensions:
    extensions: frozenset[str] | None


@dataclass(frozen=True)
class TogglePreview:
    pass


@dataclass(frozen=True)
class ScrollPreview:
    delta: int


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Quit:
    pass


Intent = Union[
    MoveUp,
    MoveDown,
    PageUp,
    PageDown,
    MoveToTop,
    MoveToBottom,
    EnterSelected,
    GoToParent,
    Refresh,
    ChangeSort,
    CycleSortKey,
    ToggleSortOrder,
    ToggleHidden,
    ToggleDirectoriesFirst,
    SetSearchQuery,
    ClearSearch,
    SetExtensions,
    TogglePreview,
    ScrollPreview,
    Resize,
    Quit,
]
