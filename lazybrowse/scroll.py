"""Virtual scroll window over a list of rows.

The window is recomputed incrementally from the previous one: it only moves
when the selection leaves it, so each update is O(1) regardless of list size.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ScrollWindow:
    """Visible half-open index range ``[start, end)`` of ``total_items`` rows."""

    start: int = 0
    end: int = 0
    total_items: int = 0
    viewport_height: int = 1

    @property
    def more_above(self) -> bool:
        return self.start > 0

    @property
    def more_below(self) -> bool:
        return self.end < self.total_items

    def __len__(self) -> int:
        return self.end - self.start


def clamp_offset(offset: int, total_items: int, viewport_height: int) -> int:
    """Clamp a scroll start into ``[0, max(0, total_items - viewport_height)]``."""
    max_start = max(0, total_items - max(1, viewport_height))
    return max(0, min(offset, max_start))


def recompute(
    previous: ScrollWindow,
    selected_index: int,
    total_items: int,
    viewport_height: int,
) -> ScrollWindow:
    """Return the window that keeps ``selected_index`` visible."""
    height = max(1, viewport_height)
    total = max(0, total_items)
    if total == 0:
        return ScrollWindow(start=0, end=0, total_items=0, viewport_height=height)

    selected = max(0, min(selected_index, total - 1))
    start = previous.start
    if selected < start:
        start = selected
    elif selected >= start + height:
        start = selected - height + 1
    start = clamp_offset(start, total, height)
    return ScrollWindow(
        start=start,
        end=min(total, start + height),
        total_items=total,
        viewport_height=height,
    )


def visible_slice(items: Sequence[T], window: ScrollWindow) -> tuple[T, ...]:
    """Rows handed to the renderer: never more than the window holds."""
    return tuple(items[window.start:window.end])


__all__ = [
    "ScrollWindow",
    "clamp_offset",
    "recompute",
    "visible_slice",
]
