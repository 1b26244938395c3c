"""Navigation state owned by the navigation controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..entries import Entry, FilterOptions, SortConfig


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class NavigationState:
    """Immutable snapshot of one browsing session.

    ``visible_entries`` is always the listing pipeline applied to
    ``raw_entries`` for ``current_path``; transitions replace it, never edit
    it. ``pending_path`` is set while a request is in flight and cleared once
    the response (or failure) for it has been accepted.
    """

    current_path: Path
    visible_entries: tuple[Entry, ...] = ()
    selected_index: int = 0
    sort_config: SortConfig = field(default_factory=SortConfig)
    filter_options: FilterOptions = field(default_factory=FilterOptions)
    phase: Phase = Phase.IDLE
    error_message: str | None = None
    pending_path: Path | None = None
    raw_entries: tuple[Entry, ...] = ()

    @property
    def selected_entry(self) -> Entry | None:
        if 0 <= self.selected_index < len(self.visible_entries):
            return self.visible_entries[self.selected_index]
        return None

    @property
    def is_settled(self) -> bool:
        return self.phase in (Phase.READY, Phase.ERROR)


def clamp_selection(index: int, count: int) -> int:
    """Clamp into ``[0, count - 1]``; ``0`` for an empty listing."""
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))
