"""Navigation state machine and the controller that drives it.

``transition`` is a pure ``(state, event) -> Transition`` function;
``NavigationController`` feeds it events from input intents and background
I/O and owns the directory cache for one session.
"""

from __future__ import annotations

from .controller import NavigationController, NavigationSnapshot, list_viewport_height
from .events import (
    ChangeFilterOptions,
    ChangeSortConfig,
    DirectoryFailed,
    DirectoryLoaded,
    EnterSelected,
    MoveSelection,
    NavigationEvent,
    RequestDirectory,
    SelectIndex,
)
from .state import NavigationState, Phase, clamp_selection
from .transitions import Transition, initial_state, resolve_entry_path, transition

__all__ = [
    "NavigationController",
    "NavigationSnapshot",
    "list_viewport_height",
    "ChangeFilterOptions",
    "ChangeSortConfig",
    "DirectoryFailed",
    "DirectoryLoaded",
    "EnterSelected",
    "MoveSelection",
    "NavigationEvent",
    "RequestDirectory",
    "SelectIndex",
    "NavigationState",
    "Phase",
    "clamp_selection",
    "Transition",
    "initial_state",
    "resolve_entry_path",
    "transition",
]
