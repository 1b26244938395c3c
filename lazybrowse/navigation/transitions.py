"""Pure navigation transition function ``(state, event) -> Transition``.

Responses are tagged with the path they were requested for and are accepted
only while that path is still the pending one; anything else is a stale
completion from a superseded request and leaves the state untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from ..entries import Entry
from ..listing import process
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


@dataclass(frozen=True)
class Transition:
    """New state plus side effects for the caller to carry out.

    ``load_path`` asks the caller to start reading a directory; ``open_path``
    hands a non-directory entry to the preview side.
    """

    state: NavigationState
    load_path: Path | None = None
    open_path: Path | None = None
    open_entry: Entry | None = None
    accepted: bool = True


def initial_state(path: Path, **kwargs: object) -> NavigationState:
    return NavigationState(current_path=path, **kwargs)


def resolve_entry_path(current_path: Path, entry: Entry) -> Path:
    if entry.is_parent:
        return current_path.parent
    return current_path / entry.name


def _unchanged(state: NavigationState) -> Transition:
    return Transition(state=state, accepted=False)


def _request(state: NavigationState, path: Path) -> Transition:
    return Transition(
        state=replace(state, phase=Phase.LOADING, pending_path=path, error_message=None),
        load_path=path,
    )


def _reprocess(state: NavigationState, **changes: object) -> NavigationState:
    updated = replace(state, **changes)
    visible = tuple(
        process(updated.raw_entries, updated.filter_options, updated.sort_config, updated.current_path)
    )
    return replace(
        updated,
        visible_entries=visible,
        selected_index=clamp_selection(updated.selected_index, len(visible)),
    )


def transition(state: NavigationState, event: NavigationEvent) -> Transition:
    """Apply one event and return the resulting state and effects."""
    if isinstance(event, RequestDirectory):
        return _request(state, event.path)

    if isinstance(event, DirectoryLoaded):
        if state.pending_path is None or event.path != state.pending_path:
            return _unchanged(state)
        raw_entries = tuple(event.raw_entries)
        visible = tuple(process(raw_entries, state.filter_options, state.sort_config, event.path))
        return Transition(
            state=replace(
                state,
                current_path=event.path,
                raw_entries=raw_entries,
                visible_entries=visible,
                selected_index=0,
                phase=Phase.READY,
                error_message=None,
                pending_path=None,
            )
        )

    if isinstance(event, DirectoryFailed):
        if state.pending_path is None or event.path != state.pending_path:
            return _unchanged(state)
        return Transition(
            state=replace(
                state,
                current_path=event.path,
                raw_entries=(),
                visible_entries=(),
                selected_index=0,
                phase=Phase.ERROR,
                error_message=event.error,
                pending_path=None,
            )
        )

    if isinstance(event, MoveSelection):
        if state.phase is not Phase.READY:
            return _unchanged(state)
        index = clamp_selection(state.selected_index + event.delta, len(state.visible_entries))
        return Transition(state=replace(state, selected_index=index))

    if isinstance(event, SelectIndex):
        if state.phase is not Phase.READY:
            return _unchanged(state)
        index = clamp_selection(event.index, len(state.visible_entries))
        return Transition(state=replace(state, selected_index=index))

    if isinstance(event, ChangeSortConfig):
        if state.phase is not Phase.READY:
            return _unchanged(state)
        return Transition(state=_reprocess(state, sort_config=event.config))

    if isinstance(event, ChangeFilterOptions):
        if state.phase is not Phase.READY:
            return _unchanged(state)
        return Transition(state=_reprocess(state, filter_options=event.options))

    if isinstance(event, EnterSelected):
        entry = state.selected_entry
        if state.phase is not Phase.READY or entry is None:
            return _unchanged(state)
        target = resolve_entry_path(state.current_path, entry)
        if entry.is_dir:
            return _request(state, target)
        return Transition(state=state, open_path=target, open_entry=entry)

    raise TypeError(f"unsupported navigation event: {event!r}")


__all__ = [
    "Transition",
    "initial_state",
    "resolve_entry_path",
    "transition",
]
