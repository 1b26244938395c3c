"""Session controller wiring navigation state to cache, I/O, and preview.

The controller is the single writer of navigation state. Background loads
complete on worker threads but their results are only applied from
``poll``, which the owning control loop calls between input events.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

from .. import intents
from ..directory_cache import DirectoryCache
from ..entries import Entry, EntryKind, FilterOptions, SortConfig, SortKey, SortOrder
from ..listing import is_root_path
from ..log import get_logger
from ..preview import PreviewController, PreviewState
from ..providers.base import EnvironmentProvider, FileSystemProvider
from ..providers.local import LocalEnvironmentProvider
from ..results import ErrorKind, Ok
from ..runtime import config as runtime_config
from ..runtime.config import Settings
from ..runtime.debounce import TrailingDebouncer
from ..runtime.loader import LOAD_DIRECTORY, BackgroundLoader, LoadResult
from ..scroll import ScrollWindow, recompute, visible_slice
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
from .state import NavigationState, Phase
from .transitions import Transition, initial_state, transition

logger = get_logger(__name__)

# Header and status rows drawn around the listing.
RESERVED_ROWS = 2
SORT_KEY_CYCLE = (SortKey.NAME, SortKey.SIZE, SortKey.MODIFIED, SortKey.KIND)


def list_viewport_height(terminal_height: int) -> int:
    return max(1, terminal_height - RESERVED_ROWS)


@dataclass(frozen=True)
class NavigationSnapshot:
    """Read-only view handed to the renderer.

    ``rows`` is the visible slice of ``state.visible_entries`` only.
    """

    state: NavigationState
    window: ScrollWindow
    rows: tuple[Entry, ...]
    preview: PreviewState
    pending_filter: FilterOptions | None = None

    @property
    def selected_row(self) -> int | None:
        if not self.rows:
            return None
        return self.state.selected_index - self.window.start


class NavigationController:
    def __init__(
        self,
        provider: FileSystemProvider,
        environment: EnvironmentProvider | None = None,
        cache: DirectoryCache | None = None,
        loader: BackgroundLoader | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
        persist_preferences: bool = False,
    ) -> None:
        self.provider = provider
        self.environment = environment or LocalEnvironmentProvider()
        self.settings = settings or Settings()
        self.cache = cache or DirectoryCache(
            max_entries=self.settings.cache_max_entries,
            max_bytes=self.settings.cache_max_bytes,
            clock=clock,
        )
        self.loader = loader or BackgroundLoader(timeout_seconds=self.settings.io_timeout_seconds)
        self.filter_debouncer: TrailingDebouncer[FilterOptions] = TrailingDebouncer(
            self.settings.filter_debounce_seconds,
            clock=clock,
        )
        self.persist_preferences = persist_preferences

        terminal = self.environment.terminal_size()
        self.viewport_height = list_viewport_height(terminal.height)
        self.state = initial_state(
            self.environment.current_working_directory(),
            sort_config=self.settings.sort_config,
            filter_options=FilterOptions(
                show_hidden=self.settings.show_hidden,
                directories_first=self.settings.directories_first,
            ),
        )
        self.window = ScrollWindow(viewport_height=self.viewport_height)
        self.preview = PreviewController(
            provider,
            self.loader,
            max_bytes=self.settings.preview_max_bytes,
            max_lines=self.settings.preview_max_lines,
            viewport_lines=self.viewport_height,
        )
        self._closed = False

    # lifecycle
    def start(self, path: Path | None = None) -> None:
        """Request the initial directory (defaults to the working directory)."""
        self.dispatch(RequestDirectory(path if path is not None else self.state.current_path))

    def close(self) -> None:
        """Apply any pending filter edit and stop background I/O."""
        if self._closed:
            return
        self._closed = True
        pending = self.filter_debouncer.flush()
        if pending is not None:
            logger.debug("flushing pending filter edit on close")
            if self.state.phase is Phase.READY:
                self.dispatch(ChangeFilterOptions(pending))
            else:
                self.state = replace(self.state, filter_options=pending)
        self.loader.shutdown()

    # events
    def dispatch(self, event: NavigationEvent) -> Transition:
        """Apply one event through ``transition`` and carry out its effects."""
        result = transition(self.state, event)
        if not result.accepted and isinstance(event, (DirectoryLoaded, DirectoryFailed)):
            logger.debug("discarding stale response for %s", event.path)
        self.state = result.state
        self._update_window()
        if result.load_path is not None:
            self._start_directory_load(result.load_path)
        if result.open_path is not None and result.open_entry is not None:
            self._open_entry(result.open_path, result.open_entry)
        return result

    def poll(self) -> bool:
        """Apply finished loads and due filter edits; return whether anything ran."""
        changed = False
        for load in self.loader.drain_results():
            changed = True
            if load.request.kind == LOAD_DIRECTORY:
                self._apply_directory_result(load)
            else:
                self.preview.handle_result(load)

        if self.state.phase is Phase.READY:
            options = self.filter_debouncer.poll()
            if options is not None:
                self.dispatch(ChangeFilterOptions(options))
                changed = True
        return changed

    def wait_for_io(self, timeout: float | None = None) -> None:
        """Block until in-flight loads finish, then apply them."""
        self.loader.wait(timeout)
        self.poll()

    def snapshot(self) -> NavigationSnapshot:
        return NavigationSnapshot(
            state=self.state,
            window=self.window,
            rows=visible_slice(self.state.visible_entries, self.window),
            preview=self.preview.state,
            pending_filter=self.filter_debouncer.pending,
        )

    # intents
    def handle_intent(self, intent: intents.Intent) -> bool:
        """Translate one input intent into events; ``False`` means quit."""
        if isinstance(intent, intents.Quit):
            return False
        if isinstance(intent, intents.MoveUp):
            self.dispatch(MoveSelection(-max(1, intent.count)))
        elif isinstance(intent, intents.MoveDown):
            self.dispatch(MoveSelection(max(1, intent.count)))
        elif isinstance(intent, intents.PageUp):
            self.dispatch(MoveSelection(-self.viewport_height))
        elif isinstance(intent, intents.PageDown):
            self.dispatch(MoveSelection(self.viewport_height))
        elif isinstance(intent, intents.MoveToTop):
            self.dispatch(SelectIndex(0))
        elif isinstance(intent, intents.MoveToBottom):
            self.dispatch(SelectIndex(len(self.state.visible_entries) - 1))
        elif isinstance(intent, intents.EnterSelected):
            self.dispatch(EnterSelected())
        elif isinstance(intent, intents.GoToParent):
            self.go_to_parent()
        elif isinstance(intent, intents.Refresh):
            self.refresh()
        elif isinstance(intent, intents.ChangeSort):
            self.change_sort(SortConfig(key=intent.key, order=intent.order))
        elif isinstance(intent, intents.CycleSortKey):
            current = self.state.sort_config
            next_key = SORT_KEY_CYCLE[(SORT_KEY_CYCLE.index(current.key) + 1) % len(SORT_KEY_CYCLE)]
            self.change_sort(replace(current, key=next_key))
        elif isinstance(intent, intents.ToggleSortOrder):
            current = self.state.sort_config
            order = SortOrder.ASC if current.descending else SortOrder.DESC
            self.change_sort(replace(current, order=order))
        elif isinstance(intent, intents.ToggleHidden):
            options = self._effective_filter_options()
            self.change_filter(replace(options, show_hidden=not options.show_hidden))
            if self.persist_preferences:
                runtime_config.save_show_hidden(not options.show_hidden)
        elif isinstance(intent, intents.ToggleDirectoriesFirst):
            options = self._effective_filter_options()
            self.change_filter(replace(options, directories_first=not options.directories_first))
            if self.persist_preferences:
                runtime_config.save_directories_first(not options.directories_first)
        elif isinstance(intent, intents.SetSearchQuery):
            options = self._effective_filter_options()
            self.filter_debouncer.push(replace(options, search_query=intent.text or None))
        elif isinstance(intent, intents.ClearSearch):
            self.change_filter(replace(self._effective_filter_options(), search_query=None))
        elif isinstance(intent, intents.SetExtensions):
            options = self._effective_filter_options()
            self.change_filter(
                FilterOptions.create(
                    show_hidden=options.show_hidden,
                    directories_first=options.directories_first,
                    extensions=intent.extensions,
                    search_query=options.search_query,
                )
            )
        elif isinstance(intent, intents.TogglePreview):
            self.toggle_preview()
        elif isinstance(intent, intents.ScrollPreview):
            self.preview.scroll(intent.delta)
        elif isinstance(intent, intents.Resize):
            self.resize(intent.height)
        else:
            raise TypeError(f"unsupported intent: {intent!r}")
        return True

    # operations
    def go_to_parent(self) -> None:
        current = self.state.current_path
        if is_root_path(current):
            return
        self.dispatch(RequestDirectory(current.parent))

    def refresh(self) -> None:
        """Drop the cached listing for the current path and read it again."""
        self.cache.invalidate(self.state.current_path)
        self.dispatch(RequestDirectory(self.state.current_path))

    def change_sort(self, config: SortConfig) -> None:
        self.dispatch(ChangeSortConfig(config))
        if self.persist_preferences:
            runtime_config.save_sort_config(config)

    def change_filter(self, options: FilterOptions) -> None:
        """Apply filter options now, superseding any debounced search edit.

        Outside Ready the options are queued on the debouncer and applied by
        the first ``poll`` after the listing settles.
        """
        if self.dispatch(ChangeFilterOptions(options)).accepted:
            self.filter_debouncer.cancel()
        else:
            self.filter_debouncer.push(options)

    def toggle_preview(self) -> None:
        entry = self.state.selected_entry
        if entry is None or entry.is_dir:
            self.preview.hide()
            return
        self.preview.toggle(self.state.current_path / entry.name)

    def resize(self, terminal_height: int) -> None:
        self.viewport_height = list_viewport_height(terminal_height)
        self.preview.set_viewport(self.viewport_height)
        self._update_window()

    # internals
    def _effective_filter_options(self) -> FilterOptions:
        pending = self.filter_debouncer.pending
        return pending if pending is not None else self.state.filter_options

    def _update_window(self) -> None:
        self.window = recompute(
            self.window,
            self.state.selected_index,
            len(self.state.visible_entries),
            self.viewport_height,
        )

    def _start_directory_load(self, path: Path) -> None:
        cached = self.cache.get(path, self.settings.cache_ttl_seconds)
        if cached is not None:
            self.dispatch(DirectoryLoaded(path, cached))
            return
        self.loader.submit(
            LOAD_DIRECTORY,
            path,
            self.provider.read_directory,
            path,
            failure_kind=ErrorKind.DIRECTORY_READ_FAILED,
        )

    def _apply_directory_result(self, load: LoadResult) -> None:
        path = load.request.path
        if isinstance(load.result, Ok):
            self.cache.put(path, load.result.value)
            self.dispatch(DirectoryLoaded(path, load.result.value))
            return
        self.dispatch(DirectoryFailed(path, load.result.error.message))

    def _open_entry(self, path: Path, entry: Entry) -> None:
        if entry.kind is EntryKind.SYMLINK and self.provider.is_directory(path):
            self.dispatch(RequestDirectory(path))
            return
        self.preview.show(path)


__all__ = [
    "RESERVED_ROWS",
    "SORT_KEY_CYCLE",
    "NavigationController",
    "NavigationSnapshot",
    "list_viewport_height",
]
