"""File preview: load -> cap -> paginate for the selected file.

The preview keeps its own scroll offset, independent of the navigation
selection, and guards against stale loads the same way navigation does:
a result is accepted only for the path currently being loaded.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from .log import get_logger
from .providers.base import FileSystemProvider
from .results import ErrorKind, FsError, Ok, Result
from .runtime.config import DEFAULT_PREVIEW_MAX_BYTES, DEFAULT_PREVIEW_MAX_LINES
from .runtime.loader import LOAD_PREVIEW, BackgroundLoader, LoadResult
from .scroll import clamp_offset

logger = get_logger(__name__)

DEFAULT_PREVIEW_VIEWPORT_LINES = 10


@dataclass(frozen=True)
class PreviewContent:
    """Capped preview text.

    ``lines`` holds at most ``max_lines`` source lines plus, when truncated,
    one trailing marker line; ``omitted_lines`` counts what the marker hides.
    """

    path: Path
    lines: tuple[str, ...]
    source_line_count: int
    omitted_lines: int = 0
    language: str | None = None

    @property
    def truncated(self) -> bool:
        return self.omitted_lines > 0


def omitted_marker(count: int) -> str:
    return f"... ({count} more lines)"


def split_preview_lines(text: str, max_lines: int) -> tuple[tuple[str, ...], int, int]:
    """Split ``text`` into at most ``max_lines`` lines plus a truncation marker.

    Returns ``(lines, source_line_count, omitted_lines)``.
    """
    source_lines = text.splitlines()
    limit = max(1, max_lines)
    if len(source_lines) <= limit:
        return tuple(source_lines), len(source_lines), 0
    omitted = len(source_lines) - limit
    return (*source_lines[:limit], omitted_marker(omitted)), len(source_lines), omitted


@lru_cache(maxsize=256)
def detect_language(filename: str) -> str | None:
    """Return the Pygments lexer name for ``filename``, if one matches."""
    try:
        return get_lexer_for_filename(filename).name
    except ClassNotFound:
        return None


def load_preview(
    provider: FileSystemProvider,
    path: Path,
    max_bytes: int = DEFAULT_PREVIEW_MAX_BYTES,
    max_lines: int = DEFAULT_PREVIEW_MAX_LINES,
) -> Result[PreviewContent]:
    """Read ``path`` through ``provider`` and cap it for display."""
    result = provider.read_file_preview(path, max_bytes)
    if not isinstance(result, Ok):
        return result
    lines, source_line_count, omitted = split_preview_lines(result.value, max_lines)
    return Ok(
        PreviewContent(
            path=path,
            lines=lines,
            source_line_count=source_line_count,
            omitted_lines=omitted,
            language=detect_language(path.name),
        )
    )


class PreviewPhase(str, Enum):
    HIDDEN = "hidden"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class PreviewState:
    path: Path | None = None
    phase: PreviewPhase = PreviewPhase.HIDDEN
    content: PreviewContent | None = None
    error: FsError | None = None
    scroll_offset: int = 0
    viewport_lines: int = DEFAULT_PREVIEW_VIEWPORT_LINES

    @property
    def visible(self) -> bool:
        return self.phase is not PreviewPhase.HIDDEN

    @property
    def total_lines(self) -> int:
        return len(self.content.lines) if self.content is not None else 0

    @property
    def error_kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def visible_lines(self) -> tuple[str, ...]:
        if self.content is None:
            return ()
        return self.content.lines[self.scroll_offset:self.scroll_offset + self.viewport_lines]


def preview_requested(state: PreviewState, path: Path) -> PreviewState:
    return replace(state, path=path, phase=PreviewPhase.LOADING, content=None, error=None, scroll_offset=0)


def preview_completed(state: PreviewState, path: Path, result: Result[PreviewContent]) -> PreviewState:
    """Apply a finished load unless it answers a superseded request."""
    if state.phase is not PreviewPhase.LOADING or path != state.path:
        logger.debug("discarding stale preview for %s", path)
        return state
    if isinstance(result, Ok):
        return replace(state, phase=PreviewPhase.READY, content=result.value, error=None, scroll_offset=0)
    return replace(state, phase=PreviewPhase.ERROR, content=None, error=result.error, scroll_offset=0)


def preview_hidden(state: PreviewState) -> PreviewState:
    return replace(state, path=None, phase=PreviewPhase.HIDDEN, content=None, error=None, scroll_offset=0)


def preview_scrolled(state: PreviewState, delta: int) -> PreviewState:
    offset = clamp_offset(state.scroll_offset + delta, state.total_lines, state.viewport_lines)
    return replace(state, scroll_offset=offset)


def preview_resized(state: PreviewState, viewport_lines: int) -> PreviewState:
    lines = max(1, viewport_lines)
    offset = clamp_offset(state.scroll_offset, state.total_lines, lines)
    return replace(state, viewport_lines=lines, scroll_offset=offset)


class PreviewController:
    """Drives ``PreviewState`` through background loads.

    Preview failures stay local to this controller and never touch
    navigation state.
    """

    def __init__(
        self,
        provider: FileSystemProvider,
        loader: BackgroundLoader,
        max_bytes: int = DEFAULT_PREVIEW_MAX_BYTES,
        max_lines: int = DEFAULT_PREVIEW_MAX_LINES,
        viewport_lines: int = DEFAULT_PREVIEW_VIEWPORT_LINES,
    ) -> None:
        self.provider = provider
        self.loader = loader
        self.max_bytes = max_bytes
        self.max_lines = max_lines
        self.state = PreviewState(viewport_lines=max(1, viewport_lines))

    def show(self, path: Path) -> None:
        self.state = preview_requested(self.state, path)
        self.loader.submit(
            LOAD_PREVIEW,
            path,
            load_preview,
            self.provider,
            path,
            self.max_bytes,
            self.max_lines,
            failure_kind=ErrorKind.PREVIEW_READ_FAILED,
        )

    def toggle(self, path: Path) -> None:
        """Hide when ``path`` is already shown, otherwise show it."""
        if self.state.visible and self.state.path == path:
            self.hide()
            return
        self.show(path)

    def hide(self) -> None:
        self.state = preview_hidden(self.state)

    def scroll(self, delta: int) -> None:
        self.state = preview_scrolled(self.state, delta)

    def set_viewport(self, viewport_lines: int) -> None:
        self.state = preview_resized(self.state, viewport_lines)

    def handle_result(self, load: LoadResult) -> None:
        self.state = preview_completed(self.state, load.request.path, load.result)


__all__ = [
    "DEFAULT_PREVIEW_VIEWPORT_LINES",
    "PreviewContent",
    "PreviewPhase",
    "PreviewState",
    "PreviewController",
    "detect_language",
    "load_preview",
    "omitted_marker",
    "preview_completed",
    "preview_hidden",
    "preview_requested",
    "preview_resized",
    "preview_scrolled",
    "split_preview_lines",
]
