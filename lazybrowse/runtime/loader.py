"""Background I/O for directory listings and previews.

Provider calls run on a small thread pool; completed results are queued and
drained by the single control thread, which is the only place state changes.
Every result is tagged with the request (kind + path) it answers. Calls that
overrun their deadline are reported as ``OPERATION_TIMED_OUT`` on the next
drain and their late completion is dropped; the worker thread itself is not
interrupted.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from ..log import get_logger
from ..results import ErrorKind, Result, failure

logger = get_logger(__name__)

DEFAULT_IO_TIMEOUT_SECONDS = 5.0
DEFAULT_IO_WORKERS = 2

LOAD_DIRECTORY = "directory"
LOAD_PREVIEW = "preview"


@dataclass(frozen=True)
class LoadRequest:
    request_id: int
    kind: str
    path: Path
    failure_kind: ErrorKind


@dataclass(frozen=True)
class LoadResult:
    request: LoadRequest
    result: Result


@dataclass
class _Inflight:
    request: LoadRequest
    started_at: float
    future: Future | None = None


class BackgroundLoader:
    """Thread-pool loader with per-call deadlines and a drainable result queue."""

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_IO_TIMEOUT_SECONDS,
        max_workers: int = DEFAULT_IO_WORKERS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="lazybrowse-io",
        )
        self._lock = threading.Lock()
        self._inflight: dict[int, _Inflight] = {}
        self._next_request_id = 1
        self._results: Queue[LoadResult] = Queue()
        self._closed = False

    def submit(
        self,
        kind: str,
        path: Path,
        fn: Callable[..., Result],
        *args: object,
        failure_kind: ErrorKind,
    ) -> LoadRequest:
        """Run ``fn(*args)`` in the background and return its request tag."""
        with self._lock:
            request = LoadRequest(
                request_id=self._next_request_id,
                kind=kind,
                path=path,
                failure_kind=failure_kind,
            )
            self._next_request_id += 1
            inflight = _Inflight(request=request, started_at=self._clock())
            self._inflight[request.request_id] = inflight

        logger.debug("load %s started: %s", kind, path)
        inflight.future = self._executor.submit(self._run, request, fn, args)
        return request

    def _run(self, request: LoadRequest, fn: Callable[..., Result], args: tuple[object, ...]) -> None:
        try:
            result = fn(*args)
        except Exception as exc:
            result = failure(request.failure_kind, f"Cannot load {request.path}: {exc}", request.path)

        with self._lock:
            if self._inflight.pop(request.request_id, None) is None:
                logger.debug("dropping late %s result for %s", request.kind, request.path)
                return
        self._results.put(LoadResult(request=request, result=result))

    def _expire_overdue(self) -> list[LoadResult]:
        now = self._clock()
        with self._lock:
            overdue = [
                request_id
                for request_id, inflight in self._inflight.items()
                if now - inflight.started_at > self.timeout_seconds
            ]
            expired = [self._inflight.pop(request_id).request for request_id in overdue]

        out: list[LoadResult] = []
        for request in expired:
            logger.warning("%s load timed out after %.1fs: %s", request.kind, self.timeout_seconds, request.path)
            out.append(
                LoadResult(
                    request=request,
                    result=failure(
                        ErrorKind.OPERATION_TIMED_OUT,
                        f"Timed out reading {request.path}",
                        request.path,
                    ),
                )
            )
        return out

    def drain_results(self) -> list[LoadResult]:
        """Return completed results plus timeouts, oldest first."""
        out: list[LoadResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        out.extend(self._expire_overdue())
        return out

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._inflight)

    def wait(self, timeout: float | None = None) -> None:
        """Block until every in-flight call has finished or ``timeout`` passes."""
        with self._lock:
            futures = [inflight.future for inflight in self._inflight.values() if inflight.future is not None]
        if futures:
            wait(futures, timeout=timeout)

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = [
    "DEFAULT_IO_TIMEOUT_SECONDS",
    "DEFAULT_IO_WORKERS",
    "LOAD_DIRECTORY",
    "LOAD_PREVIEW",
    "LoadRequest",
    "LoadResult",
    "BackgroundLoader",
]
