"""Trailing-edge debounce polled from the control loop."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_DEBOUNCE_SECONDS = 0.25


class TrailingDebouncer(Generic[T]):
    """Keep only the latest pushed value until ``delay_seconds`` of quiet.

    ``flush`` releases the pending value immediately so teardown never drops
    an edit.
    """

    def __init__(
        self,
        delay_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.delay_seconds = max(0.0, delay_seconds)
        self._clock = clock
        self._pending: T | None = None
        self._has_pending = False
        self._deadline = 0.0

    @property
    def has_pending(self) -> bool:
        return self._has_pending

    @property
    def pending(self) -> T | None:
        return self._pending if self._has_pending else None

    def push(self, value: T) -> None:
        self._pending = value
        self._has_pending = True
        self._deadline = self._clock() + self.delay_seconds

    def poll(self) -> T | None:
        """Return the pending value once its quiet period has elapsed."""
        if not self._has_pending or self._clock() < self._deadline:
            return None
        return self.flush()

    def flush(self) -> T | None:
        if not self._has_pending:
            return None
        value = self._pending
        self._pending = None
        self._has_pending = False
        return value

    def cancel(self) -> None:
        self._pending = None
        self._has_pending = False
