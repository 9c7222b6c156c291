"""In-memory timer store.

The store is the single mutation channel shared by registry operations and
the tick loop. Writes to the same name apply in submission order; a reader
always gets a point-in-time copy of the whole map.
"""
import threading
from contextlib import contextmanager
from typing import Any, ContextManager, Iterator, Protocol

from loguru import logger

from ..models import Timer

logger = logger.bind(module="timers.store")


class TimerStore(Protocol):
    """Protocol for timer state stores."""

    def read_all(self) -> dict[str, Timer]:
        """Return a snapshot of all timers keyed by name."""
        ...

    def apply_setter(self, name: str, timer: Timer) -> None:
        """Insert or replace the timer stored under ``name``."""
        ...

    def apply_delete(self, name: str) -> None:
        """Remove the timer stored under ``name``."""
        ...

    def batch(self) -> ContextManager[Any]:
        """Group several writes so persistence happens once on exit."""
        ...


class MemoryTimerStore:
    """Dict-backed timer store guarded by a single lock."""

    def __init__(self, timers: dict[str, Timer] | None = None):
        self._timers: dict[str, Timer] = dict(timers or {})
        self._lock = threading.Lock()
        self._batch_depth = 0
        self._dirty = False

    def read_all(self) -> dict[str, Timer]:
        with self._lock:
            return dict(self._timers)

    def apply_setter(self, name: str, timer: Timer) -> None:
        with self._lock:
            self._timers[name] = timer
        self._written()

    def apply_delete(self, name: str) -> None:
        with self._lock:
            self._timers.pop(name, None)
        self._written()

    @contextmanager
    def batch(self) -> Iterator["MemoryTimerStore"]:
        """Defer ``_after_write`` until the outermost batch exits.

        The hook runs once on exit if anything was written inside the batch.
        """
        with self._lock:
            self._batch_depth += 1
        try:
            yield self
        finally:
            with self._lock:
                self._batch_depth -= 1
                flush = self._batch_depth == 0 and self._dirty
                if flush:
                    self._dirty = False
            if flush:
                self._after_write()

    def _written(self) -> None:
        with self._lock:
            if self._batch_depth:
                self._dirty = True
                return
        self._after_write()

    def _after_write(self) -> None:
        """Hook for subclasses that persist after each mutation."""

    def __len__(self) -> int:
        with self._lock:
            return len(self._timers)
