"""Main Timer Service class.

This is the unified entry point for all timer operations. It owns the
store, the event emitter and the tick task handle; registry operations run
synchronously on the caller's thread and the tick loop runs as an asyncio
task started by ``start()``.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable

from loguru import logger

from ..duration import now_ms
from ..models import Timer
from ..types import DeleteResult, TimerEvent, TimerServiceStatus
from .events import EventEmitter
from .json_store import JsonTimerStore
from .state import TimerServiceState
from .store import MemoryTimerStore, TimerStore
from . import ops
from . import ticker

logger = logger.bind(module="timers.service")

DEFAULT_TICK_RATE_MS = 96


class TimerService:
    """Registry of named timers plus the tick loop that advances them."""

    def __init__(
        self,
        tick_rate_ms: int = DEFAULT_TICK_RATE_MS,
        store: TimerStore | None = None,
        json_path: str | Path | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        """Initialize timer service.

        Args:
            tick_rate_ms: Tick period in milliseconds
            store: Timer store; defaults to a memory store
            json_path: Persist timers to this JSON file (ignored if store is given)
            clock: Millisecond clock used for timestamps
        """
        if tick_rate_ms <= 0:
            raise ValueError(f"tick_rate_ms must be positive, got {tick_rate_ms}")

        if store is None:
            if json_path is not None:
                store = JsonTimerStore(json_path)
                store.initialize()
            else:
                store = MemoryTimerStore()

        self.tick_rate_ms = tick_rate_ms
        self.store = store
        self.events = EventEmitter()
        self.state = TimerServiceState()
        self.clock = clock

    async def start(self) -> None:
        """Start the tick loop."""
        if self.state.running:
            logger.warning("Timer service already running")
            return

        logger.info(f"Initializing timer system at {self.tick_rate_ms}ms.")
        self.state.running = True
        self.state.tick_task = asyncio.create_task(ticker.tick_loop(self))

    async def stop(self) -> None:
        """Stop the tick loop gracefully."""
        if not self.state.running:
            return

        self.state.running = False

        if self.state.tick_task:
            self.state.tick_task.cancel()
            try:
                await self.state.tick_task
            except asyncio.CancelledError:
                pass

        if isinstance(self.store, JsonTimerStore):
            self.store.close()

        self.state.reset()
        logger.info("Timer service stopped")

    def tick(self, now: int | None = None) -> list[Timer]:
        """Run one tick immediately, outside the loop."""
        return ticker.run_tick(self.store, self.events, now=self.clock() if now is None else now)

    def status(self) -> TimerServiceStatus:
        """Get timer service status."""
        timers = self.store.read_all().values()
        return TimerServiceStatus(
            running=self.state.running,
            tick_rate_ms=self.tick_rate_ms,
            tick_count=self.state.tick_count,
            timers_total=len(timers),
            timers_running=sum(1 for t in timers if t.running),
            timers_elapsed=sum(1 for t in timers if t.elapsed),
        )

    # ============== Timer Management ==============

    def create(self, name: str, timer_type: str, duration: Any) -> Timer:
        """Create a paused timer. ``duration`` is ms (int) or text (str)."""
        return ops.create_timer(self.store, self.events, name, timer_type, duration, clock=self.clock)

    def delete(self, name: str) -> DeleteResult:
        """Delete a timer."""
        return ops.delete_timer(self.store, self.events, name)

    def reset(self, name: str, pause: bool = True) -> Timer:
        """Reset a timer to its fresh value, paused unless ``pause`` is False."""
        return ops.reset_timer(self.store, self.events, name, pause=pause)

    def pause(self, name: str) -> Timer | None:
        """Pause a timer; None if it was already paused."""
        return ops.pause_timer(self.store, self.events, name)

    def resume(self, name: str) -> Timer | None:
        """Resume a timer; None if it was already running."""
        return ops.resume_timer(self.store, self.events, name, clock=self.clock)

    def toggle(self, name: str) -> Timer | None:
        """Pause a running timer or resume a paused one."""
        return ops.toggle_timer(self.store, self.events, name, clock=self.clock)

    def get(self, name: str) -> Timer | None:
        """Get a timer by name."""
        return self.store.read_all().get(name)

    def list(self) -> list[Timer]:
        """List all timers sorted by name."""
        timers = self.store.read_all()
        return [timers[name] for name in sorted(timers)]

    # ============== Event Handling ==============

    def on_event(self, handler: Callable[[TimerEvent], None]) -> None:
        """Register an event handler."""
        self.events.add_handler(handler)

    def off_event(self, handler: Callable[[TimerEvent], None]) -> None:
        """Unregister an event handler."""
        self.events.remove_handler(handler)
