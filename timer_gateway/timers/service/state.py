"""State management for the timer service.

Contains runtime state of the tick loop.
"""
import asyncio
from dataclasses import dataclass


@dataclass
class TimerServiceState:
    """Runtime state of the timer service."""
    running: bool = False
    tick_task: asyncio.Task | None = None
    tick_count: int = 0
    last_tick_at_ms: int | None = None

    def reset(self) -> None:
        """Reset state to initial values."""
        self.running = False
        self.tick_task = None
        self.tick_count = 0
        self.last_tick_at_ms = None
