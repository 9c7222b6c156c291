"""Timer service package.

This package contains the core timer service components:
- store.py: In-memory state store (the single mutation channel)
- json_store.py: JSON file persistence layer
- ops.py: Registry operations (create, delete, reset, pause, resume, toggle)
- ticker.py: Tick loop
- events.py: Event system
"""
from .service import TimerService, DEFAULT_TICK_RATE_MS
from .store import TimerStore, MemoryTimerStore
from .json_store import JsonTimerStore
from .events import EventEmitter

__all__ = [
    "TimerService",
    "DEFAULT_TICK_RATE_MS",
    "TimerStore",
    "MemoryTimerStore",
    "JsonTimerStore",
    "EventEmitter",
]
