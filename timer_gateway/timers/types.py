"""Core type definitions for the timer system.

This module defines:
- Built-in timer type tags
- Event type names and the event record
- Result types returned by service operations
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ============== Timer Types ==============

class TimerType(str, Enum):
    """Built-in timer variants."""
    INCREMENTING = "incrementing"   # Counts up from 0, elapsed past duration
    DECREMENTING = "decrementing"   # Counts down from duration, elapsed below 0


# ============== Event Types ==============

class EventTypes:
    """Constants for event types."""

    TIMER_CREATED = "timerCreated"
    TIMER_DELETED = "timerDeleted"
    TIMER_RESET = "timerReset"
    TIMER_PAUSED = "timerPaused"
    TIMER_RESUMED = "timerResumed"
    TIMER_ELAPSED = "timerElapsed"


@dataclass
class TimerEvent:
    """Event emitted by the timer registry or the tick loop."""
    type: str
    name: str
    timestamp_ms: int
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "timestamp_ms": self.timestamp_ms,
            "payload": self.payload,
        }


# ============== Result Types ==============

@dataclass
class DeleteResult:
    """Result of deleting a timer."""
    name: str
    deleted: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "deleted": self.deleted,
        }


@dataclass
class TimerServiceStatus:
    """Status of the timer service."""
    running: bool
    tick_rate_ms: int
    tick_count: int
    timers_total: int
    timers_running: int
    timers_elapsed: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "running": self.running,
            "tick_rate_ms": self.tick_rate_ms,
            "tick_count": self.tick_count,
            "timers": {
                "total": self.timers_total,
                "running": self.timers_running,
                "elapsed": self.timers_elapsed,
            },
        }
