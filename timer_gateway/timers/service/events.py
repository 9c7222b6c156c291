"""Event system for timers.

Emits events for timer lifecycle changes and elapsed transitions.
"""
from typing import Any, Callable

from loguru import logger

from ..duration import now_ms
from ..types import TimerEvent

logger = logger.bind(module="timers.events")


# Type alias for event handlers
EventHandler = Callable[[TimerEvent], None]


class EventEmitter:
    """Event emitter for timer events."""

    def __init__(self):
        self._handlers: list[EventHandler] = []

    def add_handler(self, handler: EventHandler) -> None:
        """Add an event handler."""
        self._handlers.append(handler)

    def remove_handler(self, handler: EventHandler) -> None:
        """Remove an event handler."""
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, event: TimerEvent) -> None:
        """Emit an event to all handlers.

        A failing handler is logged and skipped; it never fails the
        operation or tick that raised the event.
        """
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Event handler error for {event.type}: {e}")


def emit_timer_event(
    emitter: EventEmitter,
    event_type: str,
    name: str,
    payload: dict[str, Any] | None = None,
) -> None:
    """Emit a timer-related event.

    Args:
        emitter: Event emitter instance
        event_type: Type of event (e.g., "timerCreated", "timerElapsed")
        name: Name of the timer
        payload: Event payload, normally the post-mutation timer record
    """
    event = TimerEvent(
        type=event_type,
        name=name,
        timestamp_ms=now_ms(),
        payload=payload or {},
    )
    emitter.emit(event)
