"""Timer module.

This module provides a named-timer registry with:
- Incrementing and decrementing timers (extensible per-type rules)
- Pause / resume / reset / toggle lifecycle
- Tick-driven updates with edge-triggered elapsed events
- Optional JSON file persistence
- asyncio-based tick loop
"""
# Core types
from .types import (
    TimerType,
    EventTypes,
    TimerEvent,
    DeleteResult,
    TimerServiceStatus,
)

# Models
from .models import Timer

# Errors
from .errors import (
    TimerError,
    TimerNotFoundError,
    DuplicateTimerError,
    UnknownTimerTypeError,
    InvalidDurationTypeError,
    InvalidDurationError,
    ParseError,
    UnknownCommandError,
    InvalidPayloadError,
)

# Rules
from .rules import (
    TimerRule,
    get_rule,
    register_timer_type,
    unregister_timer_type,
    timer_types,
)

# Duration utilities
from .duration import (
    parse_duration,
    duration_to_human,
    now_ms,
)

# Service
from .service import (
    TimerService,
    TimerStore,
    MemoryTimerStore,
    JsonTimerStore,
    EventEmitter,
    DEFAULT_TICK_RATE_MS,
)

# Tools
from .tools import (
    init_timer_tools,
    dispatch_command,
    COMMANDS,
    ALL_TIMER_TOOLS,
    TOOL_IMPLEMENTATIONS,
)

__all__ = [
    # Core types
    "TimerType",
    "EventTypes",
    "TimerEvent",
    "DeleteResult",
    "TimerServiceStatus",
    # Models
    "Timer",
    # Errors
    "TimerError",
    "TimerNotFoundError",
    "DuplicateTimerError",
    "UnknownTimerTypeError",
    "InvalidDurationTypeError",
    "InvalidDurationError",
    "ParseError",
    "UnknownCommandError",
    "InvalidPayloadError",
    # Rules
    "TimerRule",
    "get_rule",
    "register_timer_type",
    "unregister_timer_type",
    "timer_types",
    # Duration utilities
    "parse_duration",
    "duration_to_human",
    "now_ms",
    # Service
    "TimerService",
    "TimerStore",
    "MemoryTimerStore",
    "JsonTimerStore",
    "EventEmitter",
    "DEFAULT_TICK_RATE_MS",
    # Tools
    "init_timer_tools",
    "dispatch_command",
    "COMMANDS",
    "ALL_TIMER_TOOLS",
    "TOOL_IMPLEMENTATIONS",
]
