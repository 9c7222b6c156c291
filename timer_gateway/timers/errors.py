"""Exceptions raised by timer operations.

Registry operations raise these straight to the caller (command layer or
HTTP handler). The tick loop never raises them.
"""


class TimerError(Exception):
    """Base class for all timer errors."""


class TimerNotFoundError(TimerError, KeyError):
    """Operation targets a timer name that does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Timer '{name}' not found.")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class DuplicateTimerError(TimerError):
    """Create targets a timer name that already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Timer '{name}' already exists.")


class UnknownTimerTypeError(TimerError):
    """Timer type has no registered rule."""

    def __init__(self, name: str, timer_type: str):
        self.name = name
        self.timer_type = timer_type
        super().__init__(
            f"Timer '{name}' can't be created with nonexistent type '{timer_type}'."
        )


class InvalidDurationTypeError(TimerError, TypeError):
    """Duration is neither an integer count of milliseconds nor a string."""

    def __init__(self, duration: object):
        self.duration = duration
        super().__init__(f"Invalid duration type: {type(duration).__name__}")


class InvalidDurationError(TimerError, ValueError):
    """Duration resolved to a negative number of milliseconds."""

    def __init__(self, duration_ms: int):
        self.duration_ms = duration_ms
        super().__init__(f"Duration must be non-negative, got {duration_ms}ms")


class ParseError(TimerError, ValueError):
    """Duration text could not be parsed."""

    def __init__(self, text: str, reason: str = "unrecognized duration format"):
        self.text = text
        super().__init__(f"Can't parse duration '{text}': {reason}")


class UnknownCommandError(TimerError):
    """Command name is not part of the command surface."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Unknown command: {command}")


class InvalidPayloadError(TimerError, TypeError):
    """Command payload or one of its fields has the wrong shape."""

    def __init__(self, command: str, reason: str):
        self.command = command
        super().__init__(f"Invalid payload for {command}: {reason}")
