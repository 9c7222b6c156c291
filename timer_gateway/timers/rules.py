"""Per-type timer rules.

Each timer type maps to a ``TimerRule``: how a tick advances the value, when
the timer counts as elapsed, and what a fresh value looks like. Registry
operations and the tick loop only ever look rules up here, so a new variant
is one ``register_timer_type`` call.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from .models import Timer
from .types import TimerType


@dataclass(frozen=True)
class TimerRule:
    """Update/reset policy for one timer type."""
    advance: Callable[[int, int], int]  # (value, gap_ms) -> value
    is_elapsed: Callable[[Timer], bool]
    reset_value: Callable[[Timer], int]

    def update(self, timer: Timer, now: int) -> Timer:
        """Advance a timer to ``now`` and recompute ``elapsed``.

        The gap is not clamped, so clock skew can move the value backwards.
        """
        gap = now - timer.timestamp
        advanced = replace(timer, value=self.advance(timer.value, gap), timestamp=now)
        return replace(advanced, elapsed=self.is_elapsed(advanced))

    def reset(self, timer: Timer) -> Timer:
        """Return the timer with its fresh value. Other fields are untouched."""
        return replace(timer, value=self.reset_value(timer))


_RULES: dict[str, TimerRule] = {
    TimerType.INCREMENTING.value: TimerRule(
        advance=lambda value, gap: value + gap,
        is_elapsed=lambda t: t.value > t.duration,
        reset_value=lambda t: 0,
    ),
    TimerType.DECREMENTING.value: TimerRule(
        advance=lambda value, gap: value - gap,
        is_elapsed=lambda t: t.value < 0,
        reset_value=lambda t: t.duration,
    ),
}


def type_tag(timer_type: str) -> str:
    """Normalize a TimerType member or plain string to its tag."""
    if isinstance(timer_type, Enum):
        return timer_type.value
    return timer_type


def get_rule(timer_type: str) -> TimerRule | None:
    """Look up the rule for a timer type, or None if unregistered."""
    return _RULES.get(type_tag(timer_type))


def register_timer_type(timer_type: str, rule: TimerRule) -> None:
    """Register (or replace) the rule for a timer type."""
    _RULES[type_tag(timer_type)] = rule


def unregister_timer_type(timer_type: str) -> None:
    """Remove a timer type. Existing timers of that type stop ticking."""
    _RULES.pop(type_tag(timer_type), None)


def timer_types() -> list[str]:
    """List registered timer type tags."""
    return sorted(_RULES)
