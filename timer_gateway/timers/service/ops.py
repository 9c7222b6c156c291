"""Core operations for the timer registry.

Every operation reads the store once, builds the new record, writes it once
and emits at most one event carrying the post-mutation record. Errors are
raised to the caller.
"""
from dataclasses import replace
from typing import Any, Callable

from loguru import logger

from ..duration import now_ms, parse_duration
from ..errors import (
    DuplicateTimerError,
    InvalidDurationError,
    InvalidDurationTypeError,
    TimerNotFoundError,
    UnknownTimerTypeError,
)
from ..models import Timer
from ..rules import get_rule, type_tag
from ..types import DeleteResult, EventTypes
from .events import EventEmitter, emit_timer_event
from .store import TimerStore

logger = logger.bind(module="timers.ops")

Clock = Callable[[], int]


def resolve_duration(duration: Any) -> int:
    """Turn a duration input into milliseconds.

    Integers are taken as milliseconds; strings go through the duration
    parser. ``bool`` is rejected even though it subclasses ``int``.

    Raises:
        InvalidDurationTypeError: Input is neither int nor str
        InvalidDurationError: Result is negative
        ParseError: String could not be parsed
    """
    if isinstance(duration, str):
        duration_ms = parse_duration(duration)
    elif isinstance(duration, int) and not isinstance(duration, bool):
        duration_ms = duration
    else:
        raise InvalidDurationTypeError(duration)

    if duration_ms < 0:
        raise InvalidDurationError(duration_ms)
    return duration_ms


def _get_timer(timers: dict[str, Timer], name: str) -> Timer:
    timer = timers.get(name)
    if timer is None:
        raise TimerNotFoundError(name)
    return timer


def create_timer(
    store: TimerStore,
    events: EventEmitter,
    name: str,
    timer_type: str,
    duration: Any,
    clock: Clock = now_ms,
) -> Timer:
    """Create a new paused timer.

    Args:
        store: Timer store
        events: Event emitter
        name: Unique timer name
        timer_type: Registered timer type tag
        duration: Milliseconds (int) or duration text (str)
        clock: Millisecond clock

    Returns:
        The created timer
    """
    timers = store.read_all()
    if name in timers:
        raise DuplicateTimerError(name)

    duration_ms = resolve_duration(duration)

    tag = type_tag(timer_type)
    rule = get_rule(tag)
    if rule is None:
        raise UnknownTimerTypeError(name, tag)

    logger.info(f"Creating timer '{name}'; type {tag}, duration {duration_ms}ms.")

    timer = rule.reset(Timer(
        name=name,
        type=tag,
        duration=duration_ms,
        timestamp=clock(),
        running=False,
        elapsed=False,
    ))

    store.apply_setter(name, timer)
    emit_timer_event(events, EventTypes.TIMER_CREATED, name, timer.to_dict())
    return timer


def delete_timer(
    store: TimerStore,
    events: EventEmitter,
    name: str,
) -> DeleteResult:
    """Delete a timer.

    Returns:
        Delete result
    """
    timer = _get_timer(store.read_all(), name)

    logger.info(f"Deleting timer '{timer.name}'.")
    store.apply_delete(name)

    emit_timer_event(events, EventTypes.TIMER_DELETED, name, {"name": name})
    return DeleteResult(name=name, deleted=True)


def reset_timer(
    store: TimerStore,
    events: EventEmitter,
    name: str,
    pause: bool = True,
) -> Timer:
    """Reset a timer to its fresh value.

    The timestamp is not refreshed: with ``pause=False`` the first tick
    measures its gap from whatever timestamp the timer already carried.

    Args:
        store: Timer store
        events: Event emitter
        name: Timer name
        pause: Leave the timer paused after the reset

    Returns:
        The reset timer
    """
    timer = _get_timer(store.read_all(), name)

    rule = get_rule(timer.type)
    if rule is None:
        raise UnknownTimerTypeError(name, timer.type)

    logger.info(f"Resetting timer '{timer.name}'.")
    new_timer = replace(rule.reset(timer), running=not pause, elapsed=False)

    store.apply_setter(name, new_timer)
    emit_timer_event(events, EventTypes.TIMER_RESET, name, new_timer.to_dict())
    return new_timer


def pause_timer(
    store: TimerStore,
    events: EventEmitter,
    name: str,
) -> Timer | None:
    """Pause a running timer.

    The value is not advanced to "now"; only the tick loop advances values.

    Returns:
        The paused timer, or None if it was already paused
    """
    timer = _get_timer(store.read_all(), name)

    if not timer.running:
        logger.warning(f"Attempting to pause '{timer.name}', but already paused.")
        return None

    logger.info(f"Pausing timer '{timer.name}'.")
    new_timer = replace(timer, running=False)

    store.apply_setter(name, new_timer)
    emit_timer_event(events, EventTypes.TIMER_PAUSED, name, new_timer.to_dict())
    return new_timer


def resume_timer(
    store: TimerStore,
    events: EventEmitter,
    name: str,
    clock: Clock = now_ms,
) -> Timer | None:
    """Resume a paused timer.

    The timestamp moves to "now" so the paused interval is not counted.

    Returns:
        The resumed timer, or None if it was already running
    """
    timer = _get_timer(store.read_all(), name)

    if timer.running:
        logger.warning(f"Attempting to resume '{timer.name}', but already running.")
        return None

    logger.info(f"Resuming timer '{timer.name}'.")
    new_timer = replace(timer, running=True, timestamp=clock())

    store.apply_setter(name, new_timer)
    emit_timer_event(events, EventTypes.TIMER_RESUMED, name, new_timer.to_dict())
    return new_timer


def toggle_timer(
    store: TimerStore,
    events: EventEmitter,
    name: str,
    clock: Clock = now_ms,
) -> Timer | None:
    """Pause a running timer or resume a paused one."""
    timer = _get_timer(store.read_all(), name)

    # pause/resume look the timer up again themselves
    if timer.running:
        return pause_timer(store, events, name)
    return resume_timer(store, events, name, clock=clock)
