"""Tick loop for the timer service.

Advances every running timer on a fixed period and raises ``timerElapsed``
when a timer crosses its threshold.
"""
import asyncio
from typing import TYPE_CHECKING

from loguru import logger

from ..duration import now_ms
from ..models import Timer
from ..rules import get_rule
from ..types import EventTypes
from .events import EventEmitter, emit_timer_event
from .store import TimerStore

if TYPE_CHECKING:
    from .service import TimerService

logger = logger.bind(module="timers.ticker")


def run_tick(
    store: TimerStore,
    events: EventEmitter,
    now: int | None = None,
) -> list[Timer]:
    """Advance all running timers once.

    Works on a single snapshot of the store and persists once at the end of
    the pass. A timer with an unregistered type, or whose rule raises, is
    logged and skipped for this tick; the others still advance.

    Args:
        store: Timer store
        events: Event emitter
        now: Current timestamp in ms (defaults to now)

    Returns:
        The updated timer records, in snapshot order
    """
    if now is None:
        now = now_ms()

    updated: list[Timer] = []

    with store.batch():
        for timer in store.read_all().values():
            if not timer.running:
                continue

            rule = get_rule(timer.type)
            if rule is None:
                logger.warning(f"Timer '{timer.name}' has an unrecognized type: {timer.type}.")
                continue

            try:
                new_timer = rule.update(timer, now)
                store.apply_setter(new_timer.name, new_timer)
            except Exception:
                logger.exception(f"Failed to advance timer '{timer.name}'")
                continue
            updated.append(new_timer)

            if new_timer.elapsed and not timer.elapsed:
                logger.info(f"Timer '{new_timer.name}' elapsed.")
                emit_timer_event(events, EventTypes.TIMER_ELAPSED, new_timer.name, new_timer.to_dict())

    return updated


async def tick_loop(service: "TimerService") -> None:
    """Main tick loop.

    This loop runs until the service stops and:
    1. Advances all running timers
    2. Sleeps for one tick period
    3. Repeats
    """
    tick_seconds = service.tick_rate_ms / 1000.0
    logger.info(f"Tick loop started at {service.tick_rate_ms}ms")

    while service.state.running:
        try:
            current_ms = service.clock()
            run_tick(service.store, service.events, now=current_ms)
            service.state.tick_count += 1
            service.state.last_tick_at_ms = current_ms

            await asyncio.sleep(tick_seconds)

        except asyncio.CancelledError:
            logger.info("Tick loop cancelled")
            break
        except Exception as e:
            logger.error(f"Tick loop error: {e}")
            await asyncio.sleep(tick_seconds)

    logger.info("Tick loop stopped")
