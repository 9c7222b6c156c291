"""Timer demo showing the tick loop, events and JSON persistence.

This example demonstrates:
- Creating incrementing and decrementing timers
- Pause / resume / toggle
- Elapsed notifications from the tick loop
- JSON file persistence for human-readable viewing
"""
import asyncio
import os
import sys
from pathlib import Path

from loguru import logger

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from timer_gateway.logging_config import setup_logging
from timer_gateway.timers import (
    EventTypes,
    TimerEvent,
    TimerService,
    dispatch_command,
    duration_to_human,
)


def on_event(event: TimerEvent) -> None:
    """Log every timer event; call out elapsed timers."""
    if event.type == EventTypes.TIMER_ELAPSED:
        logger.success(f"Timer '{event.name}' elapsed at {duration_to_human(event.payload['value'])}")
    else:
        logger.info(f"[{event.type}] {event.name}")


async def main():
    """Run two short timers until both elapse."""
    setup_logging("INFO")

    json_path = Path("~/.timer-gateway/demo_timers.json").expanduser()
    service = TimerService(tick_rate_ms=96, json_path=json_path)
    service.on_event(on_event)

    for timer in service.list():
        service.delete(timer.name)

    service.create("stopwatch", "incrementing", 1500)
    dispatch_command(service, "createTimer", {
        "name": "egg",
        "type": "decrementing",
        "duration": "2s",
    })

    service.resume("stopwatch")
    service.reset("egg", pause=False)

    await service.start()

    # Pause the stopwatch for half a second; that time is not counted
    await asyncio.sleep(0.5)
    service.toggle("stopwatch")
    await asyncio.sleep(0.5)
    service.toggle("stopwatch")

    while not all(timer.elapsed for timer in service.list()):
        await asyncio.sleep(0.1)

    for timer in service.list():
        logger.info(
            f"{timer.name}: {duration_to_human(timer.value)} / {duration_to_human(timer.duration)}"
        )

    await service.stop()
    logger.info(f"Timers saved to {json_path}")


if __name__ == "__main__":
    asyncio.run(main())
