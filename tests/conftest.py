"""Pytest configuration and fixtures for timer-gateway tests."""

import pytest

from timer_gateway.timers import EventEmitter, MemoryTimerStore, TimerService


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = 1_505_799_882_616):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


class EventRecorder:
    """Event handler that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    def of_type(self, event_type):
        return [e for e in self.events if e.type == event_type]


@pytest.fixture
def clock():
    """Fake millisecond clock."""
    return FakeClock()


@pytest.fixture
def store():
    """Empty in-memory timer store."""
    return MemoryTimerStore()


@pytest.fixture
def recorder():
    """Records emitted events."""
    return EventRecorder()


@pytest.fixture
def events(recorder):
    """Event emitter wired to the recorder."""
    emitter = EventEmitter()
    emitter.add_handler(recorder)
    return emitter


@pytest.fixture
def service(store, clock, recorder):
    """Timer service on a fake clock with events recorded."""
    svc = TimerService(tick_rate_ms=96, store=store, clock=clock)
    svc.on_event(recorder)
    return svc
