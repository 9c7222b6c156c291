"""Tests for the tick loop."""

import pytest

from timer_gateway.timers import (
    EventTypes,
    MemoryTimerStore,
    Timer,
    TimerRule,
    register_timer_type,
    unregister_timer_type,
)
from timer_gateway.timers.service import ops
from timer_gateway.timers.service.ticker import run_tick


class TestRunTick:
    """Test a single tick over the store."""

    def test_advances_running_timers_only(self, store, events, clock):
        ops.create_timer(store, events, "up", "incrementing", 10_000, clock=clock)
        ops.create_timer(store, events, "down", "decrementing", 10_000, clock=clock)
        ops.create_timer(store, events, "idle", "incrementing", 10_000, clock=clock)
        ops.resume_timer(store, events, "up", clock=clock)
        ops.resume_timer(store, events, "down", clock=clock)

        updated = run_tick(store, events, now=clock.advance(400))

        timers = store.read_all()
        assert sorted(t.name for t in updated) == ["down", "up"]
        assert timers["up"].value == 400
        assert timers["down"].value == 9_600
        assert timers["up"].timestamp == clock.now
        assert timers["idle"].value == 0

    def test_non_running_timer_is_untouched(self, store, events, clock):
        created = ops.create_timer(store, events, "t", "incrementing", 1000, clock=clock)

        for _ in range(5):
            run_tick(store, events, now=clock.advance(500))

        assert store.read_all()["t"] == created

    def test_unknown_type_is_skipped(self, store, events, recorder, clock):
        stray = Timer(
            name="stray", type="sideways", duration=100,
            timestamp=clock.now, running=True,
        )
        store.apply_setter("stray", stray)
        ops.create_timer(store, events, "t", "incrementing", 100, clock=clock)
        ops.resume_timer(store, events, "t", clock=clock)

        updated = run_tick(store, events, now=clock.advance(200))

        assert [t.name for t in updated] == ["t"]
        assert store.read_all()["stray"] == stray
        assert store.read_all()["t"].elapsed is True
        assert len(recorder.of_type(EventTypes.TIMER_ELAPSED)) == 1

    def test_elapsed_fires_once(self, store, events, recorder, clock):
        ops.create_timer(store, events, "t", "incrementing", 5000, clock=clock)
        ops.resume_timer(store, events, "t", clock=clock)

        for _ in range(10):
            run_tick(store, events, now=clock.advance(1000))

        elapsed = recorder.of_type(EventTypes.TIMER_ELAPSED)
        assert len(elapsed) == 1
        assert elapsed[0].payload["value"] == 6000
        assert store.read_all()["t"].value == 10_000

    def test_leaving_elapsed_does_not_notify(self, store, events, recorder, clock):
        ops.create_timer(store, events, "t", "decrementing", 100, clock=clock)
        ops.resume_timer(store, events, "t", clock=clock)
        run_tick(store, events, now=clock.advance(150))
        assert store.read_all()["t"].elapsed is True

        # Clock jumps backwards; the value climbs back above zero
        clock.advance(-200)
        run_tick(store, events, now=clock.now)
        assert store.read_all()["t"].elapsed is False

        assert len(recorder.of_type(EventTypes.TIMER_ELAPSED)) == 1

    def test_reelapse_after_reset_notifies_again(self, store, events, recorder, clock):
        ops.create_timer(store, events, "t", "incrementing", 100, clock=clock)
        ops.resume_timer(store, events, "t", clock=clock)
        run_tick(store, events, now=clock.advance(200))

        ops.reset_timer(store, events, "t", pause=True)
        ops.resume_timer(store, events, "t", clock=clock)
        run_tick(store, events, now=clock.advance(200))

        assert len(recorder.of_type(EventTypes.TIMER_ELAPSED)) == 2

    def test_failing_handler_does_not_stop_tick(self, store, events, clock):
        def explode(event):
            raise RuntimeError("handler broke")

        events.add_handler(explode)
        ops.create_timer(store, events, "a", "incrementing", 10, clock=clock)
        ops.create_timer(store, events, "b", "incrementing", 10, clock=clock)
        ops.resume_timer(store, events, "a", clock=clock)
        ops.resume_timer(store, events, "b", clock=clock)

        updated = run_tick(store, events, now=clock.advance(50))

        assert len(updated) == 2
        assert all(t.elapsed for t in store.read_all().values())

    def test_raising_rule_does_not_block_other_timers(self, store, events, clock):
        def broken(value, gap):
            raise ArithmeticError("bad rule")

        register_timer_type("broken", TimerRule(
            advance=broken,
            is_elapsed=lambda t: False,
            reset_value=lambda t: 0,
        ))
        try:
            ops.create_timer(store, events, "a_bad", "broken", 100, clock=clock)
            ops.create_timer(store, events, "z_good", "incrementing", 1000, clock=clock)
            ops.resume_timer(store, events, "a_bad", clock=clock)
            ops.resume_timer(store, events, "z_good", clock=clock)

            for _ in range(2):
                updated = run_tick(store, events, now=clock.advance(100))
        finally:
            unregister_timer_type("broken")

        assert [t.name for t in updated] == ["z_good"]
        assert store.read_all()["z_good"].value == 200
        assert store.read_all()["a_bad"].value == 0

    def test_persists_once_per_tick(self, events, clock):
        class CountingStore(MemoryTimerStore):
            def __init__(self):
                super().__init__()
                self.flushes = 0

            def _after_write(self):
                self.flushes += 1

        store = CountingStore()
        for name in ("a", "b", "c"):
            ops.create_timer(store, events, name, "incrementing", 1000, clock=clock)
            ops.resume_timer(store, events, name, clock=clock)
        store.flushes = 0

        run_tick(store, events, now=clock.advance(100))
        assert store.flushes == 1

        for name in ("a", "b", "c"):
            ops.pause_timer(store, events, name)
        store.flushes = 0

        run_tick(store, events, now=clock.advance(100))
        assert store.flushes == 0


class TestScenarios:
    """End-to-end timer scenarios driven through the service."""

    def test_incrementing_timer_elapses_after_duration(self, service, recorder, clock):
        service.create("t", "incrementing", 5000)
        service.resume("t")

        while clock.now - 1_505_799_882_616 <= 5000:
            service.tick(now=clock.advance(96))

        timer = service.get("t")
        assert timer.elapsed is True
        assert timer.value > 5000
        assert len(recorder.of_type(EventTypes.TIMER_ELAPSED)) == 1

    def test_decrementing_minute_timer_goes_negative(self, service, clock):
        service.create("d", "decrementing", "1m")
        service.reset("d", pause=False)

        elapsed_ms = 0
        while elapsed_ms <= 60_000:
            clock.advance(1000)
            elapsed_ms += 1000
            service.tick()

        timer = service.get("d")
        assert timer.value < 0
        assert timer.elapsed is True

    def test_pause_then_resume_preserves_value(self, service, clock):
        service.create("t", "incrementing", 60_000)
        service.resume("t")
        service.tick(now=clock.advance(1_200))
        service.pause("t")

        # Ticks while paused change nothing
        service.tick(now=clock.advance(30_000))
        paused_value = service.get("t").value

        resumed = service.resume("t")
        assert resumed.value == paused_value == 1_200
        assert resumed.timestamp == clock.now

        service.tick(now=clock.advance(300))
        assert service.get("t").value == 1_500

    @pytest.mark.parametrize("start_running", [True, False])
    def test_toggle_matches_direct_call(self, service, recorder, clock, start_running):
        service.create("t", "incrementing", 1000)
        if start_running:
            service.resume("t")
        clock.advance(50)

        toggled = service.toggle("t")

        assert toggled is not None
        assert toggled.running is not start_running
        expected = EventTypes.TIMER_PAUSED if start_running else EventTypes.TIMER_RESUMED
        assert recorder.events[-1].type == expected
