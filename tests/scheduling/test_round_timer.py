"""Tests for the countdown timer and periodic task."""

import pytest

from battle_app.scheduling import ManualScheduler, PeriodicTask, RoundTimer


class TestRoundTimer:
    """Test countdown semantics."""

    def test_ticks_then_expires_once(self, scheduler):
        """Test that a 3-tick countdown reports 2, 1, 0 then expires once."""
        timer = RoundTimer(scheduler, tick_seconds=1.0)
        ticks, expiries = [], []

        timer.start(3, on_tick=ticks.append, on_expire=lambda: expiries.append(scheduler.time()))
        scheduler.advance(10)

        assert ticks == [2, 1, 0]
        assert expiries == [3.0]
        assert not timer.is_running()

    def test_remaining_tracks_countdown(self, scheduler):
        timer = RoundTimer(scheduler)
        timer.start(5)

        scheduler.advance(2)

        assert timer.remaining == 3
        assert timer.is_running()

    def test_cancel_stops_all_callbacks(self, scheduler):
        timer = RoundTimer(scheduler)
        ticks, expiries = [], []
        timer.start(3, on_tick=ticks.append, on_expire=lambda: expiries.append(True))

        scheduler.advance(1)
        timer.cancel()
        scheduler.advance(10)

        assert ticks == [2]
        assert expiries == []

    def test_restart_never_double_expires(self, scheduler):
        """Test that starting twice produces exactly one expiry."""
        timer = RoundTimer(scheduler)
        expiries = []

        timer.start(3, on_expire=lambda: expiries.append("first"))
        scheduler.advance(1)
        timer.start(3, on_expire=lambda: expiries.append("second"))
        scheduler.advance(10)

        assert expiries == ["second"]

    def test_cancel_from_tick_callback_suppresses_expiry(self, scheduler):
        timer = RoundTimer(scheduler)
        expiries = []

        timer.start(1, on_tick=lambda remaining: timer.cancel(), on_expire=lambda: expiries.append(True))
        scheduler.advance(5)

        assert expiries == []

    def test_stale_queued_callback_ignored(self, scheduler):
        """Test that a callback queued before cancel() does not fire on a restarted timer."""
        timer = RoundTimer(scheduler, tick_seconds=1.0)
        ticks = []
        timer.start(2, on_tick=lambda r: ticks.append(("old", r)))

        # The old handle is cancelled but its closure still carries the old generation
        timer.cancel()
        timer.start(2, on_tick=lambda r: ticks.append(("new", r)))
        scheduler.advance(5)

        assert ticks == [("new", 1), ("new", 0)]

    @pytest.mark.parametrize("duration", [0, -3])
    def test_non_positive_duration_rejected(self, scheduler, duration):
        with pytest.raises(ValueError):
            RoundTimer(scheduler).start(duration)


class TestPeriodicTask:
    """Test repeating callbacks."""

    def test_fires_every_interval(self, scheduler):
        calls = []
        task = PeriodicTask(scheduler, 0.5, lambda: calls.append(scheduler.time()))

        task.start()
        scheduler.advance(2)

        assert calls == [0.5, 1.0, 1.5, 2.0]
        assert task.runs == 4

    def test_cancel_stops_firing(self, scheduler):
        calls = []
        task = PeriodicTask(scheduler, 1.0, lambda: calls.append(True))
        task.start()
        scheduler.advance(2)

        task.cancel()
        scheduler.advance(5)

        assert len(calls) == 2
        assert not task.is_running()

    def test_callback_may_cancel_itself(self, scheduler):
        calls = []

        def callback():
            calls.append(True)
            task.cancel()

        task = PeriodicTask(scheduler, 1.0, callback)
        task.start()
        scheduler.advance(5)

        assert calls == [True]

    def test_non_positive_interval_rejected(self, scheduler):
        with pytest.raises(ValueError):
            PeriodicTask(scheduler, 0, lambda: None)


class TestManualScheduler:
    """Test the virtual clock."""

    def test_runs_in_due_then_insertion_order(self):
        scheduler = ManualScheduler()
        order = []
        scheduler.call_later(2, lambda: order.append("late"))
        scheduler.call_later(1, lambda: order.append("first"))
        scheduler.call_later(1, lambda: order.append("second"))

        executed = scheduler.advance(3)

        assert order == ["first", "second", "late"]
        assert executed == 3
        assert scheduler.time() == 3

    def test_cancelled_handles_skipped(self):
        scheduler = ManualScheduler()
        calls = []
        handle = scheduler.call_later(1, lambda: calls.append(True))

        handle.cancel()

        assert handle.cancelled
        assert scheduler.pending == 0
        assert scheduler.advance(2) == 0
        assert calls == []

    def test_callbacks_scheduled_during_advance_run_if_due(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(1, lambda: scheduler.call_later(1, lambda: calls.append(scheduler.time())))

        scheduler.advance(2)

        assert calls == [2]

    def test_negative_advance_rejected(self):
        with pytest.raises(ValueError):
            ManualScheduler().advance(-1)

    def test_run_until_idle_stops_at_limit(self):
        scheduler = ManualScheduler()
        task = PeriodicTask(scheduler, 1.0, lambda: None)
        task.start()

        elapsed = scheduler.run_until_idle(max_seconds=10)

        assert elapsed == 10
        assert task.runs == 10
