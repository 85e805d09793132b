"""Tests for the CountdownClock."""

from __future__ import annotations

import pytest

from quizclock.core.clock import CountdownClock
from quizclock.core.models import TimerState


class Recorder:
    """Collects on_tick / on_finish calls."""

    def __init__(self) -> None:
        self.ticks: list[int] = []
        self.finished = 0

    def on_tick(self, remaining: int) -> None:
        self.ticks.append(remaining)

    def on_finish(self) -> None:
        self.finished += 1


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()


# ---------------------------------------------------------------------------
# Initial state
# ---------------------------------------------------------------------------


class TestClockInitialState:
    def test_initial_state_is_stopped(self, loop) -> None:
        clock = CountdownClock(loop)
        assert clock.state == TimerState.STOPPED
        assert not clock.is_running
        assert clock.remaining_seconds == 0


# ---------------------------------------------------------------------------
# start()
# ---------------------------------------------------------------------------


class TestClockStart:
    def test_start_transitions_to_running(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(5, 1.0, recorder.on_tick, recorder.on_finish)
        assert clock.is_running
        assert clock.remaining_seconds == 5
        assert recorder.ticks == []

    def test_ticks_count_down_then_finish_once(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(5, 1.0, recorder.on_tick, recorder.on_finish)
        loop.advance(5.0)
        assert recorder.ticks == [4, 3, 2, 1, 0]
        assert recorder.finished == 1
        assert clock.state == TimerState.EXPIRED

    def test_no_ticks_after_expiry(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(2, 1.0, recorder.on_tick, recorder.on_finish)
        loop.advance(10.0)
        assert recorder.ticks == [1, 0]
        assert recorder.finished == 1
        assert loop.pending == 0

    def test_partial_advance_ticks_partially(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(5, 1.0, recorder.on_tick, recorder.on_finish)
        loop.advance(2.5)
        assert recorder.ticks == [4, 3]
        assert clock.remaining_seconds == 3
        assert recorder.finished == 0

    def test_interval_is_rounded_to_whole_seconds(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(5, 2.0, recorder.on_tick, recorder.on_finish)
        loop.advance(6.0)
        assert recorder.ticks == [3, 1, 0]
        assert recorder.finished == 1

    def test_sub_second_interval_decrements_one(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(2, 0.5, recorder.on_tick, recorder.on_finish)
        loop.advance(1.0)
        assert recorder.ticks == [1, 0]
        assert recorder.finished == 1

    def test_start_from_expired_is_allowed(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(1, 1.0, recorder.on_tick, recorder.on_finish)
        loop.advance(1.0)
        assert clock.state == TimerState.EXPIRED
        clock.start(3, 1.0, recorder.on_tick, recorder.on_finish)
        assert clock.is_running
        assert clock.remaining_seconds == 3

    def test_start_while_running_replaces_previous_run(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(5, 1.0, recorder.on_tick, recorder.on_finish)
        loop.advance(2.0)
        clock.start(3, 1.0, recorder.on_tick, recorder.on_finish)
        loop.advance(10.0)
        assert recorder.ticks == [4, 3, 2, 1, 0]
        assert recorder.finished == 1

    # --- Invalid arguments ---

    def test_zero_duration_raises_value_error(self, loop, recorder) -> None:
        with pytest.raises(ValueError):
            CountdownClock(loop).start(0, 1.0, recorder.on_tick, recorder.on_finish)

    def test_negative_duration_raises_value_error(self, loop, recorder) -> None:
        with pytest.raises(ValueError):
            CountdownClock(loop).start(-3, 1.0, recorder.on_tick, recorder.on_finish)

    def test_non_integer_duration_raises_type_error(self, loop, recorder) -> None:
        with pytest.raises(TypeError):
            CountdownClock(loop).start(2.5, 1.0, recorder.on_tick, recorder.on_finish)  # type: ignore[arg-type]

    def test_zero_interval_raises_value_error(self, loop, recorder) -> None:
        with pytest.raises(ValueError):
            CountdownClock(loop).start(5, 0, recorder.on_tick, recorder.on_finish)


# ---------------------------------------------------------------------------
# stop()
# ---------------------------------------------------------------------------


class TestClockStop:
    def test_stop_cancels_pending_ticks(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(5, 1.0, recorder.on_tick, recorder.on_finish)
        loop.advance(1.0)
        clock.stop()
        loop.advance(10.0)
        assert recorder.ticks == [4]
        assert recorder.finished == 0
        assert clock.state == TimerState.STOPPED

    def test_stop_is_idempotent(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.stop()
        clock.start(5, 1.0, recorder.on_tick, recorder.on_finish)
        clock.stop()
        clock.stop()
        assert clock.state == TimerState.STOPPED

    def test_stop_after_expiry_keeps_expired(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        clock.start(1, 1.0, recorder.on_tick, recorder.on_finish)
        loop.advance(1.0)
        clock.stop()
        assert clock.state == TimerState.EXPIRED

    def test_stop_inside_on_tick_prevents_finish(self, loop, recorder) -> None:
        clock = CountdownClock(loop)

        def on_tick(remaining: int) -> None:
            recorder.on_tick(remaining)
            clock.stop()

        clock.start(1, 1.0, on_tick, recorder.on_finish)
        loop.advance(5.0)
        assert recorder.ticks == [0]
        assert recorder.finished == 0
        assert clock.state == TimerState.STOPPED


# ---------------------------------------------------------------------------
# Failing callbacks
# ---------------------------------------------------------------------------


class TestClockCallbackErrors:
    """A raising on_tick must not leave the clock frozen in RUNNING."""

    def test_raising_tick_still_reschedules(self, loop, recorder) -> None:
        clock = CountdownClock(loop)
        calls: list[int] = []

        def on_tick(remaining: int) -> None:
            calls.append(remaining)
            if len(calls) == 1:
                raise RuntimeError("renderer failed")

        clock.start(3, 1.0, on_tick, recorder.on_finish)
        with pytest.raises(RuntimeError):
            loop.advance(1.0)
        assert clock.is_running
        assert loop.pending == 1
        loop.advance(2.0)
        assert calls == [2, 1, 0]
        assert recorder.finished == 1
        assert clock.state == TimerState.EXPIRED

    def test_raising_final_tick_still_expires(self, loop, recorder) -> None:
        clock = CountdownClock(loop)

        def on_tick(remaining: int) -> None:
            raise RuntimeError("renderer failed")

        clock.start(1, 1.0, on_tick, recorder.on_finish)
        with pytest.raises(RuntimeError):
            loop.advance(1.0)
        assert clock.state == TimerState.EXPIRED
        assert recorder.finished == 1
