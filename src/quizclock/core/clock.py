"""Countdown clock -- a restartable countdown driven by an asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, NamedTuple

from quizclock.core.models import TimerState

logger = logging.getLogger(__name__)


class _Run(NamedTuple):
    """Loop and callbacks of one countdown run."""

    loop: asyncio.AbstractEventLoop
    on_tick: Callable[[int], None]
    on_finish: Callable[[], None]


class CountdownClock:
    """Counts down whole seconds by scheduling callbacks on an event loop.

    Contains no threads: every tick is a ``loop.call_later`` callback, so
    all notifications arrive on the loop's thread.  Each run carries a
    generation number and callbacks from a superseded run are dropped.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._state: TimerState = TimerState.STOPPED
        self._remaining: int = 0
        self._interval: float = 0.0
        self._step: int = 0
        self._generation: int = 0
        self._handle: asyncio.TimerHandle | None = None
        self._run: _Run | None = None

    # -- public interface ----------------------------------------------------

    def start(
        self,
        duration_seconds: int,
        tick_interval_seconds: float,
        on_tick: Callable[[int], None],
        on_finish: Callable[[], None],
    ) -> None:
        """Count down *duration_seconds*, ticking every *tick_interval_seconds*.

        A clock that is already running is stopped first.
        """
        if not isinstance(duration_seconds, int) or isinstance(duration_seconds, bool):
            raise TypeError(
                f"duration_seconds must be an integer, got {type(duration_seconds).__name__}"
            )
        if duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")
        if tick_interval_seconds <= 0:
            raise ValueError(
                f"tick_interval_seconds must be positive, got {tick_interval_seconds}"
            )

        self.stop()
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()

        self._generation += 1
        self._remaining = duration_seconds
        self._interval = float(tick_interval_seconds)
        self._step = max(1, round(tick_interval_seconds))
        self._run = _Run(loop, on_tick, on_finish)
        self._state = TimerState.RUNNING
        logger.debug("Countdown started: %ds, tick every %.2fs", duration_seconds, self._interval)
        self._schedule(self._run)

    def stop(self) -> None:
        """Cancel pending ticks.  Safe to call when not running."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._state == TimerState.RUNNING:
            self._generation += 1
            self._state = TimerState.STOPPED
            logger.debug("Countdown stopped with %ds remaining", self._remaining)

    @property
    def is_running(self) -> bool:
        return self._state == TimerState.RUNNING

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    # -- private helpers -----------------------------------------------------

    def _schedule(self, run: _Run) -> None:
        self._handle = run.loop.call_later(self._interval, self._tick, self._generation)

    def _tick(self, generation: int) -> None:
        run = self._run
        if run is None or generation != self._generation or self._state != TimerState.RUNNING:
            logger.debug("Dropping stale tick from run %d", generation)
            return
        self._handle = None
        self._remaining = max(self._remaining - self._step, 0)
        try:
            run.on_tick(self._remaining)
        finally:
            # on_tick may have stopped or restarted the clock.
            if generation == self._generation:
                if self._remaining > 0:
                    self._schedule(run)
                else:
                    self._state = TimerState.EXPIRED
                    logger.debug("Countdown expired")
                    run.on_finish()
