"""Shared fixtures: a manually-advanced event loop for deterministic timing."""

from __future__ import annotations

from typing import Any, Callable

import pytest


class ManualHandle:
    """Stands in for ``asyncio.TimerHandle``."""

    def __init__(self, when: float, seq: int, callback: Callable[..., Any], args: tuple) -> None:
        self.when = when
        self.seq = seq
        self.callback = callback
        self.args = args
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualLoop:
    """Implements the slice of the asyncio loop API the package schedules on.

    Time only moves when a test calls :meth:`advance`.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._handles: list[ManualHandle] = []
        self._seq = 0

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        self._seq += 1
        handle = ManualHandle(self.now + delay, self._seq, callback, args)
        self._handles.append(handle)
        return handle

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        return self.call_later(0.0, callback, *args)

    def advance(self, seconds: float) -> None:
        """Run every callback due within *seconds*, in time order."""
        target = self.now + seconds
        while True:
            due = [h for h in self._handles if not h.cancelled() and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.seq))
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = target

    def run_ready(self) -> None:
        self.advance(0.0)

    @property
    def pending(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled())


@pytest.fixture()
def loop() -> ManualLoop:
    return ManualLoop()
