"""Quiz session -- the state machine tying data source, clock and matcher together."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable

from quizclock.core import events, matcher
from quizclock.core.clock import CountdownClock
from quizclock.core.datasource import DataSourceError, FetchResult, QuizDataSource
from quizclock.core.formatter import format_remaining
from quizclock.core.models import (
    AnswerProgress,
    QuizQuestion,
    SessionPhase,
    SessionState,
    TimerState,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMER_PERIOD = 300
DEFAULT_TICK_INTERVAL = 1.0

_LOADABLE_PHASES = frozenset(
    {
        SessionPhase.IDLE,
        SessionPhase.LOADING,
        SessionPhase.WON,
        SessionPhase.TIMED_OUT,
        SessionPhase.ERROR,
    }
)
_RESETTABLE_PHASES = frozenset({SessionPhase.ACTIVE, SessionPhase.WON, SessionPhase.TIMED_OUT})
_TOGGLEABLE_PHASES = frozenset({SessionPhase.ACTIVE, SessionPhase.WON, SessionPhase.TIMED_OUT})

_START_LABEL = "Start"
_RESET_LABEL = "Reset"


class InvalidStateError(Exception):
    """Raised when a lifecycle call is not valid from the current phase."""


class QuizSession:
    """Runs one quiz at a time: load, count down, match answers, win or time out.

    All entry points and callbacks must run on the same event loop thread.
    State is held in a single :class:`SessionState` snapshot that is
    replaced on every transition, and every transition is announced to
    subscribers as a discrete event.
    """

    def __init__(
        self,
        data_source: QuizDataSource,
        clock: CountdownClock | None = None,
        *,
        timer_period_seconds: int = DEFAULT_TIMER_PERIOD,
        tick_interval_seconds: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        if not isinstance(timer_period_seconds, int) or timer_period_seconds <= 0:
            raise ValueError(
                f"timer_period_seconds must be a positive integer, got {timer_period_seconds!r}"
            )
        if tick_interval_seconds <= 0:
            raise ValueError(
                f"tick_interval_seconds must be positive, got {tick_interval_seconds!r}"
            )
        self._data_source = data_source
        self._clock = clock if clock is not None else CountdownClock()
        self._timer_period = timer_period_seconds
        self._tick_interval = tick_interval_seconds
        self._listeners: list[events.Listener] = []
        self._load_generation = 0
        self._state = SessionState(remaining_seconds=timer_period_seconds)

    # -- public API ----------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: events.Listener) -> Callable[[], None]:
        """Register *listener* for session events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load(self) -> None:
        """Request the quiz from the data source.

        A load while another is pending supersedes it.  Not valid while a
        quiz is active; use :meth:`reset` for that.
        """
        self._require_phase("load", _LOADABLE_PHASES)
        self._begin_load()

    def toggle_timer(self) -> None:
        """Start the countdown, or stop it and forfeit the progress so far.

        Also valid after a win or a time-out, where it starts a fresh
        countdown on the same question.
        """
        self._require_phase("toggle_timer", _TOGGLEABLE_PHASES)
        question = self._state.question
        if question is None:
            raise InvalidStateError("toggle_timer() is not valid without a loaded question")

        if self._clock.is_running:
            self._clock.stop()
            self._transition(
                progress=matcher.empty_progress(question.expected_answers),
                timer_state=TimerState.STOPPED,
                remaining_seconds=self._timer_period,
            )
            logger.info("Timer stopped; progress forfeited")
            self._emit(self._content_ready(question, _START_LABEL))
            return

        self._clock.start(
            self._timer_period, self._tick_interval, self._on_tick, self._on_finish
        )
        self._transition(
            phase=SessionPhase.ACTIVE,
            progress=matcher.empty_progress(question.expected_answers),
            timer_state=TimerState.RUNNING,
            remaining_seconds=self._timer_period,
        )
        logger.info("Timer started: %ds", self._timer_period)
        self._emit(self._content_ready(question, _RESET_LABEL))

    def submit_answer(self, input_text: str | None) -> bool:
        """Check *input_text* against the expected answers.

        Returns True when it matched an answer not found before.  While
        the timer is not running the input is ignored and a
        :class:`~quizclock.core.events.TimerNotStarted` hint is emitted.
        """
        question = self._state.question
        if (
            self._state.phase != SessionPhase.ACTIVE
            or question is None
            or not self._clock.is_running
        ):
            self._emit(
                events.TimerNotStarted(
                    title="Ops!", message="You need to start the timer for your points to count."
                )
            )
            return False

        progress = matcher.submit(input_text, self._state.progress, question.expected_answers)
        if progress is self._state.progress:
            return False

        self._transition(progress=progress)
        logger.info("Answer accepted: %s", self._progress_text())
        self._emit(
            events.AnswerAccepted(
                answer=matcher.normalize(input_text), progress_text=self._progress_text()
            )
        )
        self._check_win()
        return True

    def reset(self) -> None:
        """Stop the clock, clear progress and load a fresh quiz."""
        self._require_phase("reset", _RESETTABLE_PHASES)
        self._clock.stop()
        self._transition(
            progress=AnswerProgress(),
            timer_state=TimerState.STOPPED,
            remaining_seconds=self._timer_period,
        )
        self._begin_load()

    # -- transitions -----------------------------------------------------------

    def _begin_load(self) -> None:
        self._load_generation += 1
        generation = self._load_generation
        self._transition(phase=SessionPhase.LOADING, reason=None)
        self._emit(events.Loading())
        try:
            self._data_source.fetch(lambda result: self._on_fetched(generation, result))
        except DataSourceError as exc:
            logger.warning("Quiz data source failed: %s", exc)
            self._on_fetched(generation, exc)

    def _on_fetched(self, generation: int, result: FetchResult) -> None:
        if generation != self._load_generation or self._state.phase != SessionPhase.LOADING:
            logger.debug("Dropping stale fetch result from load %d", generation)
            return

        if isinstance(result, DataSourceError):
            self._transition(phase=SessionPhase.ERROR, question=None, reason=str(result))
            self._emit(events.Error(title="Ooops!", message="Something wrong has happened"))
            return

        self._transition(
            phase=SessionPhase.ACTIVE,
            question=result,
            progress=matcher.empty_progress(result.expected_answers),
            timer_state=TimerState.STOPPED,
            remaining_seconds=self._timer_period,
            reason=None,
        )
        self._emit(self._content_ready(result, _START_LABEL))

    def _check_win(self) -> None:
        if not (self._state.progress.is_complete and self._clock.is_running):
            return
        # Stopping here means a pending expiry can no longer fire.
        self._clock.stop()
        self._transition(phase=SessionPhase.WON, timer_state=TimerState.STOPPED)
        self._emit(
            events.Won(
                title="Congratulations",
                summary_text=(
                    "Good job! You found all the answers on time. "
                    "Keep up with the great work."
                ),
                button_text="Play Again",
            )
        )

    def _on_tick(self, remaining: int) -> None:
        self._transition(remaining_seconds=remaining)
        self._emit(
            events.TimerTick(timer_text=format_remaining(remaining), remaining_seconds=remaining)
        )

    def _on_finish(self) -> None:
        if self._state.phase != SessionPhase.ACTIVE:
            return
        progress = self._state.progress
        self._transition(
            phase=SessionPhase.TIMED_OUT, timer_state=TimerState.EXPIRED, remaining_seconds=0
        )
        self._emit(
            events.TimedOut(
                title="Time finished",
                summary_text=(
                    f"Sorry, time is up! You got {progress.count} "
                    f"out of {progress.total} answers."
                ),
                button_text="Try Again",
            )
        )

    # -- private helpers -----------------------------------------------------

    def _transition(self, **changes: Any) -> None:
        """Replace the state snapshot, logging phase changes."""
        previous = self._state
        self._state = dataclasses.replace(previous, **changes)
        if self._state.phase != previous.phase:
            logger.info(
                "Session %s -> %s", previous.phase.value, self._state.phase.value
            )

    def _emit(self, event: events.SessionEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _require_phase(self, method: str, valid: frozenset[SessionPhase]) -> None:
        """Raise ``InvalidStateError`` if the current phase is not in *valid*."""
        if self._state.phase not in valid:
            raise InvalidStateError(
                f"{method}() is not valid from {self._state.phase.value} state"
            )

    def _progress_text(self) -> str:
        progress = self._state.progress
        return f"{progress.count:02d}/{progress.total:02d}"

    def _content_ready(self, question: QuizQuestion, button_label: str) -> events.ContentReady:
        return events.ContentReady(
            title=question.title,
            answer_count=len(question.expected_answers),
            progress_text=self._progress_text(),
            timer_text=format_remaining(self._state.remaining_seconds),
            button_label=button_label,
        )
