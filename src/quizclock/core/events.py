"""Notifications a quiz session delivers to its presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union


@dataclass(frozen=True, slots=True)
class Loading:
    """Quiz data has been requested."""


@dataclass(frozen=True, slots=True)
class ContentReady:
    """Full screen content after a load or a timer toggle."""

    title: str
    answer_count: int
    progress_text: str
    timer_text: str
    button_label: str


@dataclass(frozen=True, slots=True)
class TimerTick:
    timer_text: str
    remaining_seconds: int


@dataclass(frozen=True, slots=True)
class AnswerAccepted:
    """A new expected answer was matched; the input can be cleared."""

    answer: str
    progress_text: str


@dataclass(frozen=True, slots=True)
class Won:
    title: str
    summary_text: str
    button_text: str


@dataclass(frozen=True, slots=True)
class TimedOut:
    title: str
    summary_text: str
    button_text: str


@dataclass(frozen=True, slots=True)
class Error:
    title: str
    message: str


@dataclass(frozen=True, slots=True)
class TimerNotStarted:
    """An answer arrived while the countdown was not running."""

    title: str
    message: str


SessionEvent = Union[
    Loading, ContentReady, TimerTick, AnswerAccepted, Won, TimedOut, Error, TimerNotStarted
]
Listener = Callable[[SessionEvent], None]
