"""Domain models for quiz sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TimerState(Enum):
    """Possible states of the countdown clock."""

    STOPPED = "stopped"
    RUNNING = "running"
    EXPIRED = "expired"


class SessionPhase(Enum):
    """Possible phases of a quiz session."""

    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"
    WON = "won"
    TIMED_OUT = "timed_out"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class QuizQuestion:
    """A question title and the answers the player has to find."""

    title: str
    expected_answers: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: Any) -> QuizQuestion:
        """Build a question from ``{"question": str, "answer": [str, ...]}``.

        Raises ``ValueError`` when *data* does not have that shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"quiz data must be an object, got {type(data).__name__}")
        title = data.get("question")
        answers = data.get("answer")
        if not isinstance(title, str):
            raise ValueError("quiz data is missing a 'question' string")
        if not isinstance(answers, list) or not all(isinstance(a, str) for a in answers):
            raise ValueError("quiz data is missing an 'answer' list of strings")
        return cls(title=title, expected_answers=tuple(answers))


@dataclass(frozen=True, slots=True)
class AnswerProgress:
    """The normalized answers matched so far, out of *total*."""

    matched: frozenset[str] = frozenset()
    total: int = 0

    @property
    def count(self) -> int:
        return len(self.matched)

    @property
    def is_complete(self) -> bool:
        return self.count > 0 and self.count == self.total


@dataclass(frozen=True, slots=True)
class SessionState:
    """Snapshot of a session; replaced as a whole on every transition."""

    phase: SessionPhase = SessionPhase.IDLE
    question: QuizQuestion | None = None
    progress: AnswerProgress = field(default_factory=AnswerProgress)
    timer_state: TimerState = TimerState.STOPPED
    remaining_seconds: int = 0
    reason: str | None = None
