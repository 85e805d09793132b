"""Answer matching -- pure functions over ``AnswerProgress``."""

from __future__ import annotations

import re
from typing import Iterable

from quizclock.core.models import AnswerProgress


def normalize(text: str | None) -> str:
    """Trim and collapse whitespace, then case-fold *text*."""
    if text is None:
        return ""
    return re.sub(r"\s+", " ", text.strip()).casefold()


def empty_progress(expected: Iterable[str]) -> AnswerProgress:
    """Return a progress with nothing matched for the *expected* answers."""
    distinct = {normalize(answer) for answer in expected}
    distinct.discard("")
    return AnswerProgress(matched=frozenset(), total=len(distinct))


def submit(
    input_text: str | None, progress: AnswerProgress, expected: Iterable[str]
) -> AnswerProgress:
    """Match *input_text* against *expected* and return the resulting progress.

    Returns *progress* itself when the input matches nothing or an answer
    that was already found.
    """
    candidate = normalize(input_text)
    if not candidate or candidate in progress.matched:
        return progress
    if candidate not in {normalize(answer) for answer in expected}:
        return progress
    return AnswerProgress(matched=progress.matched | {candidate}, total=progress.total)
