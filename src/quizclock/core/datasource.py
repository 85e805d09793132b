"""Sources of quiz questions.

A data source completes each ``fetch`` exactly once, asynchronously, by
calling ``on_complete`` with either a :class:`QuizQuestion` or a
:class:`DataSourceError`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Callable, Protocol, Union

from quizclock.core.models import QuizQuestion

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """Raised (or delivered) when quiz data cannot be fetched or decoded."""


FetchResult = Union[QuizQuestion, DataSourceError]


class QuizDataSource(Protocol):
    def fetch(self, on_complete: Callable[[FetchResult], None]) -> None: ...


def _resolve_loop(loop: asyncio.AbstractEventLoop | None) -> asyncio.AbstractEventLoop:
    return loop if loop is not None else asyncio.get_running_loop()


class StaticDataSource:
    """Serves one in-memory question."""

    def __init__(
        self, question: QuizQuestion, loop: asyncio.AbstractEventLoop | None = None
    ) -> None:
        self._question = question
        self._loop = loop

    def fetch(self, on_complete: Callable[[FetchResult], None]) -> None:
        _resolve_loop(self._loop).call_soon(on_complete, self._question)


class JsonFileDataSource:
    """Reads a question from a JSON file shaped ``{"question": ..., "answer": [...]}``.

    The file is read when the loop runs the completion callback, so every
    fetch completes asynchronously, failures included.
    """

    def __init__(self, path: Path, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._path = Path(path)
        self._loop = loop

    def fetch(self, on_complete: Callable[[FetchResult], None]) -> None:
        _resolve_loop(self._loop).call_soon(self._complete, on_complete)

    def read(self) -> QuizQuestion:
        """Read and decode the file synchronously."""
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise DataSourceError(f"cannot read {self._path}: {exc.strerror}") from exc
        except UnicodeDecodeError as exc:
            raise DataSourceError(f"{self._path} is not valid UTF-8: {exc.reason}") from exc
        except json.JSONDecodeError as exc:
            raise DataSourceError(f"{self._path} is not valid JSON: {exc.msg}") from exc
        try:
            return QuizQuestion.from_dict(data)
        except ValueError as exc:
            raise DataSourceError(f"{self._path}: {exc}") from exc

    def _complete(self, on_complete: Callable[[FetchResult], None]) -> None:
        try:
            result: FetchResult = self.read()
        except DataSourceError as exc:
            logger.warning("Fetching quiz failed: %s", exc)
            result = exc
        on_complete(result)
