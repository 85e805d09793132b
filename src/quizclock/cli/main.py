"""CLI entry point for quizclock.

Uses Click to expose the ``quizclock`` command group.  ``play`` hosts a
:class:`QuizSession` on an asyncio loop and feeds it lines from stdin.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Callable, TypeVar

import click

import quizclock
from quizclock.cli.render import TerminalRenderer
from quizclock.core.clock import CountdownClock
from quizclock.core.config import ConfigError, QuizConfig, load_config
from quizclock.core.datasource import DataSourceError, JsonFileDataSource
from quizclock.core.formatter import format_remaining
from quizclock.core.session import InvalidStateError, QuizSession
from quizclock.utils.logging_config import configure_logging

T = TypeVar("T")

_HELP_TEXT = (
    "Type an answer and press Enter.  Commands: "
    ":start (start/stop the timer), :reset, :load, :help, :quit"
)


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting expected errors to a CLI error.

    The message is printed to stderr and the process exits with code 1.
    """
    try:
        return action()
    except (InvalidStateError, ConfigError, DataSourceError) as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def dispatch_line(session: QuizSession, line: str) -> bool:
    """Apply one line of player input to *session*.

    Returns False when the player asked to quit.  Lifecycle calls that
    are not valid right now are reported and otherwise ignored.
    """
    text = line.strip()
    command = text.lower()
    try:
        if command == ":quit":
            return False
        if command == ":start":
            session.toggle_timer()
        elif command == ":reset":
            session.reset()
        elif command == ":load":
            session.load()
        elif command == ":help":
            click.echo(_HELP_TEXT)
        elif text:
            session.submit_answer(text)
    except InvalidStateError as exc:
        click.echo(str(exc), err=True)
    return True


async def _play(quiz_file: Path, config: QuizConfig) -> None:
    loop = asyncio.get_running_loop()
    clock = CountdownClock(loop)
    session = QuizSession(
        JsonFileDataSource(quiz_file, loop),
        clock,
        timer_period_seconds=config.timer_period_seconds,
        tick_interval_seconds=config.tick_interval_seconds,
    )
    session.subscribe(TerminalRenderer())
    finished = asyncio.Event()

    def on_stdin() -> None:
        line = sys.stdin.readline()
        if not line or not dispatch_line(session, line):
            finished.set()

    fd = sys.stdin.fileno()
    loop.add_reader(fd, on_stdin)
    try:
        click.echo(_HELP_TEXT)
        session.load()
        await finished.wait()
    finally:
        loop.remove_reader(fd)
        clock.stop()


@click.group()
@click.version_option(version=quizclock.__version__, prog_name="quizclock")
def cli() -> None:
    """quizclock: find every answer before the countdown runs out."""


@cli.command()
@click.argument("quiz_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--duration", type=click.IntRange(min=1), help="Countdown length in seconds.")
@click.option("--tick", type=click.FloatRange(min=0, min_open=True), help="Tick interval.")
@click.option("--verbose", is_flag=True, help="Log debug output to stderr.")
def play(quiz_file: Path, duration: int | None, tick: float | None, verbose: bool) -> None:
    """Play the quiz stored in QUIZ_FILE."""
    configure_logging(verbose)
    config = _run(load_config)
    config = QuizConfig(
        timer_period_seconds=duration if duration is not None else config.timer_period_seconds,
        tick_interval_seconds=tick if tick is not None else config.tick_interval_seconds,
    )
    try:
        asyncio.run(_play(quiz_file, config))
    except KeyboardInterrupt:
        click.echo("Bye.")


@cli.command()
@click.argument("quiz_file", type=click.Path(dir_okay=False, path_type=Path))
def check(quiz_file: Path) -> None:
    """Validate QUIZ_FILE and show its question."""
    question = _run(JsonFileDataSource(quiz_file).read)
    click.echo(f"{question.title} ({len(question.expected_answers)} answers)")


@cli.command(name="format")
@click.argument("seconds", type=click.IntRange(min=0))
def format_command(seconds: int) -> None:
    """Print SECONDS as MM:SS."""
    click.echo(format_remaining(seconds))
