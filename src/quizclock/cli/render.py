"""Terminal rendering of quiz session events."""

from __future__ import annotations

from functools import singledispatchmethod

import click

from quizclock.core import events

_TICK_ANNOUNCE_EVERY = 30
_TICK_ANNOUNCE_FINAL = 10


class TerminalRenderer:
    """Prints session events to the terminal.

    Passive: it only reacts to the events it receives and never reads
    session state.
    """

    def __call__(self, event: events.SessionEvent) -> None:
        self.render(event)

    @singledispatchmethod
    def render(self, event: object) -> None:
        raise TypeError(f"unsupported event: {type(event).__name__}")

    @render.register
    def _(self, event: events.Loading) -> None:
        click.echo("Loading quiz...")

    @render.register
    def _(self, event: events.ContentReady) -> None:
        click.secho(event.title, bold=True)
        click.echo(
            f"{event.answer_count} answers | found {event.progress_text} | "
            f"time {event.timer_text} | [:start] {event.button_label}"
        )

    @render.register
    def _(self, event: events.TimerTick) -> None:
        remaining = event.remaining_seconds
        if remaining <= _TICK_ANNOUNCE_FINAL or remaining % _TICK_ANNOUNCE_EVERY == 0:
            click.echo(f"{event.timer_text} left")

    @render.register
    def _(self, event: events.AnswerAccepted) -> None:
        click.secho(f"+ {event.answer}  ({event.progress_text})", fg="green")

    @render.register
    def _(self, event: events.Won) -> None:
        click.secho(event.title, fg="green", bold=True)
        click.echo(event.summary_text)
        click.echo(f"Type :reset to {event.button_text.lower()}.")

    @render.register
    def _(self, event: events.TimedOut) -> None:
        click.secho(event.title, fg="red", bold=True)
        click.echo(event.summary_text)
        click.echo(f"Type :reset to {event.button_text.lower()}.")

    @render.register
    def _(self, event: events.Error) -> None:
        click.secho(f"{event.title} {event.message}", fg="red", err=True)
        click.echo("Type :load to try again.")

    @render.register
    def _(self, event: events.TimerNotStarted) -> None:
        click.secho(f"{event.title} {event.message}", fg="yellow")
