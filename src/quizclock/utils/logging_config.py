"""Logging configuration helpers for quizclock."""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(verbose: bool = False) -> Logger:
    """Configure basic logging and return the package logger.

    Defaults to WARNING so log lines stay out of the game screen.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("quizclock")
