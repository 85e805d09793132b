"""User configuration read from ``~/.config/quizclock/config.json``."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from quizclock.core.session import DEFAULT_TICK_INTERVAL, DEFAULT_TIMER_PERIOD

_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "quizclock"
_CONFIG_FILE = "config.json"


class ConfigError(Exception):
    """Raised when the configuration file is malformed."""


@dataclass(frozen=True, slots=True)
class QuizConfig:
    timer_period_seconds: int = DEFAULT_TIMER_PERIOD
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL


def load_config(config_dir: Path | None = None) -> QuizConfig:
    """Load ``config.json`` from *config_dir*, falling back to defaults.

    A missing file yields the defaults; unknown keys are ignored.
    """
    path = (config_dir if config_dir is not None else _DEFAULT_CONFIG_DIR) / _CONFIG_FILE
    if not path.exists():
        return QuizConfig()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc.strerror}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{path} is not valid UTF-8: {exc.reason}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path} is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    defaults = QuizConfig()
    period = data.get("timer_period_seconds", defaults.timer_period_seconds)
    interval = data.get("tick_interval_seconds", defaults.tick_interval_seconds)

    if not isinstance(period, int) or isinstance(period, bool) or period <= 0:
        raise ConfigError(f"timer_period_seconds must be a positive integer, got {period!r}")
    if not isinstance(interval, (int, float)) or isinstance(interval, bool) or interval <= 0:
        raise ConfigError(f"tick_interval_seconds must be a positive number, got {interval!r}")
    return QuizConfig(timer_period_seconds=period, tick_interval_seconds=float(interval))
