"""Structured event lines on top of stdlib logging.

Events are keyword fields rendered as ``key=value`` pairs (or one compact JSON
object) and emitted through an ordinary ``logging.Logger``, so they share the
console and rotating-file handlers set up in ``portfolio.server``.

Usage:
    from portfolio.logging_utils import log
    log.info(event="levels_replaced", count=7, actor="admin")

Environment:
    PORTFOLIO_LOG_LEVEL  threshold for the ``portfolio`` logger tree (debug/info/warn/error)
    PORTFOLIO_LOG_JSON   1/true/yes/on switches to JSON lines

Reserved keys: level, ts.
"""

from __future__ import annotations

import functools
import json
import logging
import os
import time

_LEVEL_NAMES = {"debug": logging.DEBUG, "info": logging.INFO, "warn": logging.WARNING, "error": logging.ERROR}
JSON_MODE = os.getenv("PORTFOLIO_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")

_env_level = os.getenv("PORTFOLIO_LOG_LEVEL")
if _env_level in _LEVEL_NAMES:
    logging.getLogger("portfolio").setLevel(_LEVEL_NAMES[_env_level])


def format_fields(level: str, json_mode: bool = JSON_MODE, **fields) -> str:
    """Render one event line; ``None`` values are dropped."""
    present = {k: v for k, v in fields.items() if v is not None}
    stamp = int(time.time())
    if json_mode:
        return json.dumps({**present, "level": level, "ts": stamp}, separators=(",", ":"), default=str)
    pairs = [f"level={level}", f"ts={stamp}"]
    pairs += [f"{k}={v}" if isinstance(v, (int, float)) else f"{k}={str(v).replace(' ', '_')}" for k, v in present.items()]
    return " ".join(pairs)


class EventLogger:
    """Field-only facade over a stdlib logger: ``events.warn(event="x", n=1)``."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def emit(self, level_name: str, **fields) -> None:
        level = _LEVEL_NAMES[level_name]
        if self.logger.isEnabledFor(level):
            self.logger.log(level, format_fields(level_name, **fields))

    def debug(self, **fields):
        self.emit("debug", **fields)

    def info(self, **fields):
        self.emit("info", **fields)

    def warn(self, **fields):
        self.emit("warn", **fields)

    def error(self, **fields):
        self.emit("error", **fields)


@functools.lru_cache(maxsize=None)
def get_logger(name: str) -> EventLogger:
    return EventLogger(name)


log = get_logger("portfolio")
