"""
Debug-gated logging for the check cycle.

The user controls diagnostic output with two parameters: a debug switch
and a verbosity level from 1 (most verbose) to 5 (least).  A message
tagged with tier ``n`` is emitted only when debug is on and the level is
``<= n``.  Warnings and errors from the cycle are emitted whenever debug
is on.
"""

import logging
from collections import deque
from typing import Optional

# Verbosity tiers used by the check cycle.
TIER_TRACE = 1   # state transitions, file copy/delete, "nothing to do"
TIER_DETAIL = 2  # port found in log
TIER_CHANGE = 3  # listen port changed

LOG_BUFFER_MAX_LINES = 1000


class DebugLogger:
    """Wraps a ``logging.Logger`` with the plugin's debug flag and level."""

    def __init__(self, logger: logging.Logger, debug: bool, level: int):
        self.logger = logger
        self.debug = debug
        self.level = level

    def enabled_for(self, tier: int) -> bool:
        return self.debug and self.level <= tier

    def verbose(self, tier: int, msg: str, *args) -> None:
        if self.enabled_for(tier):
            self.logger.info(msg, *args)

    def info(self, msg: str, *args) -> None:
        if self.debug:
            self.logger.info(msg, *args)

    def warning(self, msg: str, *args) -> None:
        if self.debug:
            self.logger.warning(msg, *args)

    def error(self, msg: str, *args, exc_info: bool = False) -> None:
        if self.debug:
            self.logger.error(msg, *args, exc_info=exc_info)


class LogBuffer(logging.Handler):
    """Keeps the most recent formatted records for the preferences log view."""

    def __init__(self, max_lines: int = LOG_BUFFER_MAX_LINES, level: int = logging.NOTSET):
        super().__init__(level)
        self._lines: deque = deque(maxlen=max_lines)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._lines.append(self.format(record))
        except Exception:
            self.handleError(record)

    def lines(self, limit: Optional[int] = None) -> list[str]:
        """Return buffered lines, oldest first; the last *limit* if given."""
        snapshot = list(self._lines)
        if limit is not None:
            return snapshot[-limit:] if limit > 0 else []
        return snapshot
