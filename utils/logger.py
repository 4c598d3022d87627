"""
Logging setup for the coach process.
Call setup_logging() once at startup in main.py.

The console presenter also writes to stdout, so log records go to stderr by
default and report text stays readable when logs are redirected.
"""

from __future__ import annotations
import logging
import sys
import time
from typing import TextIO

# Chatty third-party loggers capped at WARNING
_NOISY_LOGGERS = ("aiohttp.access", "aiohttp.server", "asyncio")


class _NsFormatter(logging.Formatter):
    """Adds monotonic nanosecond timestamp to every log record."""

    def format(self, record: logging.LogRecord) -> str:
        record.mono_ns = time.monotonic_ns()
        return super().format(record)


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> logging.Handler:
    numeric = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        _NsFormatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s | mono_ns=%(mono_ns)d | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    root = logging.getLogger()
    root.setLevel(numeric)
    root.handlers.clear()
    root.addHandler(handler)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))
    return handler
