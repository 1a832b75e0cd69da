"""Logging for the ``expense_dashboard`` package.

Modules log through ``get_logger(__name__)``. Nothing is printed until the
entrypoint calls ``configure_logging``; before that the package logger only
carries a ``NullHandler``. Calling ``configure_logging`` again changes the
level of the console handler already installed instead of adding a second one.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "expense_dashboard"
LOG_LEVEL_ENV = "EXPENSE_DASHBOARD_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class _ConsoleHandler(logging.StreamHandler):
    """Marks the handler installed by configure_logging."""


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    text = str(level).strip().upper()
    if text.isdigit():
        return int(text)
    resolved = logging.getLevelName(text)
    if not isinstance(resolved, int):
        raise ValueError(f"Invalid log level: {level!r}")
    return resolved


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Send package records to ``stream`` (stderr by default).

    ``level`` falls back to ``EXPENSE_DASHBOARD_LOG_LEVEL`` and then INFO.
    """
    resolved = _parse_level(level)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    console = next((h for h in package_logger.handlers if isinstance(h, _ConsoleHandler)), None)
    if console is None:
        console = _ConsoleHandler(stream or sys.stderr)
        package_logger.addHandler(console)
    elif stream is not None:
        console.setStream(stream)
    console.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    console.setLevel(resolved)
    package_logger.setLevel(resolved)
    package_logger.propagate = False
    return package_logger


def get_logger(name: str) -> logging.Logger:
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
