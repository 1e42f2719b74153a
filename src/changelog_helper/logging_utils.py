"""
Logger construction for changelog tooling.

Tools accept a *verbosity* name rather than a numeric level so that a
caller can silence informational output with ``"error"`` without knowing
about :mod:`logging`.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict

import click


VERBOSITY_LEVELS: Dict[str, int] = {
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

LOGGER_NAME = "changelog_helper.changelog"

LoggerFactory = Callable[[str], logging.Logger]


class ClickEchoHandler(logging.Handler):
    """Write records through :func:`click.echo` on stderr.

    The stream is looked up on every call so that a replaced or closed
    ``sys.stderr`` never breaks logging.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def get_logger(verbosity: str = "info") -> logging.Logger:
    """Return the changelog logger with its level set from ``verbosity``.

    Unknown verbosity names fall back to ``"info"``.
    """
    level = VERBOSITY_LEVELS.get(verbosity, logging.INFO)
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = ClickEchoHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(level)
    return logger
