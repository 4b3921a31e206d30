"""Logging setup for the CLI.

Called once per run by tsgen.cli.  Every module logs through
``logging.getLogger(__name__)`` under the ``tsgen`` logger, which writes
to stderr only so stdout stays reserved for generated output.
"""

from __future__ import annotations

import logging
import sys

import click

_FMT_MINIMAL = "%(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

_PREFIXES: dict[int, tuple[str, str]] = {
    logging.WARNING: ("⚠", "yellow"),
    logging.ERROR: ("✘", "red"),
    logging.CRITICAL: ("✘", "red"),
}


class TerminalFormatter(logging.Formatter):
    """Prefix warnings and errors with a colored marker."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        prefix = _PREFIXES.get(record.levelno)
        if prefix is None:
            return message
        symbol, color = prefix
        return click.style(f"{symbol}  {message}", fg=color)


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure the ``tsgen`` logger with a single stderr handler."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    if numeric_level <= logging.DEBUG:
        formatter = TerminalFormatter(_FMT_DEBUG, datefmt=_DATEFMT_DEBUG)
    else:
        formatter = TerminalFormatter(_FMT_MINIMAL)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(formatter)

    logger = logging.getLogger("tsgen")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    return logger
