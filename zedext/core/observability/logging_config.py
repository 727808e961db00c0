"""
Logging configuration — one call from the CLI group, before any command runs.

Only the ``zedext`` logger tree is configured; every module logs through
``logging.getLogger(__name__)`` and inherits it.

Console level, highest precedence first:
    --debug  >  --verbose  >  --quiet  >  $ZEDEXT_LOG_LEVEL  >  WARNING

At the default level the console shows only what the user should act on
(download retries, for instance) and reads like the CLI's own output::

      warning: retry 1/5 in 2s...

$ZEDEXT_LOG_FILE adds a file with full detail, at $ZEDEXT_LOG_FILE_LEVEL
(default: the console level).
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LOGGER_NAME = "zedext"

ENV_LEVEL = "ZEDEXT_LOG_LEVEL"
ENV_FILE = "ZEDEXT_LOG_FILE"
ENV_FILE_LEVEL = "ZEDEXT_LOG_FILE_LEVEL"

_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_CONSOLE = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


class _CliFormatter(logging.Formatter):
    """``  warning: message``, matching how commands print warnings."""

    def format(self, record: logging.LogRecord) -> str:
        text = f"  {record.levelname.lower()}: {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env_level: str | None = None,
) -> int:
    """Console level from the global CLI flags, then the environment."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    return _parse_level(env_level, logging.WARNING)


def setup_logging(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> logging.Logger:
    """Configure the ``zedext`` logger for this invocation.

    Safe to call more than once (CliRunner tests invoke the group many
    times in one process); handlers from a previous call are replaced.

    Returns:
        The configured ``zedext`` logger.
    """
    env = os.environ if env is None else env
    console_level = resolve_level(debug, verbose, quiet, env.get(ENV_LEVEL))

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))
    logger.addHandler(console)

    effective = console_level
    log_file = env.get(ENV_FILE)
    if log_file:
        file_level = _parse_level(env.get(ENV_FILE_LEVEL), console_level)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        logger.addHandler(fh)
        effective = min(effective, file_level)

    logger.setLevel(effective)
    return logger


def _console_formatter(level: int) -> logging.Formatter:
    if level <= logging.DEBUG:
        return logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_CONSOLE)
    if level <= logging.INFO:
        return logging.Formatter(_FMT_VERBOSE, datefmt=_DATEFMT_CONSOLE)
    return _CliFormatter()


def _parse_level(name: str | None, default: int) -> int:
    """Level name (any case) to its numeric value; unknown names give ``default``."""
    if not name:
        return default
    numeric = logging.getLevelName(name.strip().upper())
    return numeric if isinstance(numeric, int) else default
