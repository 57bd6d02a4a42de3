"""
Logging configuration for the opcache-preload CLI.

Configures the ``opcache_preload`` package logger once per invocation.
The console tier follows the CLI verbosity flags:

    --quiet      ERROR    bare message
    (default)    WARNING  "warning: <message>"
    --verbose    INFO     "[preload] <module>: <message>"
    --debug      DEBUG    timestamp, level, module:line

Without a flag, PRELOAD_LOG_LEVEL picks the level. PRELOAD_LOG_FILE adds a
file handler with full detail, at PRELOAD_LOG_FILE_LEVEL if set.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

PACKAGE_LOGGER = "opcache_preload"

ENV_LEVEL = "PRELOAD_LOG_LEVEL"
ENV_FILE = "PRELOAD_LOG_FILE"
ENV_FILE_LEVEL = "PRELOAD_LOG_FILE_LEVEL"

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ConsoleFormatter(logging.Formatter):
    """Formats records for the terminal according to the active tier."""

    def __init__(self, level: int) -> None:
        if level <= logging.DEBUG:
            super().__init__("%(asctime)s %(levelname)-7s %(name)s:%(lineno)d %(message)s", "%H:%M:%S")
        else:
            super().__init__("%(message)s")
        self._level = level

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if self._level <= logging.DEBUG:
            return message
        if self._level <= logging.INFO:
            module = record.name.rsplit(".", 1)[-1]
            return f"[preload] {module}: {message}"
        if record.levelno >= logging.WARNING and self._level < logging.ERROR:
            return f"{record.levelname.lower()}: {message}"
        return message


def parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant (WARNING if unknown)."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Console level: --debug > --verbose > --quiet > PRELOAD_LOG_LEVEL > WARNING."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    env = os.environ if environ is None else environ
    return parse_level(env.get(ENV_LEVEL))


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger.

    Safe to call repeatedly; earlier handlers are closed and replaced.
    """
    env = os.environ if environ is None else environ
    console_level = resolve_level(debug, verbose, quiet, env)

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_ConsoleFormatter(console_level))
    logger.addHandler(console)

    effective = console_level
    log_file = env.get(ENV_FILE)
    if log_file:
        file_level = parse_level(env.get(ENV_FILE_LEVEL)) if env.get(ENV_FILE_LEVEL) else console_level
        effective = min(effective, file_level)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        logger.addHandler(fh)

    logger.setLevel(effective)
    logger.propagate = False
    return logger
