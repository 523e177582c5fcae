"""Logging utilities."""
from __future__ import annotations

import logging
import sys
from typing import TextIO

import coloredlogs

from .config import Config


LOG_FORMAT = "%(asctime)s - %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _BelowLevelFilter(logging.Filter):
    """Pass only records strictly below the given level."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def _stream_formatter(stream: TextIO) -> logging.Formatter:
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        return coloredlogs.ColoredFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    return logging.Formatter(LOG_FORMAT, DATE_FORMAT)


def setup_logging(config: Config) -> logging.Logger:
    """Configure root logger according to config.

    Every record is appended to ``config.log_file``. Informational records go
    to stdout, warnings and errors to stderr.
    """

    logger = logging.getLogger()

    # Open the log file first so a bad LOG_FILE leaves the current handlers in place
    config.log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(config.log_file, mode="a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    # Remove existing handlers to avoid duplicate logs
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    logger.addHandler(file_handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(_BelowLevelFilter(logging.WARNING))
    stdout_handler.setFormatter(_stream_formatter(sys.stdout))
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(_stream_formatter(sys.stderr))
    logger.addHandler(stderr_handler)

    return logger
