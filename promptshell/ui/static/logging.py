#!/usr/bin/env python3
# promptshell/ui/static/logging.py
from __future__ import annotations

"""
Logger setup for the bundled REPL.

Library modules only call `logging.getLogger(__name__)`; handlers are
installed here, once, by whoever boots the shell.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from promptshell.ui.utils import PRINT_MUTEX, colorize, strip_ansi, supports_color

_CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"
_FILE_MAX_BYTES = 2_000_000
_FILE_BACKUPS = 3


class ColorizingStreamHandler(logging.StreamHandler):
    """Console handler that colors whole records by level on terminals."""

    LEVEL_STYLES = {
        logging.DEBUG: ("bright_black",),
        logging.WARNING: ("yellow",),
        logging.ERROR: ("red",),
        logging.CRITICAL: ("magenta", "bold"),
    }

    def __init__(self, stream=None) -> None:
        super().__init__(stream)
        self.use_color = supports_color(self.stream)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            text = self.format(record)
            if self.use_color:
                text = colorize(text, *self.LEVEL_STYLES.get(record.levelno, ()))
            else:
                text = strip_ansi(text)
            # Share the console lock with REPL output so lines never interleave.
            with PRINT_MUTEX:
                self.stream.write(text + self.terminator)
                self.flush()
        except Exception:  # noqa: BLE001
            self.handleError(record)


class PlainFormatter(logging.Formatter):
    """Formatter for log files: escape sequences are removed from the output."""

    def format(self, record: logging.LogRecord) -> str:
        return strip_ansi(super().format(record))


def _has_handler(logger: logging.Logger, kind: type) -> bool:
    return any(isinstance(handler, kind) for handler in logger.handlers)


def init_logger(
    name: str = "promptshell",
    level: int | str = logging.WARNING,
    logfile: Optional[str] = None,
) -> logging.Logger:
    """
    Configure and return the `name` logger.

    Installs a colorizing stderr handler at `level` and, with `logfile`, a
    rotating UTF-8 file handler that records everything from DEBUG up.
    Calling it again does not duplicate handlers.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if logfile else level)
    logger.propagate = False

    if not _has_handler(logger, ColorizingStreamHandler):
        console = ColorizingStreamHandler(stream=sys.stderr)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        logger.addHandler(console)

    if logfile and not _has_handler(logger, RotatingFileHandler):
        file_handler = RotatingFileHandler(
            logfile, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(PlainFormatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        logger.addHandler(file_handler)

    return logger
