"""Coloured info and error logging to standard output with a level switch."""

from __future__ import annotations

import logging
import sys
import threading
from enum import IntEnum


class Level(IntEnum):
    INFO = 0
    ERROR = 1
    DISABLED = 2


class _StdoutHandler(logging.Handler):
    """Writes to whatever ``sys.stdout`` is at emit time."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sys.stdout.write(self.format(record) + "\n")
            sys.stdout.flush()
        except Exception:
            self.handleError(record)


def _make_logger(name: str, prefix: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = _StdoutHandler()
    handler.setFormatter(
        logging.Formatter(
            prefix + "%(asctime)s %(filename)s:%(lineno)d: %(message)s",
            datefmt="%Y/%m/%d %H:%M:%S",
        )
    )
    logger.handlers[:] = [handler]
    return logger


_error_logger = _make_logger("gee.orm.error", "\033[31m[error]\033[0m ")
_info_logger = _make_logger("gee.orm.info", "\033[34m[info]\033[0m ")
_lock = threading.Lock()


def _join(args: tuple) -> str:
    return " ".join(str(arg) for arg in args)


def info(*args: object) -> None:
    """Log the arguments, joined by spaces, at info level."""
    _info_logger.info(_join(args), stacklevel=2)


def error(*args: object) -> None:
    """Log the arguments, joined by spaces, at error level."""
    _error_logger.error(_join(args), stacklevel=2)


def set_level(level: Level) -> None:
    """Silence every logger below ``level``."""
    level = Level(level)
    with _lock:
        _error_logger.disabled = level > Level.ERROR
        _info_logger.disabled = level > Level.INFO