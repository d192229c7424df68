"""Utility helpers for application wide logging."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

_LOG_FILE = Path("robot.log")
_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_configured: list[logging.Logger] = []
# shared by every robot logger
_file_handler: Optional[RotatingFileHandler] = None


def _shared_file_handler() -> RotatingFileHandler:
    global _file_handler
    if _file_handler is None:
        _LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        _file_handler = RotatingFileHandler(
            _LOG_FILE, maxBytes=1_000_000, backupCount=3
        )
        _file_handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    return _file_handler


def configure_log_file(path: str | Path) -> None:
    """Point every robot logger, existing or future, at a new log file."""
    global _LOG_FILE, _file_handler
    if Path(path) == _LOG_FILE:
        return
    _LOG_FILE = Path(path)
    old = _file_handler
    _file_handler = None
    if old is None:
        return
    new = _shared_file_handler()
    for logger in _configured:
        logger.removeHandler(old)
        logger.addHandler(new)
    old.close()


def get_robot_logger(name: str | None = None) -> logging.Logger:
    """Return a logger configured to log robot events to a file."""
    logger = logging.getLogger(name if name else "robot")
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))

    logger.addHandler(_shared_file_handler())
    logger.addHandler(console_handler)
    logger.propagate = False
    _configured.append(logger)
    return logger


def warn_if_overrun(name: str, elapsed: float, expected: float) -> bool:
    """Log a warning if a loop iteration took longer than its period.

    Returns True when an overrun was reported.
    """
    if elapsed <= expected:
        return False
    get_robot_logger(__name__).warning(
        "[Loop] %s overrun by %.4fs (elapsed %.4fs, expected %.4fs)",
        name,
        elapsed - expected,
        elapsed,
        expected,
    )
    return True
