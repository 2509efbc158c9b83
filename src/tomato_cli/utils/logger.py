"""Logging for the pomodoro CLI.

Everything goes to a rotating file under the platform log directory; the
terminal belongs to the timer output.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "tomato_cli"
LOG_FILENAME = "tomato.log"
_ROTATE_AT = 5 * 1024 * 1024  # 5 MB
_KEEP = 3
_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_logger: logging.Logger | None = None


def log_file() -> Path:
    """Path of the current log file."""
    return Path(user_log_dir(APP_NAME)) / LOG_FILENAME


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=_ROTATE_AT, backupCount=_KEEP, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def get_logger() -> logging.Logger:
    """Return the shared ``tomato_cli`` logger, creating it on first use."""
    global _logger
    if _logger is None:
        logger = logging.getLogger(APP_NAME)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        # Other handlers may already be attached, e.g. by a test runner
        if not any(
            isinstance(h, logging.handlers.RotatingFileHandler)
            for h in logger.handlers
        ):
            logger.addHandler(_file_handler(log_file()))
        _logger = logger
    return _logger
