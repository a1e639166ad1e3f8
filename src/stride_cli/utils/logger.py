"""Application-wide logger writing to platformdirs user_log_dir.

Components log through children of one ``stride_cli`` logger, so every record
lands in a single rotating file tagged with its component name, e.g.
``[stride_cli.engine]``. Nothing is written to the terminal; user-facing
output goes through the Rich formatters instead.

The level defaults to DEBUG and can be lowered with ``STRIDE_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "stride_cli"
_LOG_FILE = "stride.log"
_LEVEL_ENV = "STRIDE_LOG_LEVEL"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_logger: logging.Logger | None = None


def log_file_path() -> Path:
    """Location of the active log file."""
    return Path(user_log_dir(_APP_NAME)) / _LOG_FILE


def _level_from_env() -> int:
    name = os.environ.get(_LEVEL_ENV, "DEBUG").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.DEBUG


def _make_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def get_logger() -> logging.Logger:
    """Return the singleton application logger, initialising it on first call."""
    global _logger
    if _logger is not None:
        return _logger

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(_level_from_env())
    if not logger.handlers:
        logger.addHandler(_make_handler(log_file_path()))
    logger.propagate = False

    _logger = logger
    return _logger


def get_component_logger(component: str) -> logging.Logger:
    """Return a child of the application logger for one component."""
    return get_logger().getChild(component)
