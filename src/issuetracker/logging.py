"""Logging setup for the issue tracker service.

Every logger lives under the ``issuetracker`` namespace. ``setup_logging``
points that namespace at a rotating log file (and stderr) using the
directory and level carried by ``Settings``.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from issuetracker.config import Settings

NAMESPACE = "issuetracker"
LOG_FILE_NAME = "issuetracker.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

_FORMATTER = logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def log_file_path(settings: Settings) -> Path:
    """Location of the service log file."""
    return Path(settings.log_dir) / LOG_FILE_NAME


def setup_logging(
    settings: Settings,
    *,
    console: bool = True,
    max_bytes: int = MAX_LOG_BYTES,
    backup_count: int = LOG_BACKUPS,
) -> logging.Logger:
    """Send ``issuetracker.*`` records to the log file and, optionally, stderr.

    Handlers from an earlier call are closed and replaced.

    Args:
        settings: Supplies ``log_dir`` and ``log_level``.
        console: Also write records to stderr.
        max_bytes: Size at which the log file is rotated.
        backup_count: Number of rotated files kept.

    Returns:
        The namespace logger.
    """
    path = log_file_path(settings)
    path.parent.mkdir(parents=True, exist_ok=True)

    handlers: list[logging.Handler] = [
        RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    ]
    if console:
        handlers.append(logging.StreamHandler())

    logger = logging.getLogger(NAMESPACE)
    for old in logger.handlers:
        old.close()
    logger.handlers.clear()
    logger.setLevel(settings.log_level)
    for handler in handlers:
        handler.setFormatter(_FORMATTER)
        logger.addHandler(handler)

    logger.info("Logging to %s at level %s", path, settings.log_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a component, e.g. ``get_logger("api.requests")``."""
    if not name.startswith(f"{NAMESPACE}."):
        name = f"{NAMESPACE}.{name}"
    return logging.getLogger(name)


def truncate_output(output: str, max_length: int = 200) -> str:
    """Shorten a long value before it is logged."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"... [truncated, {len(output) - max_length} more chars]"
