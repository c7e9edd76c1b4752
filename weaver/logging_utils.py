"""Shared logging helpers for weaver components."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

ROOT_LOGGER = "weaver"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def ensure_log_dir(log_dir: Path) -> Path:
    """Ensure the logs directory exists."""
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def has_rotating_handler(logger: logging.Logger, filename: str) -> bool:
    """Check if the logger already has a RotatingFileHandler for the given file."""
    return any(
        isinstance(handler, RotatingFileHandler)
        and Path(handler.baseFilename).name == filename
        for handler in logger.handlers
    )


def add_rotating_handler(
    logger: logging.Logger,
    log_dir: Path,
    filename: str,
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    max_bytes: int = 5_000_000,
    backup_count: int = 7,
) -> RotatingFileHandler:
    """Attach a rotating file handler to the logger."""
    handler = RotatingFileHandler(
        ensure_log_dir(log_dir) / filename,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    return handler


def _has_console_handler(logger: logging.Logger) -> bool:
    return any(getattr(handler, "_weaver_console", False) for handler in logger.handlers)


def resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = None,
    prefix: str = "weaver",
) -> List[logging.Handler]:
    """
    Configure the ``weaver`` logger namespace.

    A console handler on stderr is installed once; calling again only
    changes the level. When ``log_dir`` is given, general and error-only
    rotating files are added as well.

    Args:
        level: Level name or number for the namespace.
        log_dir: Directory for rotating log files.
        prefix: File prefix (``<prefix>.log``, ``<prefix>_errors.log``).
    """
    level = resolve_level(level)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    handlers: List[logging.Handler] = []
    if not _has_console_handler(logger):
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        console._weaver_console = True
        logger.addHandler(console)
        handlers.append(console)

    if log_dir is not None:
        general_name = f"{prefix}.log"
        error_name = f"{prefix}_errors.log"
        if not has_rotating_handler(logger, general_name):
            handlers.append(add_rotating_handler(logger, log_dir, general_name, level))
        if not has_rotating_handler(logger, error_name):
            handlers.append(add_rotating_handler(logger, log_dir, error_name, logging.ERROR))

    return handlers


__all__ = [
    "configure_logging",
    "ensure_log_dir",
    "resolve_level",
]
