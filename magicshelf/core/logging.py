"""Centralized logging configuration for the Magic Shelf engine.

The package logs through children of the ``magicshelf`` logger
(``logging.getLogger("magicshelf.<area>")``). Applications embedding the
engine call :func:`setup_logging` once; library use without it stays silent
apart from Python's last-resort handler.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

__all__ = ["LOG_FORMAT", "logger", "parse_level", "setup_logging"]

logger = logging.getLogger("magicshelf")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_level(name: str | int | None, default: int = logging.INFO) -> int:
    """Turns a level name from settings or the environment into a logging level.

    Args:
        name: Level name (``"debug"``, ``"WARNING"``), a numeric level, or None.
        default: Level used when the name is empty or unknown.

    Returns:
        The numeric logging level.
    """
    if isinstance(name, int):
        return name
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
) -> None:
    """Attach console (and optionally file) handlers to the package logger.

    Calling it again only adjusts the level; handlers are attached once.

    Args:
        level: The logging level for the console (default: INFO).
        log_file: Optional log file. It always receives DEBUG output.
    """
    logger.setLevel(min(level, logging.DEBUG) if log_file is not None else level)

    if logger.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
