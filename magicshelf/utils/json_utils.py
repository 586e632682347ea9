"""JSON file I/O helpers with consistent error handling.

Used for the settings file and for the book/shelf dumps read by the
command-line entry point. Failures are logged and answered with a default
value instead of an exception.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

__all__ = ["load_json", "save_json"]

logger = logging.getLogger("magicshelf.json_utils")


def load_json(path: Path, default: Any = None, expected_type: type | None = None) -> Any:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file.
        default: Value to return if the file is missing, unreadable or of the
            wrong shape. Defaults to an empty dict if None.
        expected_type: Optional type the top-level value must have
            (e.g. ``list`` for a book dump).

    Returns:
        Parsed JSON data, or the default value on failure.
    """
    if default is None:
        default = {}
    if not path.exists():
        return default
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to load JSON from %s: %s", path, exc)
        return default

    if expected_type is not None and not isinstance(data, expected_type):
        logger.warning(
            "Unexpected JSON root in %s: expected %s, got %s",
            path,
            expected_type.__name__,
            type(data).__name__,
        )
        return default
    return data


def save_json(path: Path, data: Any, ensure_parents: bool = True) -> bool:
    """Save data as indented UTF-8 JSON.

    Args:
        path: Target file path.
        data: Data to serialize as JSON.
        ensure_parents: Create parent directories if needed.

    Returns:
        True on success, False on failure.
    """
    try:
        if ensure_parents:
            path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return True
    except (OSError, TypeError) as exc:
        logger.error("Failed to save JSON to %s: %s", path, exc)
        return False
