# magicshelf/utils/magic_shelf_importer.py

"""Imports Magic Shelves from a portable JSON file.

Deserializes shelf metadata and filter trees from a JSON file previously
written by MagicShelfExporter.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from magicshelf.config import config
from magicshelf.services.magic_shelf.codec import deserialize
from magicshelf.services.magic_shelf.models import MagicShelf

__all__ = ["MagicShelfImporter"]

logger = logging.getLogger("magicshelf.magic_shelf_importer")


class MagicShelfImporter:
    """Imports Magic Shelves from JSON format.

    Unknown keys are ignored. Entries without a name or with a malformed
    filter are skipped with a warning.
    """

    @staticmethod
    def import_shelves(file_path: Path) -> list[MagicShelf]:
        """Imports Magic Shelves from a JSON file.

        Args:
            file_path: Path to the JSON file to import.

        Returns:
            List of MagicShelf instances without shelf_id, ready to be saved
            via MagicShelfManager.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the JSON is malformed or missing required keys.
        """
        if not file_path.exists():
            msg = f"File not found: {file_path}"
            raise FileNotFoundError(msg)

        with open(file_path, encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError as exc:
                msg = f"Invalid JSON: {exc}"
                raise ValueError(msg) from exc

        if not isinstance(data, dict) or "magic_shelves" not in data:
            msg = "Missing 'magic_shelves' key in JSON"
            raise ValueError(msg)

        raw_shelves = data["magic_shelves"]
        if not isinstance(raw_shelves, list):
            msg = "'magic_shelves' must be a list"
            raise ValueError(msg)

        result: list[MagicShelf] = []
        for entry in raw_shelves:
            try:
                result.append(MagicShelfImporter._dict_to_shelf(entry))
            except (ValueError, KeyError) as exc:
                logger.warning("Skipping invalid shelf entry: %s", exc)

        logger.info("Imported %d magic shelves from %s", len(result), file_path)
        return result

    @staticmethod
    def _dict_to_shelf(data: dict) -> MagicShelf:
        """Deserializes a single Magic Shelf from a dict.

        Args:
            data: Dict with name, filter and optional metadata.

        Returns:
            MagicShelf instance ready for saving.

        Raises:
            ValueError: If the name is missing or the filter is malformed.
        """
        if not isinstance(data, dict):
            msg = f"Shelf entry must be an object, got {type(data).__name__}"
            raise ValueError(msg)

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            msg = "Shelf name is required"
            raise ValueError(msg)

        return MagicShelf(
            name=name.strip(),
            icon=data.get("icon") or config.DEFAULT_ICON,
            icon_type=data.get("icon_type"),
            is_public=bool(data.get("is_public", False)),
            group=deserialize(data.get("filter", {})),
        )
