# magicshelf/utils/magic_shelf_exporter.py

"""Exports Magic Shelves to a portable JSON file.

Serializes shelf metadata and filter trees into a self-contained JSON
format for backup, sharing, or migration between servers.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from magicshelf.services.magic_shelf.codec import serialize
from magicshelf.services.magic_shelf.models import MagicShelf

__all__ = ["MagicShelfExporter"]

logger = logging.getLogger("magicshelf.magic_shelf_exporter")

_FORMAT_VERSION = "1.0"


class MagicShelfExporter:
    """Exports Magic Shelves to JSON format.

    The exported JSON contains shelf metadata and filters but no ids and no
    matched books (those are re-evaluated after import).
    """

    @staticmethod
    def export(shelves: list[MagicShelf], output_path: Path) -> None:
        """Exports a list of Magic Shelves to a JSON file.

        Shelves whose filter could not be decoded are skipped.

        Args:
            shelves: The Magic Shelves to export.
            output_path: The file path to write the JSON to.

        Raises:
            OSError: If the file cannot be written.
        """
        exportable = [shelf for shelf in shelves if shelf.group is not None]
        skipped = len(shelves) - len(exportable)
        if skipped:
            logger.warning("Skipping %d magic shelves without a usable filter", skipped)

        output_path.parent.mkdir(parents=True, exist_ok=True)

        payload = {
            "version": _FORMAT_VERSION,
            "count": len(exportable),
            "magic_shelves": [MagicShelfExporter._shelf_to_dict(shelf) for shelf in exportable],
        }

        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)

        logger.info("Exported %d magic shelves to %s", len(exportable), output_path)

    @staticmethod
    def _shelf_to_dict(shelf: MagicShelf) -> dict:
        """Serializes a MagicShelf to a portable dict.

        Args:
            shelf: The shelf to serialize.

        Returns:
            Dict with name, icon, icon_type, is_public and the filter tree.
        """
        return {
            "name": shelf.name,
            "icon": shelf.icon,
            "icon_type": shelf.icon_type,
            "is_public": shelf.is_public,
            "filter": serialize(shelf.group),
        }
