#!/usr/bin/env python3
"""Magic Shelf - command-line entry point.

Usage::

    python -m magicshelf.main BOOKS_JSON [SHELVES_JSON]

``BOOKS_JSON`` holds a list of book payloads as delivered by the library
API. ``SHELVES_JSON`` is a shelf export (defaults to the configured export
file). Prints the number of matching books for every shelf.
"""

from __future__ import annotations

import sys
from pathlib import Path

from magicshelf.config import config
from magicshelf.core.book import Book
from magicshelf.core.logging import logger, parse_level, setup_logging
from magicshelf.services.magic_shelf.evaluator import MagicShelfEvaluator
from magicshelf.utils.json_utils import load_json
from magicshelf.utils.magic_shelf_importer import MagicShelfImporter
from magicshelf.version import __app_name__, __version__

__all__ = ["main"]

USAGE = "usage: magicshelf BOOKS_JSON [SHELVES_JSON]"


def load_books(file_path: Path) -> list[Book]:
    """Load book payloads from a JSON file.

    Args:
        file_path: Path to a JSON list of book objects.

    Returns:
        The parsed books. Entries that are not objects are skipped.
    """
    raw_books = load_json(file_path, default=[], expected_type=list)
    books = [Book.from_dict(entry) for entry in raw_books if isinstance(entry, dict)]
    if len(books) != len(raw_books):
        logger.warning("Skipped %d malformed book entries", len(raw_books) - len(books))
    return books


def main(argv: list[str] | None = None) -> int:
    """Run the shelf counter.

    Args:
        argv: Command-line arguments without the program name. Defaults to
            ``sys.argv[1:]``.

    Returns:
        Process exit code.
    """
    args = sys.argv[1:] if argv is None else argv
    if not args or args[0] in ("-h", "--help") or len(args) > 2:
        print(USAGE)
        return 0 if args and args[0] in ("-h", "--help") else 2

    setup_logging(parse_level(config.LOG_LEVEL), config.LOG_FILE)
    logger.debug("%s %s", __app_name__, __version__)

    books_path = Path(args[0])
    shelves_path = Path(args[1]) if len(args) > 1 else config.EXPORT_FILE

    if not books_path.exists():
        logger.error("Books file not found: %s", books_path)
        return 1

    try:
        shelves = MagicShelfImporter.import_shelves(shelves_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Could not load shelves: %s", e)
        return 1

    books = load_books(books_path)
    evaluator = MagicShelfEvaluator()
    for shelf in shelves:
        print(f"{shelf.name}: {evaluator.count_matches(books, shelf.group)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
