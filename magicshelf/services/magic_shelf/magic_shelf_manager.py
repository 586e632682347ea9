# magicshelf/services/magic_shelf/magic_shelf_manager.py

"""Magic Shelf lifecycle manager: CRUD, evaluate, count.

Orchestrates shelf persistence through an injected shelf store and
evaluation of shelf filters against the books of an injected book provider.
Neither collaborator is implemented here; any object with the methods
listed in the class docstring works.
"""

from __future__ import annotations

import logging
from typing import Any

from magicshelf.services.magic_shelf.codec import shelf_from_dict, shelf_to_dict
from magicshelf.services.magic_shelf.evaluator import MagicShelfEvaluator
from magicshelf.services.magic_shelf.models import (
    MagicShelf,
    MagicShelfGroup,
    has_at_least_one_valid_rule,
)

__all__ = ["MagicShelfManager", "MagicShelfValidationError"]

logger = logging.getLogger("magicshelf.magic_shelf.manager")


class MagicShelfValidationError(ValueError):
    """Raised when a shelf is not fit to be saved."""


class MagicShelfManager:
    """Manages Magic Shelf lifecycle: CRUD, evaluate, count.

    The shelf store must provide ``get_all() -> list[dict]``,
    ``get(shelf_id) -> dict | None``, ``save(payload: dict) -> int`` and
    ``delete(shelf_id)``; payloads use the ``{id, name, icon, iconType,
    filterJson, isPublic}`` layout. The book provider must provide
    ``get_books() -> list``.

    Attributes:
        shelf_store: Persistence backend for shelf payloads.
        book_provider: Source of the books shelves are evaluated against.
        evaluator: The rule evaluation engine.
    """

    def __init__(self, shelf_store: Any, book_provider: Any) -> None:
        """Initializes the MagicShelfManager.

        Args:
            shelf_store: Persistence backend for shelf payloads.
            book_provider: Source of the books to evaluate.
        """
        self.shelf_store = shelf_store
        self.book_provider = book_provider
        self.evaluator = MagicShelfEvaluator()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def get_all(self) -> list[MagicShelf]:
        """Loads all shelves from the store.

        Returns:
            List of MagicShelf instances. Shelves with an undecodable
            filter are included with ``group=None``.
        """
        return [shelf_from_dict(row) for row in self.shelf_store.get_all()]

    def get_shelf(self, shelf_id: int) -> MagicShelf | None:
        """Loads a single shelf.

        Args:
            shelf_id: The shelf id.

        Returns:
            MagicShelf or None if not found.
        """
        row = self.shelf_store.get(shelf_id)
        return shelf_from_dict(row) if row else None

    def save(self, shelf: MagicShelf) -> int:
        """Validates and persists a shelf (create or update).

        Args:
            shelf: The shelf to save. ``shelf_id`` is None for new shelves.

        Returns:
            The id assigned by the store.

        Raises:
            MagicShelfValidationError: If the shelf has no name or no rule
                with both field and operator set.
        """
        if not shelf.name.strip():
            msg = "Shelf name is required"
            raise MagicShelfValidationError(msg)
        if shelf.group is None or not has_at_least_one_valid_rule(shelf.group):
            msg = f"Shelf '{shelf.name}' needs at least one complete rule"
            raise MagicShelfValidationError(msg)

        is_new = shelf.shelf_id is None
        shelf_id = self.shelf_store.save(shelf_to_dict(shelf))
        shelf.shelf_id = shelf_id

        logger.info("%s magic shelf '%s' (id=%s)", "Created" if is_new else "Updated", shelf.name, shelf_id)
        return shelf_id

    def delete(self, shelf_id: int) -> None:
        """Deletes a shelf from the store.

        Args:
            shelf_id: The shelf id to delete.
        """
        self.shelf_store.delete(shelf_id)
        logger.info("Deleted magic shelf id=%s", shelf_id)

    # ------------------------------------------------------------------
    # EVALUATION
    # ------------------------------------------------------------------

    def evaluate_shelf(self, shelf: MagicShelf) -> list[Any]:
        """Evaluates a shelf's filter against all books.

        Args:
            shelf: The shelf to evaluate.

        Returns:
            Matching books in provider order; empty when the shelf has no
            usable filter.
        """
        if shelf.group is None:
            logger.warning("Magic shelf '%s' has no usable filter", shelf.name)
            return []
        return self.evaluator.filter_books(self.book_provider.get_books(), shelf.group)

    def filter_books(self, group: MagicShelfGroup) -> list[Any]:
        """Evaluates an unsaved filter tree against all books.

        Args:
            group: Root of the filter tree.

        Returns:
            Matching books in provider order.
        """
        return self.evaluator.filter_books(self.book_provider.get_books(), group)

    def get_book_count(self, shelf_id: int) -> int:
        """Counts the books on a stored shelf.

        Args:
            shelf_id: The shelf id.

        Returns:
            Number of matching books, 0 when the shelf does not exist or its
            filter cannot be decoded.
        """
        shelf = self.get_shelf(shelf_id)
        if shelf is None:
            logger.debug("Magic shelf id=%s not found", shelf_id)
            return 0
        if shelf.group is None:
            return 0
        return self.evaluator.count_matches(self.book_provider.get_books(), shelf.group)

    def count_all(self) -> dict[str, int]:
        """Counts the books on every stored shelf.

        Returns:
            Dict mapping shelf name to book count.
        """
        books = self.book_provider.get_books()
        result: dict[str, int] = {}
        for shelf in self.get_all():
            result[shelf.name] = 0 if shelf.group is None else self.evaluator.count_matches(books, shelf.group)
        logger.info("Counted %d magic shelves: %s", len(result), result)
        return result
