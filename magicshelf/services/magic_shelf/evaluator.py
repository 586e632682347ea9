# magicshelf/services/magic_shelf/evaluator.py

"""Magic Shelf rule evaluation engine.

Walks a MagicShelfGroup tree against a book: nested groups recurse, rules
go through field extraction, normalization and the operator table, and the
child results fold with ``all`` (AND) or ``any`` (OR). Evaluation is a pure
function of (book, tree); the same tree can be evaluated from several
threads at once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from magicshelf.services.magic_shelf.fields import extract_list, extract_value
from magicshelf.services.magic_shelf.models import JoinType, MagicShelfGroup, MagicShelfRule
from magicshelf.services.magic_shelf.normalizer import normalize
from magicshelf.services.magic_shelf.operators import apply_operator

__all__ = ["MagicShelfEvaluator", "evaluate_group", "evaluate_rule"]

logger = logging.getLogger("magicshelf.magic_shelf.evaluator")

BookT = TypeVar("BookT")


def evaluate_rule(book: Any, rule: MagicShelfRule) -> bool:
    """Evaluates a single rule against a book.

    Args:
        book: The book record.
        rule: The rule to test.

    Returns:
        True if the book satisfies the rule. Incomplete rules are False.
    """
    subject = normalize(extract_value(book, rule.field))
    result = apply_operator(
        rule.operator,
        subject,
        rule.operand,
        lambda: extract_list(book, rule.field),
    )
    logger.debug("Rule %s %s -> %s", rule.field, rule.operator, result)
    return result


def evaluate_group(book: Any, group: MagicShelfGroup) -> bool:
    """Evaluates a group (and everything below it) against a book.

    An empty AND group is True, an empty OR group is False.

    Args:
        book: The book record.
        group: The group to evaluate.

    Returns:
        True if the book matches the group.
    """
    results = (
        evaluate_group(book, child) if isinstance(child, MagicShelfGroup) else evaluate_rule(book, child)
        for child in group.rules
    )
    if group.join is JoinType.OR:
        return any(results)
    return all(results)


class MagicShelfEvaluator:
    """Evaluates Magic Shelf filter trees against books."""

    def evaluate(self, book: Any, group: MagicShelfGroup) -> bool:
        """Checks if a book matches a filter tree.

        Args:
            book: The book to evaluate.
            group: Root of the filter tree.

        Returns:
            True if the book matches.
        """
        return evaluate_group(book, group)

    def filter_books(self, books: Iterable[BookT], group: MagicShelfGroup) -> list[BookT]:
        """Returns all books matching the filter tree, in input order.

        Args:
            books: Books to evaluate.
            group: Root of the filter tree.

        Returns:
            List of matching books.
        """
        return [book for book in books if evaluate_group(book, group)]

    def count_matches(self, books: Iterable[Any], group: MagicShelfGroup) -> int:
        """Counts the books matching the filter tree.

        Args:
            books: Books to evaluate.
            group: Root of the filter tree.

        Returns:
            Number of matching books.
        """
        return sum(1 for book in books if evaluate_group(book, group))
