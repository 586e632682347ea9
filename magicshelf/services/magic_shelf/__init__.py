"""Magic Shelves service: rule-based dynamic book shelves.

Provides models, evaluation engine, codec and manager for Magic Shelves that
automatically match books based on nested AND/OR rule groups.
"""

from __future__ import annotations

from magicshelf.services.magic_shelf.codec import MagicShelfDecodeError, dumps, loads
from magicshelf.services.magic_shelf.evaluator import MagicShelfEvaluator, evaluate_group
from magicshelf.services.magic_shelf.magic_shelf_manager import MagicShelfManager, MagicShelfValidationError
from magicshelf.services.magic_shelf.models import (
    JoinType,
    MagicShelf,
    MagicShelfGroup,
    MagicShelfRule,
    RuleField,
    RuleOperator,
)

__all__: list[str] = [
    "JoinType",
    "MagicShelf",
    "MagicShelfDecodeError",
    "MagicShelfEvaluator",
    "MagicShelfGroup",
    "MagicShelfManager",
    "MagicShelfRule",
    "MagicShelfValidationError",
    "RuleField",
    "RuleOperator",
    "dumps",
    "evaluate_group",
    "loads",
]
