# magicshelf/services/magic_shelf/operators.py

"""Operator semantics for Magic Shelf rules.

Each RuleOperator has exactly one handler in ``OPERATOR_HANDLERS``. A handler
receives an ``OperatorContext`` with the normalized subject, the rule's
tagged operand and a callable producing the set view of the field, and
returns a boolean. Handlers never raise: mismatched types, missing values
and NaN all resolve to a fixed answer (mostly False).
"""

from __future__ import annotations

import operator as op
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from magicshelf.services.magic_shelf.models import (
    Operand,
    RangeOperand,
    RuleOperator,
    ScalarOperand,
    SetOperand,
)
from magicshelf.services.magic_shelf.normalizer import NormalizedValue, to_number

__all__ = ["OPERATOR_HANDLERS", "OperatorContext", "apply_operator"]


@dataclass(frozen=True)
class OperatorContext:
    """Inputs of a single operator application.

    Attributes:
        subject: The normalized book value.
        operand: The rule's operand variant.
        list_view: Returns the field as a lower-cased list for set operators.
    """

    subject: NormalizedValue
    operand: Operand
    list_view: Callable[[], list[str]]

    @property
    def scalar(self) -> NormalizedValue:
        """The normalized single operand, None for range and set operands."""
        return self.operand.value if isinstance(self.operand, ScalarOperand) else None

    @property
    def operand_list(self) -> list[str]:
        """The operand as a lower-cased list (for list subjects)."""
        if isinstance(self.operand, ScalarOperand):
            return self.operand.as_list()
        if isinstance(self.operand, SetOperand):
            return list(self.operand.values)
        return []

    @property
    def set_values(self) -> tuple[str, ...]:
        """The set operand values, empty for other operand kinds."""
        return self.operand.values if isinstance(self.operand, SetOperand) else ()


# ========================================================================
# EQUALITY
# ========================================================================


def _strict_equals(left: Any, right: Any) -> bool:
    """Type-aware equality: ``1 == True`` and ``"1" == 1`` are both False."""
    if isinstance(left, datetime) and isinstance(right, datetime):
        return left == right
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return False


def _equals(ctx: OperatorContext) -> bool:
    if isinstance(ctx.subject, list):
        wanted = ctx.operand_list
        return any(v in wanted for v in ctx.subject)
    return _strict_equals(ctx.subject, ctx.scalar)


def _not_equals(ctx: OperatorContext) -> bool:
    if isinstance(ctx.subject, list):
        wanted = ctx.operand_list
        return all(v not in wanted for v in ctx.subject)
    return not _strict_equals(ctx.subject, ctx.scalar)


# ========================================================================
# TEXT
# ========================================================================


def _text_match(test: Callable[[str, str], bool], *, negate: bool = False) -> Callable[[OperatorContext], bool]:
    """Builds a text handler; ``negate`` turns "any matches" into "none matches"."""

    def handler(ctx: OperatorContext) -> bool:
        target = ctx.scalar
        if not isinstance(target, str):
            return negate
        if isinstance(ctx.subject, list):
            hit = any(test(str(v), target) for v in ctx.subject)
        elif isinstance(ctx.subject, str):
            hit = test(ctx.subject, target)
        else:
            return negate
        return not hit if negate else hit

    return handler


# ========================================================================
# COMPARISON
# ========================================================================


def _compare(cmp: Callable[[Any, Any], bool]) -> Callable[[OperatorContext], bool]:
    def handler(ctx: OperatorContext) -> bool:
        left, right = ctx.subject, ctx.scalar
        if isinstance(left, datetime) and isinstance(right, datetime):
            return cmp(left, right)
        # NaN compares False against everything
        return cmp(to_number(left), to_number(right))

    return handler


def _in_between(ctx: OperatorContext) -> bool:
    if not isinstance(ctx.operand, RangeOperand):
        return False
    value, start, end = ctx.subject, ctx.operand.start, ctx.operand.end
    if value is None or start is None or end is None:
        return False
    if isinstance(value, datetime) and isinstance(start, datetime) and isinstance(end, datetime):
        return start <= value <= end
    num = to_number(value)
    return to_number(start) <= num and num <= to_number(end)


# ========================================================================
# EMPTINESS
# ========================================================================


def _is_empty(ctx: OperatorContext) -> bool:
    value = ctx.subject
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, list):
        return len(value) == 0
    return False


def _is_not_empty(ctx: OperatorContext) -> bool:
    value = ctx.subject
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, list):
        return len(value) > 0
    return True


# ========================================================================
# SET OPERATORS
# ========================================================================


def _includes_all(ctx: OperatorContext) -> bool:
    book_values = ctx.list_view()
    return all(v in book_values for v in ctx.set_values)


def _excludes_all(ctx: OperatorContext) -> bool:
    book_values = ctx.list_view()
    return all(v not in book_values for v in ctx.set_values)


def _includes_any(ctx: OperatorContext) -> bool:
    book_values = ctx.list_view()
    return any(v in book_values for v in ctx.set_values)


OPERATOR_HANDLERS: dict[RuleOperator, Callable[[OperatorContext], bool]] = {
    RuleOperator.EQUALS: _equals,
    RuleOperator.NOT_EQUALS: _not_equals,
    RuleOperator.CONTAINS: _text_match(lambda s, t: t in s),
    RuleOperator.DOES_NOT_CONTAIN: _text_match(lambda s, t: t in s, negate=True),
    RuleOperator.STARTS_WITH: _text_match(str.startswith),
    RuleOperator.ENDS_WITH: _text_match(str.endswith),
    RuleOperator.GREATER_THAN: _compare(op.gt),
    RuleOperator.GREATER_THAN_EQUAL_TO: _compare(op.ge),
    RuleOperator.LESS_THAN: _compare(op.lt),
    RuleOperator.LESS_THAN_EQUAL_TO: _compare(op.le),
    RuleOperator.IN_BETWEEN: _in_between,
    RuleOperator.IS_EMPTY: _is_empty,
    RuleOperator.IS_NOT_EMPTY: _is_not_empty,
    RuleOperator.INCLUDES_ANY: _includes_any,
    RuleOperator.EXCLUDES_ALL: _excludes_all,
    RuleOperator.INCLUDES_ALL: _includes_all,
}


def apply_operator(
    operator: RuleOperator | str,
    subject: NormalizedValue,
    operand: Operand,
    list_view: Callable[[], list[str]],
) -> bool:
    """Applies an operator to a normalized subject and operand.

    Args:
        operator: The rule operator. Unknown operators never match.
        subject: The normalized book value.
        operand: The rule's operand variant.
        list_view: Lazily produces the field's set view.

    Returns:
        The predicate result.
    """
    handler = OPERATOR_HANDLERS.get(operator) if isinstance(operator, RuleOperator) else None
    if handler is None:
        return False
    return handler(OperatorContext(subject=subject, operand=operand, list_view=list_view))
