# magicshelf/services/magic_shelf/models.py

"""Data models for Magic Shelves: enums, descriptors, rule tree dataclasses.

Defines the rule language (filterable fields with their static descriptors,
operators grouped in families, AND/OR joins), the tagged operand variants,
the immutable Rule/Group tree and the MagicShelf that owns a tree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from magicshelf.config import config
from magicshelf.services.magic_shelf.normalizer import NormalizedValue, lower_list, normalize

__all__ = [
    "FIELD_DESCRIPTORS",
    "MULTI_VALUE_OPERATORS",
    "OPERATOR_FAMILIES",
    "OPERATOR_LABELS",
    "FieldDescriptor",
    "FieldType",
    "JoinType",
    "MagicShelf",
    "MagicShelfGroup",
    "MagicShelfRule",
    "Node",
    "Operand",
    "OperatorFamily",
    "RangeOperand",
    "RuleField",
    "RuleOperator",
    "ScalarOperand",
    "SetOperand",
    "build_operand",
    "coerce_field",
    "coerce_operator",
    "descriptor_for",
    "has_at_least_one_valid_rule",
    "valid_operators",
]

logger = logging.getLogger("magicshelf.magic_shelf.models")


class RuleField(Enum):
    """Book attributes a Magic Shelf rule can filter on."""

    LIBRARY = "library"
    TITLE = "title"
    SUBTITLE = "subtitle"
    AUTHORS = "authors"
    CATEGORIES = "categories"
    PUBLISHER = "publisher"
    PUBLISHED_DATE = "publishedDate"
    SERIES_NAME = "seriesName"
    SERIES_NUMBER = "seriesNumber"
    SERIES_TOTAL = "seriesTotal"
    PAGE_COUNT = "pageCount"
    LANGUAGE = "language"
    AMAZON_RATING = "amazonRating"
    AMAZON_REVIEW_COUNT = "amazonReviewCount"
    GOODREADS_RATING = "goodreadsRating"
    GOODREADS_REVIEW_COUNT = "goodreadsReviewCount"
    HARDCOVER_RATING = "hardcoverRating"
    HARDCOVER_REVIEW_COUNT = "hardcoverReviewCount"
    PERSONAL_RATING = "personalRating"
    FILE_TYPE = "fileType"
    FILE_SIZE = "fileSize"
    READ_STATUS = "readStatus"
    DATE_FINISHED = "dateFinished"
    LAST_READ_TIME = "lastReadTime"
    METADATA_SCORE = "metadataScore"
    MOODS = "moods"
    TAGS = "tags"


class FieldType(Enum):
    """Semantic type of a field. Fields without one are plain text."""

    NUMBER = "number"
    DECIMAL = "decimal"
    DATE = "date"


class RuleOperator(Enum):
    """Comparison operators for Magic Shelf rules."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does_not_contain"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    GREATER_THAN_EQUAL_TO = "greater_than_equal_to"
    LESS_THAN = "less_than"
    LESS_THAN_EQUAL_TO = "less_than_equal_to"
    IN_BETWEEN = "in_between"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    INCLUDES_ANY = "includes_any"
    EXCLUDES_ALL = "excludes_all"
    INCLUDES_ALL = "includes_all"


class OperatorFamily(Enum):
    """Groups of operators that share the same field eligibility."""

    BASE = "base"
    MULTI_VALUE = "multi_value"
    TEXT = "text"
    COMPARISON = "comparison"


class JoinType(Enum):
    """How the children of a group are combined."""

    AND = "and"
    OR = "or"


# ========================================================================
# FIELD DESCRIPTORS
# ========================================================================


@dataclass(frozen=True)
class FieldDescriptor:
    """Static metadata about a RuleField.

    Attributes:
        label: Human readable name shown by rule builders.
        field_type: Semantic type, None for implicit text.
        max_value: Upper bound offered by numeric inputs. Not enforced.
        multi_valued: Whether the set operators apply to this field.
        text_eligible: Whether the text operators apply to this field.
    """

    label: str
    field_type: FieldType | None = None
    max_value: float | None = None
    multi_valued: bool = False
    text_eligible: bool = True

    @property
    def is_comparable(self) -> bool:
        """True for number, decimal and date fields."""
        return self.field_type is not None


def _text(label: str, *, multi: bool = False, text: bool = True) -> FieldDescriptor:
    return FieldDescriptor(label=label, multi_valued=multi, text_eligible=text)


def _typed(label: str, field_type: FieldType, max_value: float | None = None) -> FieldDescriptor:
    return FieldDescriptor(label=label, field_type=field_type, max_value=max_value, text_eligible=False)


FIELD_DESCRIPTORS: dict[RuleField, FieldDescriptor] = {
    RuleField.LIBRARY: _text("Library", multi=True, text=False),
    RuleField.READ_STATUS: _text("Read Status", multi=True, text=False),
    RuleField.DATE_FINISHED: _typed("Date Finished", FieldType.DATE),
    RuleField.LAST_READ_TIME: _typed("Last Read Time", FieldType.DATE),
    RuleField.METADATA_SCORE: _typed("Metadata Score", FieldType.DECIMAL, 100),
    RuleField.TITLE: _text("Title", multi=True),
    RuleField.AUTHORS: _text("Authors", multi=True),
    RuleField.CATEGORIES: _text("Categories", multi=True),
    RuleField.MOODS: _text("Moods", multi=True),
    RuleField.TAGS: _text("Tags", multi=True),
    RuleField.PUBLISHER: _text("Publisher", multi=True),
    RuleField.PUBLISHED_DATE: _typed("Published Date", FieldType.DATE),
    RuleField.PERSONAL_RATING: _typed("Personal Rating", FieldType.DECIMAL, 10),
    RuleField.PAGE_COUNT: _typed("Page Count", FieldType.NUMBER),
    RuleField.LANGUAGE: _text("Language", multi=True),
    RuleField.SERIES_NAME: _text("Series Name", multi=True),
    RuleField.SERIES_NUMBER: _typed("Series Number", FieldType.NUMBER),
    RuleField.SERIES_TOTAL: _typed("Books in Series", FieldType.NUMBER),
    RuleField.FILE_SIZE: _typed("File Size (Kb)", FieldType.NUMBER),
    RuleField.FILE_TYPE: _text("File Type", multi=True, text=False),
    RuleField.SUBTITLE: _text("Subtitle", multi=True),
    RuleField.AMAZON_RATING: _typed("Amazon Rating", FieldType.DECIMAL, 5),
    RuleField.AMAZON_REVIEW_COUNT: _typed("Amazon Review Count", FieldType.NUMBER),
    RuleField.GOODREADS_RATING: _typed("Goodreads Rating", FieldType.DECIMAL, 5),
    RuleField.GOODREADS_REVIEW_COUNT: _typed("Goodreads Review Count", FieldType.NUMBER),
    RuleField.HARDCOVER_RATING: _typed("Hardcover Rating", FieldType.DECIMAL, 5),
    RuleField.HARDCOVER_REVIEW_COUNT: _typed("Hardcover Review Count", FieldType.NUMBER),
}


def descriptor_for(fld: RuleField | str) -> FieldDescriptor | None:
    """Looks up the descriptor of a field.

    Args:
        fld: The field, or a raw field name that is not part of RuleField.

    Returns:
        The descriptor, or None for unknown field names.
    """
    if isinstance(fld, RuleField):
        return FIELD_DESCRIPTORS[fld]
    return None


# ========================================================================
# OPERATOR FAMILIES
# ========================================================================

OPERATOR_FAMILIES: dict[OperatorFamily, tuple[RuleOperator, ...]] = {
    OperatorFamily.BASE: (
        RuleOperator.EQUALS,
        RuleOperator.NOT_EQUALS,
        RuleOperator.IS_EMPTY,
        RuleOperator.IS_NOT_EMPTY,
    ),
    OperatorFamily.MULTI_VALUE: (
        RuleOperator.INCLUDES_ANY,
        RuleOperator.EXCLUDES_ALL,
        RuleOperator.INCLUDES_ALL,
    ),
    OperatorFamily.TEXT: (
        RuleOperator.CONTAINS,
        RuleOperator.DOES_NOT_CONTAIN,
        RuleOperator.STARTS_WITH,
        RuleOperator.ENDS_WITH,
    ),
    OperatorFamily.COMPARISON: (
        RuleOperator.GREATER_THAN,
        RuleOperator.GREATER_THAN_EQUAL_TO,
        RuleOperator.LESS_THAN,
        RuleOperator.LESS_THAN_EQUAL_TO,
        RuleOperator.IN_BETWEEN,
    ),
}

MULTI_VALUE_OPERATORS: frozenset[RuleOperator] = frozenset(OPERATOR_FAMILIES[OperatorFamily.MULTI_VALUE])


OPERATOR_LABELS: dict[RuleOperator, str] = {
    RuleOperator.EQUALS: "Equals",
    RuleOperator.NOT_EQUALS: "≠ Not Equal",
    RuleOperator.IS_EMPTY: "Empty",
    RuleOperator.IS_NOT_EMPTY: "Not Empty",
    RuleOperator.INCLUDES_ANY: "Includes Any",
    RuleOperator.EXCLUDES_ALL: "Excludes All",
    RuleOperator.INCLUDES_ALL: "Includes All",
    RuleOperator.CONTAINS: "Contains",
    RuleOperator.DOES_NOT_CONTAIN: "Doesn't Contain",
    RuleOperator.STARTS_WITH: "Starts With",
    RuleOperator.ENDS_WITH: "Ends With",
    RuleOperator.GREATER_THAN: "> Greater Than",
    RuleOperator.GREATER_THAN_EQUAL_TO: "≥ Greater or Equal",
    RuleOperator.LESS_THAN: "< Less Than",
    RuleOperator.LESS_THAN_EQUAL_TO: "≤ Less or Equal",
    RuleOperator.IN_BETWEEN: "Between",
}


def valid_operators(fld: RuleField | None) -> list[RuleOperator]:
    """Returns the operators a rule builder offers for a field.

    Base operators come first, then the set operators for multi-valued
    fields, then either comparison operators (typed fields) or text
    operators (text-eligible fields).

    Args:
        fld: The selected field, or None while no field is chosen yet.

    Returns:
        Ordered list of allowed operators.
    """
    base = list(OPERATOR_FAMILIES[OperatorFamily.BASE])
    multi = list(OPERATOR_FAMILIES[OperatorFamily.MULTI_VALUE])
    if fld is None:
        return base + multi

    desc = FIELD_DESCRIPTORS[fld]
    operators = base
    if desc.multi_valued:
        operators += multi
    if desc.is_comparable:
        operators += OPERATOR_FAMILIES[OperatorFamily.COMPARISON]
    elif desc.text_eligible:
        operators += OPERATOR_FAMILIES[OperatorFamily.TEXT]
    return operators


def coerce_field(value: Any) -> RuleField | str:
    """Maps a raw field name to RuleField, keeping unknown names as strings."""
    if isinstance(value, RuleField):
        return value
    try:
        return RuleField(value)
    except ValueError:
        return "" if value is None else str(value)


def coerce_operator(value: Any) -> RuleOperator | str:
    """Maps a raw operator name to RuleOperator, keeping unknown names as strings."""
    if isinstance(value, RuleOperator):
        return value
    try:
        return RuleOperator(value)
    except ValueError:
        return "" if value is None else str(value)


# ========================================================================
# OPERANDS
# ========================================================================


@dataclass(frozen=True)
class ScalarOperand:
    """Single comparison value.

    Attributes:
        raw: The operand as stored on the rule.
        value: The normalized operand.
    """

    raw: Any
    value: NormalizedValue

    def as_list(self) -> list[str]:
        """Lower-cased string list used when the subject is a list."""
        return lower_list(self.raw)


@dataclass(frozen=True)
class RangeOperand:
    """Inclusive bounds for ``in_between``."""

    start: NormalizedValue
    end: NormalizedValue


@dataclass(frozen=True)
class SetOperand:
    """Lower-cased values for the set operators."""

    values: tuple[str, ...]


Operand = Union[ScalarOperand, RangeOperand, SetOperand]


def build_operand(operator: RuleOperator | str, value: Any, value_start: Any, value_end: Any) -> Operand:
    """Chooses the operand variant for an operator and normalizes it.

    Args:
        operator: The rule operator (unknown operators get a scalar operand).
        value: The single or multi value of the rule.
        value_start: Lower bound for ranges.
        value_end: Upper bound for ranges.

    Returns:
        The operand variant matching the operator family.
    """
    if operator in MULTI_VALUE_OPERATORS:
        return SetOperand(values=tuple(lower_list(value)))
    if operator is RuleOperator.IN_BETWEEN:
        return RangeOperand(start=normalize(value_start), end=normalize(value_end))
    return ScalarOperand(raw=value, value=normalize(value))


# ========================================================================
# RULE TREE
# ========================================================================


@dataclass(frozen=True)
class MagicShelfRule:
    """A leaf predicate of a Magic Shelf filter.

    Field and operator names that are not part of the enumerations (for
    example the blank values of a rule still being edited) are kept as
    strings so they survive a save/load cycle; such rules never match.

    Attributes:
        field: Which book field to test.
        operator: The comparison operator.
        value: Operand for single-value and set operators (a tuple for sets).
        value_start: Lower bound for ``in_between``.
        value_end: Upper bound for ``in_between``.
        operand: Tagged operand derived from the values above.
    """

    field: RuleField | str
    operator: RuleOperator | str
    value: Any = None
    value_start: Any = None
    value_end: Any = None
    operand: Operand = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "field", coerce_field(self.field))
        object.__setattr__(self, "operator", coerce_operator(self.operator))
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))
        object.__setattr__(
            self,
            "operand",
            build_operand(self.operator, self.value, self.value_start, self.value_end),
        )

    @property
    def is_complete(self) -> bool:
        """True when both a field and an operator are set."""
        return bool(self.field) and bool(self.operator)


@dataclass(frozen=True)
class MagicShelfGroup:
    """An inner node combining rules and nested groups.

    Attributes:
        name: Optional display name of the group.
        join: How child results are combined. Defaults to AND.
        rules: Child rules and groups, evaluated in order.
    """

    name: str = ""
    join: JoinType = JoinType.AND
    rules: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.join, JoinType):
            object.__setattr__(self, "join", _coerce_join(self.join))
        if not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))


Node = Union[MagicShelfRule, MagicShelfGroup]


def _coerce_join(value: Any) -> JoinType:
    if isinstance(value, str):
        try:
            return JoinType(value.lower())
        except ValueError:
            pass
    if value is not None:
        logger.warning("Unknown join %r, using AND", value)
    return JoinType.AND


def has_at_least_one_valid_rule(group: MagicShelfGroup) -> bool:
    """Checks that a tree holds at least one rule with field and operator set.

    Shelves are only saved when this holds; the evaluator itself accepts
    empty and incomplete trees.

    Args:
        group: The root group.

    Returns:
        True if any rule in the tree is complete.
    """
    for child in group.rules:
        if isinstance(child, MagicShelfGroup):
            if has_at_least_one_valid_rule(child):
                return True
        elif child.is_complete:
            return True
    return False


# ========================================================================
# SHELF
# ========================================================================


@dataclass
class MagicShelf:
    """A named, persisted Magic Shelf definition.

    Attributes:
        shelf_id: Server-side id, None while unsaved.
        name: Display name.
        icon: Icon identifier (a PrimeNG class or a custom SVG name).
        icon_type: ``PRIME_NG`` or ``CUSTOM_SVG``, None when unknown.
        is_public: Whether other users can see the shelf.
        group: Root of the filter tree. None when the stored filter could
            not be decoded.
    """

    shelf_id: int | None = None
    name: str = ""
    icon: str = field(default_factory=lambda: config.DEFAULT_ICON)
    icon_type: str | None = None
    is_public: bool = False
    group: MagicShelfGroup | None = field(default_factory=MagicShelfGroup)
