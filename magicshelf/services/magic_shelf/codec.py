# magicshelf/services/magic_shelf/codec.py

"""Serialization of Magic Shelf filter trees.

The persisted form is the JSON object the web client stores as a shelf's
``filterJson``::

    {"name": "", "type": "group", "join": "and", "rules": [
        {"field": "pageCount", "operator": "greater_than", "value": 300},
        {"type": "group", "join": "or", "rules": [...]}
    ]}

Rules use camelCase keys (``valueStart``/``valueEnd``). Date operands of
date-typed fields are written as ``YYYY-MM-DD`` and every ``null`` is
stripped before storage. On load, operands are parsed back according to
the field's semantic type.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import date
from typing import Any

from magicshelf.config import config
from magicshelf.services.magic_shelf.models import (
    FieldType,
    MagicShelf,
    MagicShelfGroup,
    MagicShelfRule,
    Node,
    RuleField,
    coerce_field,
    descriptor_for,
)
from magicshelf.services.magic_shelf.normalizer import to_number
from magicshelf.utils.date_utils import format_iso_date, parse_date, to_naive_utc

__all__ = [
    "MagicShelfDecodeError",
    "deserialize",
    "dumps",
    "loads",
    "parse_value",
    "remove_nulls",
    "serialize",
    "shelf_from_dict",
    "shelf_to_dict",
]

logger = logging.getLogger("magicshelf.magic_shelf.codec")

_RULE_VALUE_KEYS: tuple[tuple[str, str], ...] = (
    ("value", "value"),
    ("value_start", "valueStart"),
    ("value_end", "valueEnd"),
)


class MagicShelfDecodeError(ValueError):
    """Raised when a stored filter cannot be turned back into a tree."""


# ========================================================================
# SERIALIZATION
# ========================================================================


def remove_nulls(data: Any) -> Any:
    """Recursively drops None values from dicts and lists.

    Args:
        data: A JSON-compatible structure.

    Returns:
        A new structure without None leaves.
    """
    if isinstance(data, dict):
        return {k: remove_nulls(v) for k, v in data.items() if v is not None}
    if isinstance(data, (list, tuple)):
        return [remove_nulls(v) for v in data if v is not None]
    return data


def _field_type(fld: RuleField | str) -> FieldType | None:
    desc = descriptor_for(fld)
    return desc.field_type if desc else None


def _dump_date(value: date, field_type: FieldType | None) -> str:
    try:
        if field_type is FieldType.DATE:
            return format_iso_date(value)
        return to_naive_utc(value).isoformat() + "Z"
    except OverflowError:
        # No UTC equivalent, keep the wall time as given
        return value.isoformat()


def _dump_value(value: Any, field_type: FieldType | None) -> Any:
    if isinstance(value, date):
        return _dump_date(value, field_type)
    if isinstance(value, tuple):
        return [_dump_value(v, field_type) for v in value]
    return value


def _rule_to_dict(rule: MagicShelfRule) -> dict[str, Any]:
    field_type = _field_type(rule.field)
    data: dict[str, Any] = {
        "field": rule.field.value if isinstance(rule.field, RuleField) else rule.field,
        "operator": getattr(rule.operator, "value", rule.operator),
    }
    for attr, key in _RULE_VALUE_KEYS:
        data[key] = _dump_value(getattr(rule, attr), field_type)
    return data


def _group_to_dict(group: MagicShelfGroup) -> dict[str, Any]:
    return {
        "name": group.name,
        "type": "group",
        "join": group.join.value,
        "rules": [_node_to_dict(child) for child in group.rules],
    }


def _node_to_dict(node: Node) -> dict[str, Any]:
    if isinstance(node, MagicShelfGroup):
        return _group_to_dict(node)
    return _rule_to_dict(node)


def serialize(group: MagicShelfGroup) -> dict[str, Any]:
    """Serializes a filter tree to its JSON-compatible persisted form.

    Args:
        group: Root of the tree.

    Returns:
        Nested dicts/lists without any None values.
    """
    return remove_nulls(_group_to_dict(group))


def dumps(group: MagicShelfGroup) -> str:
    """Serializes a filter tree to the ``filterJson`` string.

    Args:
        group: Root of the tree.

    Returns:
        Compact JSON text.
    """
    return json.dumps(serialize(group), ensure_ascii=False)


# ========================================================================
# DESERIALIZATION
# ========================================================================


def parse_value(value: Any, field_type: FieldType | None) -> Any:
    """Parses a stored operand according to a field's semantic type.

    Numbers for ``number``/``decimal`` fields (None when not numeric),
    datetimes for ``date`` fields (None when not a date), anything else
    unchanged. Lists are parsed element-wise.

    Args:
        value: The stored operand.
        field_type: Semantic type of the rule's field.

    Returns:
        The parsed operand.
    """
    if value is None or field_type is None:
        return value
    if isinstance(value, (list, tuple)):
        return [parse_value(v, field_type) for v in value]

    if field_type is FieldType.DATE:
        if isinstance(value, date):
            try:
                return to_naive_utc(value)
            except OverflowError:
                return None
        return parse_date(value) if isinstance(value, str) else None

    if isinstance(value, bool):
        return None
    number = to_number(value)
    if math.isnan(number):
        return None
    if field_type is FieldType.NUMBER and number.is_integer():
        return int(number)
    return number


def _rule_from_dict(data: dict[str, Any]) -> MagicShelfRule:
    fld = coerce_field(data.get("field"))
    field_type = _field_type(fld)
    rule = MagicShelfRule(
        field=fld,
        operator=data.get("operator"),
        value=parse_value(data.get("value"), field_type),
        value_start=parse_value(data.get("valueStart"), field_type),
        value_end=parse_value(data.get("valueEnd"), field_type),
    )
    if not rule.is_complete:
        logger.debug("Loaded incomplete rule %s", data)
    return rule


def _is_group(data: dict[str, Any]) -> bool:
    return "rules" in data or data.get("type") == "group"


def _node_from_dict(data: Any) -> Node:
    if not isinstance(data, dict):
        msg = f"Filter node must be an object, got {type(data).__name__}"
        raise MagicShelfDecodeError(msg)
    if _is_group(data):
        return deserialize(data)
    return _rule_from_dict(data)


def deserialize(data: dict[str, Any]) -> MagicShelfGroup:
    """Rebuilds a filter tree from its persisted form.

    Args:
        data: The group object (as produced by :func:`serialize`).

    Returns:
        The in-memory tree with typed operands.

    Raises:
        MagicShelfDecodeError: If the structure is not a group of nodes.
    """
    if not isinstance(data, dict):
        msg = f"Filter root must be an object, got {type(data).__name__}"
        raise MagicShelfDecodeError(msg)

    raw_rules = data.get("rules", [])
    if not isinstance(raw_rules, list):
        msg = "'rules' must be a list"
        raise MagicShelfDecodeError(msg)

    return MagicShelfGroup(
        name=data.get("name") or "",
        join=data.get("join"),
        rules=tuple(_node_from_dict(child) for child in raw_rules),
    )


def loads(text: str) -> MagicShelfGroup:
    """Parses a ``filterJson`` string into a filter tree.

    Args:
        text: The stored JSON text.

    Returns:
        The filter tree.

    Raises:
        MagicShelfDecodeError: If the text is not valid JSON or not a tree.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        msg = f"Invalid filter JSON: {exc}"
        raise MagicShelfDecodeError(msg) from exc
    return deserialize(data)


# ========================================================================
# SHELVES
# ========================================================================


def shelf_to_dict(shelf: MagicShelf) -> dict[str, Any]:
    """Serializes a shelf to the payload the shelf store persists.

    Args:
        shelf: The shelf to serialize. Its group must be set.

    Returns:
        Dict with ``id``, ``name``, ``icon``, ``iconType``, ``filterJson``
        (a JSON string) and ``isPublic``.
    """
    if shelf.group is None:
        msg = f"Shelf '{shelf.name}' has no filter to serialize"
        raise ValueError(msg)
    return {
        "id": shelf.shelf_id,
        "name": shelf.name,
        "icon": shelf.icon,
        "iconType": shelf.icon_type,
        "filterJson": dumps(shelf.group),
        "isPublic": shelf.is_public,
    }


def shelf_from_dict(data: dict[str, Any]) -> MagicShelf:
    """Builds a shelf from a stored payload.

    A ``filterJson`` that cannot be decoded is logged and leaves the shelf
    with ``group=None``; the shelf itself is still returned.

    Args:
        data: The stored shelf payload.

    Returns:
        The MagicShelf.
    """
    shelf = MagicShelf(
        shelf_id=data.get("id"),
        name=data.get("name") or "",
        icon=data.get("icon") or config.DEFAULT_ICON,
        icon_type=data.get("iconType"),
        is_public=bool(data.get("isPublic", False)),
    )

    raw_filter = data.get("filterJson")
    if isinstance(raw_filter, dict):
        decode, payload = deserialize, raw_filter
    elif raw_filter:
        decode, payload = loads, raw_filter
    else:
        # An absent filter is an empty AND group
        return shelf

    try:
        shelf.group = decode(payload)
    except MagicShelfDecodeError as exc:
        logger.warning("Invalid filter on shelf '%s' (id=%s): %s", shelf.name, shelf.shelf_id, exc)
        shelf.group = None
    return shelf
