# magicshelf/services/magic_shelf/normalizer.py

"""Value normalization and coercion helpers for rule evaluation.

Book field values and rule operands arrive loosely typed. Before comparing
them the engine reduces both sides to one of a few canonical shapes:

    None | datetime | int | float | lower-cased str | list[lower-cased str]

Nothing in here raises; values of unexpected types pass through unchanged.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Union

from magicshelf.utils.date_utils import parse_date, to_naive_utc

__all__ = [
    "NormalizedValue",
    "js_string",
    "lower_list",
    "normalize",
    "to_number",
]

NormalizedValue = Union[None, datetime, int, float, str, list]

_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def normalize(raw: Any) -> NormalizedValue:
    """Canonicalizes a raw field value or operand for comparison.

    Strings that parse as a date become datetimes *before* they are treated
    as text, so a bare year such as ``"1984"`` is a date. Callers comparing
    numeric fields must hand in real numbers.

    Args:
        raw: The raw value.

    Returns:
        The normalized value. Normalizing it again returns it unchanged.
    """
    if raw is None:
        return None
    if isinstance(raw, (datetime, date)):
        try:
            return to_naive_utc(raw)
        except OverflowError:
            # Shifting to UTC left the representable range
            return None
    if isinstance(raw, str):
        parsed = parse_date(raw)
        if parsed is not None:
            return parsed
        return raw.lower()
    if isinstance(raw, (list, tuple)):
        return [js_string(item).lower() for item in raw if item is not None]
    return raw


def lower_list(raw: Any) -> list[str]:
    """Turns a rule operand into the lower-cased string list set operators use.

    Lists are converted element-wise; a scalar becomes a one-element list
    unless it is falsy (None, empty string, 0), which gives an empty list.

    Args:
        raw: The raw operand as stored on the rule.

    Returns:
        List of lower-cased strings.
    """
    if isinstance(raw, (list, tuple)):
        return [js_string(item).lower() for item in raw if item is not None]
    if not raw:
        return []
    return [js_string(raw).lower()]


def js_string(value: Any) -> str:
    """Stringifies a value the way the web client does.

    Integral floats lose their fraction (``3.0 -> "3"``), booleans are
    lower-case and dates use the ISO calendar form.

    Args:
        value: Any scalar.

    Returns:
        The string form.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def to_number(value: Any) -> float:
    """Coerces a normalized value to a float for ordering comparisons.

    Datetimes become epoch milliseconds. Missing values, blank or
    non-numeric strings and lists become NaN, which makes every comparison
    against them false.

    Args:
        value: A normalized value.

    Returns:
        The numeric value or ``math.nan``.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        epoch = datetime(1970, 1, 1)
        return (value - epoch).total_seconds() * 1000.0
    if isinstance(value, str):
        text = value.strip()
        if _NUMERIC_RE.match(text):
            return float(text)
        if text in ("infinity", "+infinity"):
            return math.inf
        if text == "-infinity":
            return -math.inf
    return math.nan
