# magicshelf/utils/date_utils.py

"""Permissive date parsing and ISO formatting for rule operands and book dates.

Book payloads and persisted rules carry dates as strings in several shapes.
The parser accepts all of them and always returns a *naive* datetime in UTC
so that any two parsed values can be compared without raising.

Accepted input formats: full ISO 8601 timestamps (``Z`` or offsets),
YYYY-MM-DD, YYYY-MM, YYYY, YYYY/MM/DD, MM/DD/YYYY, DD.MM.YYYY and
English month names ("May 1, 2020", "1 May 2020", "May 2020").
"""

from __future__ import annotations

from datetime import date, datetime, timezone

__all__ = ["format_iso_date", "parse_date", "to_naive_utc"]

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

# Tried in order after datetime.fromisoformat() gave up
_FORMATS: tuple[str, ...] = (
    "%Y",
    "%Y-%m",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %Y",
    "%b %Y",
)


def parse_date(value: str) -> datetime | None:
    """Parses a date-like string into a naive UTC datetime.

    Pure numbers are only accepted as a 4-digit year: ``"2020"`` is a date,
    ``"300"`` or ``"8.5"`` are not.

    Args:
        value: The string to parse.

    Returns:
        The parsed datetime, or None when no format matches.
    """
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.isdigit() and len(text) != 4:
        return None

    try:
        return to_naive_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        pass

    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return None


def to_naive_utc(value: datetime | date) -> datetime:
    """Converts a date or datetime into a naive datetime expressed in UTC.

    Plain dates become midnight of that day. Aware datetimes are shifted to
    UTC first; naive datetimes are assumed to be UTC already.

    Args:
        value: The date or datetime to convert.

    Returns:
        A naive datetime.
    """
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def format_iso_date(value: datetime | date) -> str:
    """Formats a date as ``YYYY-MM-DD`` (day precision).

    Args:
        value: The date or datetime to format.

    Returns:
        The ISO calendar date string.
    """
    return to_naive_utc(value).strftime("%Y-%m-%d")
