# magicshelf/services/magic_shelf/fields.py

"""Field accessors: pull raw rule subjects out of book records.

Two views of a book exist. ``extract_value`` yields the value the scalar
operators compare against (lower-cased text, numbers, datetimes or
lower-cased lists). ``extract_list`` yields the lower-cased string list the
set operators (includes_any/excludes_all/includes_all) work on, collapsing
single-valued fields such as library or read status to one-element lists.

Both are pure and never raise on records with missing parts.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from magicshelf.core.book import ReadStatus
from magicshelf.services.magic_shelf.models import RuleField
from magicshelf.services.magic_shelf.normalizer import js_string
from magicshelf.utils.date_utils import parse_date

__all__ = [
    "FIELD_EXTRACTORS",
    "LIST_EXTRACTORS",
    "extract_list",
    "extract_value",
    "file_extension",
]


def _attr(obj: Any, name: str) -> Any:
    """Reads an attribute or mapping key, None when absent."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _meta(book: Any, name: str) -> Any:
    return _attr(_attr(book, "metadata"), name)


def _lower(value: Any) -> str | None:
    return value.lower() if isinstance(value, str) else None


def _lower_items(values: Any) -> list[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    return [js_string(v).lower() for v in values if v is not None]


def _as_date(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    return parse_date(js_string(value))


def file_extension(file_name: str | None) -> str | None:
    """Returns the text after the last dot of a file name.

    Args:
        file_name: The file name, may be None.

    Returns:
        The extension as written (may be empty for ``"name."``), or None
        when the name has no dot.
    """
    if not file_name:
        return None
    parts = file_name.split(".")
    if len(parts) < 2:
        return None
    return parts[-1]


def _file_type(book: Any) -> str | None:
    ext = file_extension(_attr(book, "file_name"))
    return ext.lower() if ext is not None else None


def _read_status(book: Any) -> str:
    status = _attr(book, "read_status")
    if status is None:
        return ReadStatus.UNSET.value
    return getattr(status, "value", status)


# ========================================================================
# SCALAR VIEW
# ========================================================================

FIELD_EXTRACTORS: dict[RuleField, Callable[[Any], Any]] = {
    RuleField.LIBRARY: lambda b: _attr(b, "library_id"),
    RuleField.READ_STATUS: _read_status,
    RuleField.FILE_TYPE: _file_type,
    RuleField.FILE_SIZE: lambda b: _attr(b, "file_size_kb"),
    RuleField.METADATA_SCORE: lambda b: _attr(b, "metadata_match_score"),
    RuleField.PERSONAL_RATING: lambda b: _attr(b, "personal_rating"),
    RuleField.TITLE: lambda b: _lower(_meta(b, "title")),
    RuleField.SUBTITLE: lambda b: _lower(_meta(b, "subtitle")),
    RuleField.AUTHORS: lambda b: _lower_items(_meta(b, "authors")),
    RuleField.CATEGORIES: lambda b: _lower_items(_meta(b, "categories")),
    RuleField.MOODS: lambda b: _lower_items(_meta(b, "moods")),
    RuleField.TAGS: lambda b: _lower_items(_meta(b, "tags")),
    RuleField.PUBLISHER: lambda b: _lower(_meta(b, "publisher")),
    RuleField.PUBLISHED_DATE: lambda b: _as_date(_meta(b, "published_date")),
    RuleField.DATE_FINISHED: lambda b: _as_date(_attr(b, "date_finished")),
    RuleField.LAST_READ_TIME: lambda b: _as_date(_attr(b, "last_read_time")),
    RuleField.SERIES_NAME: lambda b: _lower(_meta(b, "series_name")),
    RuleField.SERIES_NUMBER: lambda b: _meta(b, "series_number"),
    RuleField.SERIES_TOTAL: lambda b: _meta(b, "series_total"),
    RuleField.PAGE_COUNT: lambda b: _meta(b, "page_count"),
    RuleField.LANGUAGE: lambda b: _lower(_meta(b, "language")),
    RuleField.AMAZON_RATING: lambda b: _meta(b, "amazon_rating"),
    RuleField.AMAZON_REVIEW_COUNT: lambda b: _meta(b, "amazon_review_count"),
    RuleField.GOODREADS_RATING: lambda b: _meta(b, "goodreads_rating"),
    RuleField.GOODREADS_REVIEW_COUNT: lambda b: _meta(b, "goodreads_review_count"),
    RuleField.HARDCOVER_RATING: lambda b: _meta(b, "hardcover_rating"),
    RuleField.HARDCOVER_REVIEW_COUNT: lambda b: _meta(b, "hardcover_review_count"),
}


def extract_value(book: Any, fld: RuleField | str) -> Any:
    """Extracts the raw subject value of a field from a book.

    Field names outside RuleField fall back to a plain attribute (or mapping
    key) lookup on the record, then on its ``extra`` payload.

    Args:
        book: A Book, or any object/mapping with the same attribute names.
        fld: The field to read.

    Returns:
        The raw value, None when the book does not carry it.
    """
    extractor = FIELD_EXTRACTORS.get(fld) if isinstance(fld, RuleField) else None
    if extractor is not None:
        return extractor(book)

    if not fld:
        return None
    value = _attr(book, fld)
    if value is None:
        value = _attr(_attr(book, "extra"), fld)
    return value


# ========================================================================
# SET VIEW
# ========================================================================


def _singleton(value: Any) -> list[str]:
    return [js_string("" if value is None else value).lower()]


LIST_EXTRACTORS: dict[RuleField, Callable[[Any], list[str]]] = {
    RuleField.AUTHORS: lambda b: _lower_items(_meta(b, "authors")),
    RuleField.CATEGORIES: lambda b: _lower_items(_meta(b, "categories")),
    RuleField.MOODS: lambda b: _lower_items(_meta(b, "moods")),
    RuleField.TAGS: lambda b: _lower_items(_meta(b, "tags")),
    RuleField.READ_STATUS: lambda b: _singleton(_read_status(b)),
    RuleField.FILE_TYPE: lambda b: _singleton(file_extension(_attr(b, "file_name"))),
    RuleField.LIBRARY: lambda b: _singleton(_attr(b, "library_id")),
    RuleField.LANGUAGE: lambda b: _singleton(_meta(b, "language")),
    RuleField.TITLE: lambda b: _singleton(_meta(b, "title")),
    RuleField.SUBTITLE: lambda b: _singleton(_meta(b, "subtitle")),
    RuleField.PUBLISHER: lambda b: _singleton(_meta(b, "publisher")),
    RuleField.SERIES_NAME: lambda b: _singleton(_meta(b, "series_name")),
}


def extract_list(book: Any, fld: RuleField | str) -> list[str]:
    """Re-derives a field as the lower-cased list used by set operators.

    Args:
        book: The book record.
        fld: The field to read.

    Returns:
        Lower-cased strings; empty for fields without a set view.
    """
    extractor = LIST_EXTRACTORS.get(fld) if isinstance(fld, RuleField) else None
    if extractor is None:
        return []
    return extractor(book)
