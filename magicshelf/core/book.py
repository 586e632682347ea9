# magicshelf/core/book.py

"""Book record dataclasses consumed by the Magic Shelf rule engine.

The library API delivers books as camelCase JSON objects with an optional
nested ``metadata`` block. ``Book.from_dict`` maps such a payload onto the
snake_case dataclasses below so that field extraction never has to care
about the wire format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

__all__ = [
    "Book",
    "BookMetadata",
    "ReadStatus",
]


class ReadStatus(Enum):
    """Reading progress states a book can be in."""

    UNREAD = "UNREAD"
    READING = "READING"
    RE_READING = "RE_READING"
    READ = "READ"
    PARTIALLY_READ = "PARTIALLY_READ"
    PAUSED = "PAUSED"
    WONT_READ = "WONT_READ"
    ABANDONED = "ABANDONED"
    UNSET = "UNSET"


@dataclass
class BookMetadata:
    """Descriptive metadata of a book.

    Dates are kept as the strings delivered by the API; the rule engine
    parses them on demand.
    """

    title: str | None = None
    subtitle: str | None = None
    publisher: str | None = None
    published_date: str | None = None
    series_name: str | None = None
    series_number: float | None = None
    series_total: int | None = None
    page_count: int | None = None
    language: str | None = None

    # Ratings from external providers
    amazon_rating: float | None = None
    amazon_review_count: int | None = None
    goodreads_rating: float | None = None
    goodreads_review_count: int | None = None
    hardcover_rating: float | None = None
    hardcover_review_count: int | None = None

    authors: list[str] | None = None
    categories: list[str] | None = None
    moods: list[str] | None = None
    tags: list[str] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BookMetadata:
        """Builds metadata from a camelCase API payload.

        Args:
            data: The ``metadata`` object of a book payload.

        Returns:
            A BookMetadata instance. Unknown keys are ignored.
        """
        return cls(
            title=data.get("title"),
            subtitle=data.get("subtitle"),
            publisher=data.get("publisher"),
            published_date=data.get("publishedDate"),
            series_name=data.get("seriesName"),
            series_number=data.get("seriesNumber"),
            series_total=data.get("seriesTotal"),
            page_count=data.get("pageCount"),
            language=data.get("language"),
            amazon_rating=data.get("amazonRating"),
            amazon_review_count=data.get("amazonReviewCount"),
            goodreads_rating=data.get("goodreadsRating"),
            goodreads_review_count=data.get("goodreadsReviewCount"),
            hardcover_rating=data.get("hardcoverRating"),
            hardcover_review_count=data.get("hardcoverReviewCount"),
            authors=data.get("authors"),
            categories=data.get("categories"),
            moods=data.get("moods"),
            tags=data.get("tags"),
        )


@dataclass
class Book:
    """A single library book as seen by the Magic Shelf engine.

    Attributes:
        book_id: Primary key of the book.
        library_id: Identifier of the owning library.
        library_name: Display name of the owning library.
        file_name: File name including extension (e.g. ``dune.epub``).
        file_size_kb: File size in kilobytes.
        metadata: Descriptive metadata, None when not fetched yet.
        read_status: Reading state as sent by the API (e.g. ``READ``).
        personal_rating: The user's own rating (0-10).
        metadata_match_score: Metadata completeness score (0-100).
        date_finished: ISO timestamp of when reading was finished.
        last_read_time: ISO timestamp of the last reading session.
        added_on: ISO timestamp of when the book was added.
    """

    book_id: int
    library_id: int | None = None
    library_name: str = ""
    file_name: str | None = None
    file_size_kb: int | None = None
    metadata: BookMetadata | None = None
    read_status: str | None = None
    personal_rating: float | None = None
    metadata_match_score: float | None = None
    date_finished: str | None = None
    last_read_time: str | None = None
    added_on: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Book:
        """Builds a Book from a camelCase API payload.

        Keys that have no dedicated attribute are kept in ``extra`` so the
        generic field lookup can still reach them.

        Args:
            data: The book payload.

        Returns:
            A Book instance.
        """
        known = {
            "id",
            "libraryId",
            "libraryName",
            "fileName",
            "fileSizeKb",
            "metadata",
            "readStatus",
            "personalRating",
            "metadataMatchScore",
            "dateFinished",
            "lastReadTime",
            "addedOn",
        }
        raw_metadata = data.get("metadata")
        return cls(
            book_id=data.get("id", 0),
            library_id=data.get("libraryId"),
            library_name=data.get("libraryName", ""),
            file_name=data.get("fileName"),
            file_size_kb=data.get("fileSizeKb"),
            metadata=BookMetadata.from_dict(raw_metadata) if isinstance(raw_metadata, dict) else None,
            read_status=data.get("readStatus"),
            personal_rating=data.get("personalRating"),
            metadata_match_score=data.get("metadataMatchScore"),
            date_finished=data.get("dateFinished"),
            last_read_time=data.get("lastReadTime"),
            added_on=data.get("addedOn"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    @property
    def title(self) -> str:
        """Returns the metadata title, falling back to the file name.

        Returns:
            A display title, empty string when neither is known.
        """
        if self.metadata and self.metadata.title:
            return self.metadata.title
        return self.file_name or ""
