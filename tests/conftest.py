# tests/conftest.py
from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

from magicshelf.core.book import Book, BookMetadata


@pytest.fixture
def book_dune() -> Book:
    """A finished science fiction novel with full metadata."""
    return Book(
        book_id=1,
        library_id=1,
        library_name="Main",
        file_name="Dune.EPUB",
        file_size_kb=2048,
        read_status="READ",
        personal_rating=9,
        metadata_match_score=95.5,
        date_finished="2023-08-14T20:15:00Z",
        last_read_time="2023-08-14T20:15:00Z",
        metadata=BookMetadata(
            title="Dune",
            subtitle="Deluxe Edition",
            publisher="Ace Books",
            published_date="1965-08-01",
            series_name="Dune Chronicles",
            series_number=1,
            series_total=6,
            page_count=688,
            language="en",
            amazon_rating=4.6,
            amazon_review_count=120000,
            goodreads_rating=4.27,
            goodreads_review_count=1400000,
            authors=["Frank Herbert"],
            categories=["Sci-Fi", "Drama"],
            moods=["Adventurous"],
            tags=["Classic", "Desert"],
        ),
    )


@pytest.fixture
def book_bare() -> Book:
    """A freshly imported book without metadata."""
    return Book(book_id=2, library_id=2, file_name="scan_0042.pdf")


@pytest.fixture
def book_reading() -> Book:
    """A standalone novel that is being read right now."""
    return Book(
        book_id=3,
        library_id=1,
        file_name="the-hobbit.mobi",
        read_status="READING",
        personal_rating=8,
        last_read_time="2024-03-01T08:00:00+02:00",
        metadata=BookMetadata(
            title="The Hobbit",
            publisher="Allen & Unwin",
            published_date="1937-09-21",
            page_count=310,
            language="en",
            authors=["J. R. R. Tolkien"],
            categories=["Fantasy"],
            tags=["Classic"],
        ),
    )


@pytest.fixture
def books(book_dune: Book, book_bare: Book, book_reading: Book) -> list[Book]:
    """All sample books in a stable order."""
    return [book_dune, book_bare, book_reading]


@pytest.fixture
def clean_logger() -> Generator[logging.Logger, None, None]:
    """The package logger with its handlers and level restored afterwards."""
    pkg_logger = logging.getLogger("magicshelf")
    saved_handlers = list(pkg_logger.handlers)
    saved_level = pkg_logger.level
    pkg_logger.handlers.clear()
    yield pkg_logger
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers[:] = saved_handlers
    pkg_logger.setLevel(saved_level)
