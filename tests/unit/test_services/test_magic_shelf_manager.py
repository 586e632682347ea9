# tests/unit/test_services/test_magic_shelf_manager.py

"""Tests for MagicShelfManager service."""

from __future__ import annotations

import json
from unittest.mock import Mock

import pytest

from magicshelf.core.book import Book
from magicshelf.services.magic_shelf.codec import dumps
from magicshelf.services.magic_shelf.magic_shelf_manager import MagicShelfManager, MagicShelfValidationError
from magicshelf.services.magic_shelf.models import (
    JoinType,
    MagicShelf,
    MagicShelfGroup,
    MagicShelfRule,
    RuleField,
    RuleOperator,
)

# ========================================================================
# FIXTURES
# ========================================================================

ENGLISH = MagicShelfGroup(rules=(MagicShelfRule(RuleField.LANGUAGE, RuleOperator.EQUALS, "en"),))
FINISHED = MagicShelfGroup(
    join=JoinType.OR,
    rules=(
        MagicShelfRule(RuleField.READ_STATUS, RuleOperator.EQUALS, "READ"),
        MagicShelfRule(RuleField.PERSONAL_RATING, RuleOperator.GREATER_THAN_EQUAL_TO, 10),
    ),
)


@pytest.fixture
def mock_store() -> Mock:
    """Creates a mock shelf store holding three shelves, one of them broken."""
    rows = {
        1: {"id": 1, "name": "English", "icon": "pi pi-globe", "filterJson": dumps(ENGLISH)},
        2: {"id": 2, "name": "Finished", "filterJson": dumps(FINISHED)},
        3: {"id": 3, "name": "Broken", "filterJson": "{not json"},
    }
    store = Mock()
    store.get_all.return_value = list(rows.values())
    store.get.side_effect = rows.get
    store.save.return_value = 42
    return store


@pytest.fixture
def mock_provider(books: list[Book]) -> Mock:
    """Creates a mock book provider returning the sample books."""
    provider = Mock()
    provider.get_books.return_value = books
    return provider


@pytest.fixture
def manager(mock_store: Mock, mock_provider: Mock) -> MagicShelfManager:
    """Creates a MagicShelfManager with mock dependencies."""
    return MagicShelfManager(shelf_store=mock_store, book_provider=mock_provider)


# ========================================================================
# TESTS: CRUD
# ========================================================================


class TestLoad:
    """Tests for loading shelves."""

    def test_get_all(self, manager: MagicShelfManager) -> None:
        shelves = manager.get_all()
        assert [s.name for s in shelves] == ["English", "Finished", "Broken"]
        assert shelves[0].icon == "pi pi-globe"
        assert shelves[0].group == ENGLISH
        assert shelves[2].group is None

    def test_get_shelf(self, manager: MagicShelfManager) -> None:
        shelf = manager.get_shelf(2)
        assert shelf is not None
        assert shelf.group == FINISHED

    def test_get_missing_shelf(self, manager: MagicShelfManager) -> None:
        assert manager.get_shelf(99) is None


class TestSave:
    """Tests for saving shelves."""

    def test_save_new_shelf(self, manager: MagicShelfManager, mock_store: Mock) -> None:
        shelf = MagicShelf(name="English", group=ENGLISH)
        assert manager.save(shelf) == 42
        assert shelf.shelf_id == 42

        payload = mock_store.save.call_args.args[0]
        assert payload["id"] is None
        assert payload["name"] == "English"
        assert json.loads(payload["filterJson"])["rules"][0]["field"] == "language"

    def test_save_existing_shelf_keeps_id_in_payload(self, manager: MagicShelfManager, mock_store: Mock) -> None:
        mock_store.save.return_value = 7
        manager.save(MagicShelf(shelf_id=7, name="English", group=ENGLISH))
        assert mock_store.save.call_args.args[0]["id"] == 7

    def test_save_requires_name(self, manager: MagicShelfManager, mock_store: Mock) -> None:
        with pytest.raises(MagicShelfValidationError):
            manager.save(MagicShelf(name="  ", group=ENGLISH))
        mock_store.save.assert_not_called()

    @pytest.mark.parametrize(
        "group",
        [
            None,
            MagicShelfGroup(),
            MagicShelfGroup(rules=(MagicShelfRule("", ""),)),
            MagicShelfGroup(rules=(MagicShelfGroup(rules=(MagicShelfRule(RuleField.TITLE, ""),)),)),
        ],
    )
    def test_save_requires_a_complete_rule(
        self, manager: MagicShelfManager, mock_store: Mock, group: MagicShelfGroup | None
    ) -> None:
        with pytest.raises(MagicShelfValidationError):
            manager.save(MagicShelf(name="Draft", group=group))
        mock_store.save.assert_not_called()

    def test_nested_complete_rule_is_enough(self, manager: MagicShelfManager) -> None:
        group = MagicShelfGroup(rules=(MagicShelfRule("", ""), MagicShelfGroup(rules=ENGLISH.rules)))
        assert manager.save(MagicShelf(name="Nested", group=group)) == 42

    def test_delete(self, manager: MagicShelfManager, mock_store: Mock) -> None:
        manager.delete(3)
        mock_store.delete.assert_called_once_with(3)


# ========================================================================
# TESTS: EVALUATION
# ========================================================================


class TestEvaluation:
    """Tests for shelf evaluation and counts."""

    def test_evaluate_shelf(self, manager: MagicShelfManager) -> None:
        matching = manager.evaluate_shelf(MagicShelf(name="English", group=ENGLISH))
        assert [b.book_id for b in matching] == [1, 3]

    def test_evaluate_broken_shelf(self, manager: MagicShelfManager, mock_provider: Mock) -> None:
        assert manager.evaluate_shelf(MagicShelf(name="Broken", group=None)) == []
        mock_provider.get_books.assert_not_called()

    def test_filter_books_with_ad_hoc_group(self, manager: MagicShelfManager) -> None:
        group = MagicShelfGroup(rules=(MagicShelfRule(RuleField.FILE_TYPE, RuleOperator.EQUALS, "pdf"),))
        assert [b.book_id for b in manager.filter_books(group)] == [2]

    def test_get_book_count(self, manager: MagicShelfManager) -> None:
        assert manager.get_book_count(1) == 2
        assert manager.get_book_count(2) == 1

    def test_get_book_count_missing_or_broken(self, manager: MagicShelfManager) -> None:
        assert manager.get_book_count(99) == 0
        assert manager.get_book_count(3) == 0

    def test_count_all(self, manager: MagicShelfManager, mock_provider: Mock) -> None:
        assert manager.count_all() == {"English": 2, "Finished": 1, "Broken": 0}
        mock_provider.get_books.assert_called_once()
