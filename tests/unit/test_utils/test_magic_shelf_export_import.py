# tests/unit/test_utils/test_magic_shelf_export_import.py

"""Tests for Magic Shelf JSON export and import."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from magicshelf.services.magic_shelf.models import (
    JoinType,
    MagicShelf,
    MagicShelfGroup,
    MagicShelfRule,
    RuleField,
    RuleOperator,
)
from magicshelf.utils.magic_shelf_exporter import MagicShelfExporter
from magicshelf.utils.magic_shelf_importer import MagicShelfImporter

# ---------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------


@pytest.fixture()
def sample_shelves() -> list[MagicShelf]:
    """Returns two sample Magic Shelves for testing."""
    return [
        MagicShelf(
            shelf_id=1,
            name="Sci-Fi Classics",
            icon="pi pi-star",
            icon_type="PRIME_NG",
            is_public=True,
            group=MagicShelfGroup(
                join=JoinType.AND,
                rules=(
                    MagicShelfRule(RuleField.CATEGORIES, RuleOperator.INCLUDES_ANY, ["Sci-Fi"]),
                    MagicShelfRule(RuleField.PUBLISHED_DATE, RuleOperator.LESS_THAN, datetime(1980, 1, 1)),
                ),
            ),
        ),
        MagicShelf(
            shelf_id=2,
            name="Long Reads",
            group=MagicShelfGroup(
                join=JoinType.OR,
                rules=(
                    MagicShelfRule(RuleField.PAGE_COUNT, RuleOperator.GREATER_THAN, 600),
                    MagicShelfGroup(
                        rules=(MagicShelfRule(RuleField.SERIES_TOTAL, RuleOperator.GREATER_THAN_EQUAL_TO, 5),),
                    ),
                ),
            ),
        ),
    ]


# ---------------------------------------------------------------
# Export tests
# ---------------------------------------------------------------


class TestExport:
    """Tests for MagicShelfExporter."""

    def test_export_writes_payload(self, tmp_path: Path, sample_shelves: list[MagicShelf]) -> None:
        out = tmp_path / "export" / "shelves.json"
        MagicShelfExporter.export(sample_shelves, out)

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["version"] == "1.0"
        assert data["count"] == 2
        first = data["magic_shelves"][0]
        assert first["name"] == "Sci-Fi Classics"
        assert first["is_public"] is True
        assert first["filter"]["rules"][1]["value"] == "1980-01-01"
        assert "id" not in first

    def test_export_skips_shelves_without_filter(self, tmp_path: Path, sample_shelves: list[MagicShelf]) -> None:
        out = tmp_path / "shelves.json"
        MagicShelfExporter.export([*sample_shelves, MagicShelf(name="Broken", group=None)], out)
        assert json.loads(out.read_text(encoding="utf-8"))["count"] == 2

    def test_export_empty(self, tmp_path: Path) -> None:
        out = tmp_path / "empty.json"
        MagicShelfExporter.export([], out)
        assert json.loads(out.read_text(encoding="utf-8"))["magic_shelves"] == []


# ---------------------------------------------------------------
# Import tests
# ---------------------------------------------------------------


class TestImport:
    """Tests for MagicShelfImporter."""

    def test_round_trip(self, tmp_path: Path, sample_shelves: list[MagicShelf]) -> None:
        out = tmp_path / "shelves.json"
        MagicShelfExporter.export(sample_shelves, out)
        imported = MagicShelfImporter.import_shelves(out)

        assert len(imported) == 2
        for original, restored in zip(sample_shelves, imported):
            assert restored.shelf_id is None
            assert restored.name == original.name
            assert restored.icon == original.icon
            assert restored.icon_type == original.icon_type
            assert restored.is_public == original.is_public
            assert restored.group == original.group

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            MagicShelfImporter.import_shelves(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            MagicShelfImporter.import_shelves(path)

    @pytest.mark.parametrize("payload", [{"version": "1.0"}, [], {"magic_shelves": {"a": 1}}])
    def test_wrong_shape(self, tmp_path: Path, payload: object) -> None:
        path = tmp_path / "shape.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        with pytest.raises(ValueError):
            MagicShelfImporter.import_shelves(path)

    def test_invalid_entries_are_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "mixed.json"
        payload = {
            "magic_shelves": [
                {"name": "", "filter": {"rules": []}},
                {"name": 42, "filter": {"rules": []}},
                {"name": ["Bad"], "filter": {"rules": []}},
                {"name": "Bad filter", "filter": {"rules": "x"}},
                "not an object",
                {"name": "Good", "filter": {"join": "or", "rules": [{"field": "tags", "operator": "is_empty"}]}},
            ]
        }
        path.write_text(json.dumps(payload), encoding="utf-8")

        imported = MagicShelfImporter.import_shelves(path)
        assert [s.name for s in imported] == ["Good"]
        assert imported[0].group.join is JoinType.OR
        assert imported[0].icon == "pi pi-book"

    def test_entry_without_filter_gets_empty_group(self, tmp_path: Path) -> None:
        path = tmp_path / "nofilter.json"
        path.write_text(json.dumps({"magic_shelves": [{"name": "Everything"}]}), encoding="utf-8")
        assert MagicShelfImporter.import_shelves(path)[0].group == MagicShelfGroup()
