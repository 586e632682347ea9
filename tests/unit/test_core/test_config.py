# tests/unit/test_core/test_config.py

"""Tests for the Config dataclass."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from magicshelf.config import Config


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Points the config at an empty temp data directory."""
    monkeypatch.setenv("MAGICSHELF_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("MAGICSHELF_LOG_LEVEL", raising=False)
    monkeypatch.delenv("MAGICSHELF_LOG_FILE", raising=False)
    return tmp_path


class TestConfig:
    """Tests for settings loading and saving."""

    def test_defaults(self, data_dir: Path) -> None:
        cfg = Config()
        assert cfg.DATA_DIR == data_dir
        assert cfg.SETTINGS_FILE == data_dir / "settings.json"
        assert cfg.EXPORT_FILE == data_dir / "magic_shelves.json"
        assert cfg.LOG_LEVEL == "INFO"
        assert cfg.LOG_FILE is None
        assert cfg.DEFAULT_ICON == "pi pi-book"

    def test_settings_file(self, data_dir: Path) -> None:
        (data_dir / "settings.json").write_text(
            json.dumps({"log_level": "DEBUG", "default_icon": "pi pi-star", "log_file": str(data_dir / "x.log")}),
            encoding="utf-8",
        )
        cfg = Config()
        assert cfg.LOG_LEVEL == "DEBUG"
        assert cfg.DEFAULT_ICON == "pi pi-star"
        assert cfg.LOG_FILE == data_dir / "x.log"

    def test_environment_wins(self, data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (data_dir / "settings.json").write_text(json.dumps({"log_level": "DEBUG"}), encoding="utf-8")
        monkeypatch.setenv("MAGICSHELF_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("MAGICSHELF_LOG_FILE", str(data_dir / "env.log"))
        cfg = Config()
        assert cfg.LOG_LEVEL == "ERROR"
        assert cfg.LOG_FILE == data_dir / "env.log"

    def test_broken_settings_file_keeps_defaults(self, data_dir: Path) -> None:
        (data_dir / "settings.json").write_text("{", encoding="utf-8")
        assert Config().LOG_LEVEL == "INFO"

    def test_save_round_trip(self, data_dir: Path) -> None:
        cfg = Config()
        cfg.LOG_LEVEL = "WARNING"
        cfg.DEFAULT_ICON = "pi pi-heart"
        assert cfg.save() is True

        reloaded = Config()
        assert reloaded.LOG_LEVEL == "WARNING"
        assert reloaded.DEFAULT_ICON == "pi pi-heart"
        assert reloaded.LOG_FILE is None
