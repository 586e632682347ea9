"""
Configuration - data paths, logging and shelf defaults.
Reads a JSON settings file and MAGICSHELF_* environment variables (.env aware).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from magicshelf.utils.json_utils import load_json, save_json

logger = logging.getLogger("magicshelf.config")


__all__ = ["Config", "config"]


@dataclass
class Config:
    """
    Central configuration handling for the engine.
    Manages data paths, logging options and shelf defaults.
    """

    DATA_DIR: Path = Path.home() / ".magicshelf"
    SETTINGS_FILE: Path | None = None
    EXPORT_FILE: Path | None = None

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Path | None = None

    # Icon given to shelves that do not pick one
    DEFAULT_ICON: str = "pi pi-book"

    def __post_init__(self):
        """Apply environment overrides and load settings after instantiation."""
        load_dotenv()

        env_dir = os.getenv("MAGICSHELF_DATA_DIR")
        if env_dir:
            self.DATA_DIR = Path(env_dir).expanduser()

        if self.SETTINGS_FILE is None:
            self.SETTINGS_FILE = self.DATA_DIR / "settings.json"
        if self.EXPORT_FILE is None:
            self.EXPORT_FILE = self.DATA_DIR / "magic_shelves.json"

        self._load_settings()

        # Environment wins over the settings file
        env_level = os.getenv("MAGICSHELF_LOG_LEVEL")
        if env_level:
            self.LOG_LEVEL = env_level
        env_log = os.getenv("MAGICSHELF_LOG_FILE")
        if env_log:
            self.LOG_FILE = Path(env_log).expanduser()

    def _load_settings(self) -> None:
        """Load settings from JSON file."""
        data = load_json(self.SETTINGS_FILE, default={}, expected_type=dict)
        if not data:
            return

        self.LOG_LEVEL = data.get("log_level", self.LOG_LEVEL)
        self.DEFAULT_ICON = data.get("default_icon", self.DEFAULT_ICON)

        export_file = data.get("export_file")
        if export_file:
            self.EXPORT_FILE = Path(export_file)

        log_file = data.get("log_file")
        if log_file:
            self.LOG_FILE = Path(log_file)

    def save(self) -> bool:
        """Save current configuration to JSON file.

        Returns:
            True if the settings file was written.
        """
        data = {
            "log_level": self.LOG_LEVEL,
            "log_file": str(self.LOG_FILE) if self.LOG_FILE else "",
            "export_file": str(self.EXPORT_FILE) if self.EXPORT_FILE else "",
            "default_icon": self.DEFAULT_ICON,
        }
        saved = save_json(self.SETTINGS_FILE, data)
        if not saved:
            logger.error("Could not save settings to %s", self.SETTINGS_FILE)
        return saved


# Global instance
config = Config()
