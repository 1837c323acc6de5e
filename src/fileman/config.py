"""User configuration for the fileman command line."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from fileman.session import DEFAULT_ROOT

# Default configuration location
CONFIG_DIR = Path.home() / ".fileman"


class Settings(BaseModel):
    """Persisted fileman settings."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = "1.0"
    root_dir: Path = Field(default=DEFAULT_ROOT, alias="rootDir")
    sort_listing: bool = Field(default=True, alias="sortListing")
    confirm_delete: bool = Field(default=True, alias="confirmDelete")


# CLI key -> Settings field
SETTING_KEYS = {
    "root-dir": "root_dir",
    "sort-listing": "sort_listing",
    "confirm-delete": "confirm_delete",
}


class ConfigManager:
    """Loads and saves Settings as JSON."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Directory for the config file. Defaults to ~/.fileman.

        Note:
            Prefer using factory methods `create()` or `create_default()` for construction.
        """
        self.config_dir = config_dir or CONFIG_DIR
        self.config_file = self.config_dir / "config.json"

    @classmethod
    def create(cls, config_dir: Path) -> ConfigManager:
        """Create a config manager with a custom directory.

        Args:
            config_dir: Directory for the config file.

        Returns:
            Configured ConfigManager instance.
        """
        return cls(config_dir=config_dir)

    @classmethod
    def create_default(cls) -> ConfigManager:
        """Create a config manager using ~/.fileman."""
        return cls()

    def ensure_config_dir(self) -> None:
        """Create config directory if it doesn't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load(self) -> Settings:
        """Load settings from disk.

        Returns:
            Stored Settings, or defaults if no config file exists.
        """
        if not self.config_file.exists():
            return Settings()

        data = json.loads(self.config_file.read_text())
        return Settings.model_validate(data)

    def save(self, settings: Settings) -> None:
        """Save settings to disk.

        Args:
            settings: Settings to save.
        """
        self.ensure_config_dir()
        data = settings.model_dump(mode="json", by_alias=True)
        self.config_file.write_text(json.dumps(data, indent=2))

    def set_value(self, key: str, value: str) -> Settings:
        """Update one setting and save.

        Args:
            key: CLI key (root-dir, sort-listing, confirm-delete).
            value: New value as text; booleans accept true/false, yes/no, 1/0.

        Returns:
            The updated Settings.

        Raises:
            ValueError: If the key is unknown or the value is invalid.
        """
        field_name = SETTING_KEYS.get(key)
        if field_name is None:
            raise ValueError(f"Unknown configuration key: {key}")

        data = self.load().model_dump()
        data[field_name] = value
        settings = Settings.model_validate(data)
        self.save(settings)
        return settings
