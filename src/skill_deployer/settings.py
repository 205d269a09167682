"""Persistent settings for skill-deployer."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

HOME_ENV_VAR = "SKILL_DEPLOYER_HOME"
CONFIG_FILE = "config.json"
SKILLS_DIR = "skills"


def default_home() -> Path:
    """Get the skill-deployer data directory.

    Returns:
        ``$SKILL_DEPLOYER_HOME`` if set, else ``~/.skill-deployer``.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".skill-deployer"


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Expected a boolean value, got '{value}'")


class DeployerSettings(BaseModel):
    """User settings stored in config.json."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = "1.0"
    skills_root: str | None = Field(default=None, alias="skillsRoot")
    default_platforms: list[str] = Field(default_factory=list, alias="defaultPlatforms")
    include_unknown: bool = Field(default=False, alias="includeUnknown")


class SettingsManager:
    """Loads and saves settings.

    Keys accepted by `set_value()` mirror the ``config set`` command.
    """

    KEYS = ("skills-root", "default-platforms", "include-unknown")

    def __init__(self, home_dir: Path | None = None) -> None:
        """Initialize the settings manager.

        Args:
            home_dir: Data directory. Defaults to `default_home()`.

        Note:
            Prefer using factory methods `create()` or `create_default()` for construction.
        """
        self.home_dir = home_dir or default_home()
        self.config_file = self.home_dir / CONFIG_FILE

    @classmethod
    def create(cls, home_dir: Path) -> SettingsManager:
        return cls(home_dir=home_dir)

    @classmethod
    def create_default(cls) -> SettingsManager:
        return cls()

    def load(self) -> DeployerSettings:
        """Load settings from disk.

        Returns:
            Stored settings, or defaults if no config file exists.
        """
        if not self.config_file.exists():
            return DeployerSettings()
        data = json.loads(self.config_file.read_text())
        return DeployerSettings.model_validate(data)

    def save(self, settings: DeployerSettings) -> None:
        """Save settings to disk."""
        self.home_dir.mkdir(parents=True, exist_ok=True)
        data = settings.model_dump(by_alias=True, exclude_none=True)
        self.config_file.write_text(json.dumps(data, indent=2))

    def skills_root(self, settings: DeployerSettings | None = None) -> Path:
        """Get the canonical skills directory.

        Args:
            settings: Already-loaded settings, to avoid a second read.
        """
        settings = settings or self.load()
        if settings.skills_root:
            return Path(settings.skills_root).expanduser()
        return self.home_dir / SKILLS_DIR

    def set_value(self, key: str, value: str) -> DeployerSettings:
        """Update one setting and save.

        Args:
            key: One of ``KEYS``.
            value: Raw string value from the command line.

        Returns:
            The saved settings.

        Raises:
            ValueError: If the key is unknown or the value is invalid.
        """
        settings = self.load()
        if key == "skills-root":
            settings.skills_root = value or None
        elif key == "default-platforms":
            settings.default_platforms = [p.strip() for p in value.split(",") if p.strip()]
        elif key == "include-unknown":
            settings.include_unknown = _parse_bool(value)
        else:
            raise ValueError(f"Unknown configuration key: {key}. Supported: {list(self.KEYS)}")
        self.save(settings)
        return settings
