"""Tests for persistent settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from skill_deployer.settings import DeployerSettings, SettingsManager, default_home


class TestDefaultHome:
    """Tests for default_home."""

    def test_under_home(self, temp_home: Path) -> None:
        assert default_home() == temp_home / ".skill-deployer"

    def test_env_override(self, temp_home: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILL_DEPLOYER_HOME", str(tmp_path / "elsewhere"))
        assert default_home() == tmp_path / "elsewhere"


class TestSettingsManager:
    """Tests for SettingsManager."""

    def test_load_defaults(self, tmp_path: Path) -> None:
        """Missing config gives defaults."""
        settings = SettingsManager.create(tmp_path).load()
        assert settings == DeployerSettings()

    def test_save_uses_camel_case(self, tmp_path: Path) -> None:
        manager = SettingsManager.create(tmp_path / "home")
        manager.save(DeployerSettings(default_platforms=["codex"], include_unknown=True))

        data = json.loads((tmp_path / "home" / "config.json").read_text())
        assert data["defaultPlatforms"] == ["codex"]
        assert data["includeUnknown"] is True
        assert "skillsRoot" not in data

    def test_skills_root(self, tmp_path: Path) -> None:
        manager = SettingsManager.create(tmp_path)
        assert manager.skills_root() == tmp_path / "skills"

        manager.set_value("skills-root", str(tmp_path / "custom"))
        assert manager.skills_root() == tmp_path / "custom"

    def test_set_default_platforms(self, tmp_path: Path) -> None:
        manager = SettingsManager.create(tmp_path)
        settings = manager.set_value("default-platforms", "codex, cursor,,")
        assert settings.default_platforms == ["codex", "cursor"]
        assert manager.load().default_platforms == ["codex", "cursor"]

    @pytest.mark.parametrize(("raw", "expected"), [("yes", True), ("0", False), ("True", True)])
    def test_set_include_unknown(self, tmp_path: Path, raw: str, expected: bool) -> None:
        manager = SettingsManager.create(tmp_path)
        assert manager.set_value("include-unknown", raw).include_unknown is expected

    def test_set_invalid_bool(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="boolean"):
            SettingsManager.create(tmp_path).set_value("include-unknown", "maybe")

    def test_set_unknown_key(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown configuration key"):
            SettingsManager.create(tmp_path).set_value("colour", "blue")
