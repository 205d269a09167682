"""Tests for the platform catalog and registry."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from skill_deployer.platforms import (
    BUILTIN_PLATFORMS,
    PlatformDescriptor,
    PlatformName,
    PlatformRegistry,
)
from skill_deployer.types import DeploymentKind, SkillFormat


def _raising_detect() -> bool:
    raise PermissionError("denied")


class TestCatalog:
    """Tests for the built-in catalog."""

    def test_every_name_has_a_descriptor(self) -> None:
        """The catalog covers the closed set of platform names."""
        assert set(BUILTIN_PLATFORMS) == set(PlatformName)
        for name, descriptor in BUILTIN_PLATFORMS.items():
            assert descriptor.name == name.value

    def test_formats(self) -> None:
        """Test format classification of catalog entries."""
        assert BUILTIN_PLATFORMS[PlatformName.CLAUDE_CODE].kind is DeploymentKind.LINK
        assert BUILTIN_PLATFORMS[PlatformName.CURSOR].format is SkillFormat.CURSOR_MDC
        assert BUILTIN_PLATFORMS[PlatformName.CONTINUE].kind is DeploymentKind.CONVERT
        assert BUILTIN_PLATFORMS[PlatformName.TRAE].kind is DeploymentKind.CONVERT
        assert BUILTIN_PLATFORMS[PlatformName.QODER].kind is DeploymentKind.UNKNOWN

    def test_global_paths_follow_home(self, temp_home: Path) -> None:
        """Global directories are resolved under the current home."""
        claude = BUILTIN_PLATFORMS[PlatformName.CLAUDE_CODE]
        moltbot = BUILTIN_PLATFORMS[PlatformName.MOLTBOT]
        assert claude.global_skills_dir == temp_home / ".claude" / "skills"
        assert moltbot.global_skills_dir == temp_home / ".clawdbot" / "skills"

    def test_codex_home_override(self, temp_home: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """CODEX_HOME relocates the Codex skills directory."""
        codex = BUILTIN_PLATFORMS[PlatformName.CODEX]
        assert codex.global_skills_dir == temp_home / ".codex" / "skills"

        monkeypatch.setenv("CODEX_HOME", str(tmp_path / "codex"))
        assert codex.global_skills_dir == tmp_path / "codex" / "skills"

    def test_cursor_has_no_global_dir(self, temp_home: Path) -> None:
        """Cursor rules are project-local only."""
        cursor = BUILTIN_PLATFORMS[PlatformName.CURSOR]
        assert cursor.target_dir() is None
        assert cursor.target_path("demo") is None
        assert cursor.target_path("demo", project_root=Path("/proj")) == Path(
            "/proj/.cursor/rules/demo.mdc"
        )

    def test_detection(self, temp_home: Path) -> None:
        """Platforms are detected by their home directory."""
        claude = BUILTIN_PLATFORMS[PlatformName.CLAUDE_CODE]
        assert claude.is_installed() is False
        (temp_home / ".claude").mkdir()
        assert claude.is_installed() is True


class TestPlatformDescriptor:
    """Tests for PlatformDescriptor path helpers."""

    def test_project_root_wins(self, link_platform: PlatformDescriptor, tmp_path: Path) -> None:
        """A project root selects the project-local directory."""
        project = tmp_path / "proj"
        assert link_platform.target_dir(project) == project / ".alpha" / "skills"
        assert link_platform.target_path("demo", project) == project / ".alpha" / "skills" / "demo"

    def test_file_per_skill(self, convert_platform: PlatformDescriptor, tmp_path: Path) -> None:
        """File-per-skill platforms append the extension."""
        assert convert_platform.target_path("demo") == tmp_path / "targets" / "beta" / "rules" / "demo.md"


class TestPlatformRegistry:
    """Tests for PlatformRegistry."""

    def test_create_default(self) -> None:
        """The default registry holds the catalog in order."""
        registry = PlatformRegistry.create_default()
        assert registry.names() == [name.value for name in PlatformName]

    def test_duplicate_rejected(self, link_platform: PlatformDescriptor) -> None:
        """Two descriptors cannot share a name."""
        with pytest.raises(ValueError, match="Duplicate"):
            PlatformRegistry([link_platform, link_platform])

    def test_lookup(self, registry: PlatformRegistry) -> None:
        """Test get, is_valid and require."""
        assert registry.get("alpha") is not None
        assert registry.get("nope") is None
        assert registry.is_valid("beta") is True
        assert registry.is_valid("nope") is False
        with pytest.raises(ValueError, match="Unknown platform"):
            registry.require("nope")

    def test_detection_failure_is_isolated(self, link_platform: PlatformDescriptor) -> None:
        """A raising detector marks only that platform as not installed."""
        broken = PlatformDescriptor(
            name="broken",
            display_name="Broken",
            format=SkillFormat.SKILL_MD,
            project_dir=None,
            global_dir=None,
            detect=_raising_detect,
        )
        registry = PlatformRegistry([broken, link_platform])
        assert [p.name for p in registry.detect_installed()] == ["alpha"]

    def test_iter_installed_is_lazy(self, link_platform: PlatformDescriptor) -> None:
        """Detection runs only as far as the caller iterates."""
        calls: list[str] = []

        def detect_second() -> bool:
            calls.append("second")
            return True

        second = PlatformDescriptor(
            name="second",
            display_name="Second",
            format=SkillFormat.SKILL_MD,
            project_dir=None,
            global_dir=None,
            detect=detect_second,
        )
        registry = PlatformRegistry([link_platform, second])

        first = next(registry.iter_installed())
        assert first.name == "alpha"
        assert calls == []

    def test_deployable_subset(self, registry: PlatformRegistry) -> None:
        """Unknown formats are excluded unless requested."""
        assert [p.name for p in registry.deployable_subset()] == ["alpha", "beta"]
        assert [p.name for p in registry.deployable_subset(include_unknown=True)] == [
            "alpha",
            "beta",
            "charlie",
        ]

    def test_resolve(self, registry: PlatformRegistry, caplog: pytest.LogCaptureFixture) -> None:
        """Unknown names are dropped with a warning and duplicates collapsed."""
        with caplog.at_level(logging.WARNING):
            resolved = registry.resolve(["beta", "nope", "alpha", "beta"])
        assert [p.name for p in resolved] == ["beta", "alpha"]
        assert "nope" in caplog.text

    def test_summary(self, registry: PlatformRegistry) -> None:
        """Test the support summary."""
        summary = registry.summary()
        assert summary == {
            "linkPlatforms": ["alpha"],
            "conversionPlatforms": ["beta"],
            "totalPlatforms": 3,
        }
