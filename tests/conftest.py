"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from skill_deployer.adapters import AdapterSet
from skill_deployer.manager import DeploymentManager
from skill_deployer.platforms import PlatformDescriptor, PlatformRegistry
from skill_deployer.skill import SkillStore
from skill_deployer.types import SkillFormat

SAMPLE_SKILL = """---
name: demo
description: Demo skill for deployment tests
triggers:
  - run the demo
  - show a demo
---

# Demo

Run `demo --help` to get started.
"""


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Override home directory for testing."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.delenv("CODEX_HOME", raising=False)
    monkeypatch.delenv("SKILL_DEPLOYER_HOME", raising=False)
    return home


# ============================================================================
# Canonical Skill Fixtures
# ============================================================================


@pytest.fixture
def sample_skill_content() -> str:
    """Sample SKILL.md content."""
    return SAMPLE_SKILL


@pytest.fixture
def skills_root(tmp_path: Path) -> Path:
    """Create an empty canonical skills directory."""
    root = tmp_path / "canonical" / "skills"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def store(skills_root: Path) -> SkillStore:
    """Create a skill store over the temporary skills directory."""
    return SkillStore.create(skills_root)


@pytest.fixture
def demo_skill(skills_root: Path, sample_skill_content: str) -> Path:
    """Create the canonical 'demo' skill and return its directory."""
    skill_dir = skills_root / "demo"
    (skill_dir / "rules").mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text(sample_skill_content)
    (skill_dir / "rules" / "usage.md").write_text("# Usage\n")
    return skill_dir


# ============================================================================
# Platform Fixtures
# ============================================================================


@pytest.fixture
def link_platform(tmp_path: Path) -> PlatformDescriptor:
    """A SKILL.md platform that is always installed."""
    return PlatformDescriptor(
        name="alpha",
        display_name="Alpha",
        format=SkillFormat.SKILL_MD,
        project_dir=".alpha/skills",
        global_dir=lambda: tmp_path / "targets" / "alpha" / "skills",
        detect=lambda: True,
    )


@pytest.fixture
def convert_platform(tmp_path: Path) -> PlatformDescriptor:
    """A rules-markdown platform that is always installed."""
    return PlatformDescriptor(
        name="beta",
        display_name="Beta",
        format=SkillFormat.RULES_MD,
        project_dir=".beta/rules",
        global_dir=lambda: tmp_path / "targets" / "beta" / "rules",
        detect=lambda: True,
        file_extension=".md",
        skills_as_files=True,
    )


@pytest.fixture
def mdc_platform() -> PlatformDescriptor:
    """A Cursor-style platform with project rules only."""
    return PlatformDescriptor(
        name="delta",
        display_name="Delta",
        format=SkillFormat.CURSOR_MDC,
        project_dir=".delta/rules",
        global_dir=None,
        detect=lambda: True,
        file_extension=".mdc",
        skills_as_files=True,
    )


@pytest.fixture
def unknown_platform(tmp_path: Path) -> PlatformDescriptor:
    """A platform with an unverified layout that is always installed."""
    return PlatformDescriptor(
        name="charlie",
        display_name="Charlie",
        format=SkillFormat.UNKNOWN,
        project_dir=".charlie/skills",
        global_dir=lambda: tmp_path / "targets" / "charlie" / "skills",
        detect=lambda: True,
    )


@pytest.fixture
def registry(
    link_platform: PlatformDescriptor,
    convert_platform: PlatformDescriptor,
    unknown_platform: PlatformDescriptor,
) -> PlatformRegistry:
    """Registry with one link, one conversion and one unknown platform."""
    return PlatformRegistry([link_platform, convert_platform, unknown_platform])


@pytest.fixture
def adapters(store: SkillStore) -> AdapterSet:
    """Production adapters over the temporary store."""
    return AdapterSet.create(store)


@pytest.fixture
def manager(registry: PlatformRegistry, store: SkillStore, adapters: AdapterSet) -> DeploymentManager:
    """DeploymentManager over the test registry and store."""
    return DeploymentManager(registry=registry, store=store, adapters=adapters)
