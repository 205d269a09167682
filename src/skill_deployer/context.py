"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
and reducing coupling in CLI commands.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from skill_deployer.manager import DeploymentManager
from skill_deployer.platforms import PlatformRegistry
from skill_deployer.settings import DeployerSettings, SettingsManager
from skill_deployer.skill import SkillStore


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for all services used by CLI commands.
    Tests construct it directly with their own registry and store.
    """

    registry: PlatformRegistry
    store: SkillStore
    manager: DeploymentManager
    settings_manager: SettingsManager
    settings: DeployerSettings


def create_context(
    home_dir: Path | None = None,
    registry: PlatformRegistry | None = None,
) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.

    Args:
        home_dir: Override the skill-deployer data directory (for testing).
        registry: Override the platform catalog (for testing).

    Returns:
        Configured AppContext with all dependencies.
    """
    settings_manager = (
        SettingsManager.create(home_dir) if home_dir else SettingsManager.create_default()
    )
    settings = settings_manager.load()
    store = SkillStore.create(settings_manager.skills_root(settings))
    registry = registry or PlatformRegistry.create_default()
    manager = DeploymentManager.create(store=store, registry=registry)

    return AppContext(
        registry=registry,
        store=store,
        manager=manager,
        settings_manager=settings_manager,
        settings=settings,
    )
