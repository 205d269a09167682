"""Platform registry: the catalog of deployment targets."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from skill_deployer.platforms.base import PlatformDescriptor
from skill_deployer.platforms.catalog import BUILTIN_PLATFORMS, PlatformName
from skill_deployer.types import DeploymentKind, SkillFormat

logger = logging.getLogger(__name__)

__all__ = [
    "BUILTIN_PLATFORMS",
    "PlatformDescriptor",
    "PlatformName",
    "PlatformRegistry",
]


class PlatformRegistry:
    """Fixed mapping from platform name to descriptor.

    Entries are set at construction and never change. Use `create_default()`
    for the built-in catalog; tests construct a registry from their own
    descriptors.
    """

    def __init__(self, platforms: Iterable[PlatformDescriptor]) -> None:
        """Initialize the registry.

        Args:
            platforms: Descriptors in display order.

        Raises:
            ValueError: If two descriptors share a name.
        """
        self._platforms: dict[str, PlatformDescriptor] = {}
        for platform in platforms:
            if platform.name in self._platforms:
                raise ValueError(f"Duplicate platform: {platform.name}")
            self._platforms[platform.name] = platform

    @classmethod
    def create_default(cls) -> PlatformRegistry:
        """Create a registry holding the built-in catalog."""
        return cls(BUILTIN_PLATFORMS[name] for name in PlatformName)

    def all_platforms(self) -> list[PlatformDescriptor]:
        """Get every platform in catalog order."""
        return list(self._platforms.values())

    def names(self) -> list[str]:
        return list(self._platforms)

    def get(self, name: str) -> PlatformDescriptor | None:
        return self._platforms.get(name)

    def is_valid(self, name: str) -> bool:
        return name in self._platforms

    def require(self, name: str) -> PlatformDescriptor:
        """Get a platform by name.

        Raises:
            ValueError: If the platform is not in the catalog.
        """
        platform = self._platforms.get(name)
        if platform is None:
            raise ValueError(f"Unknown platform: {name}. Supported: {self.names()}")
        return platform

    def iter_installed(self) -> Iterator[PlatformDescriptor]:
        """Yield installed platforms, checking each one only when reached.

        A detection predicate that raises marks that platform as not
        installed; the remaining platforms are still checked.
        """
        for platform in self._platforms.values():
            try:
                installed = platform.is_installed()
            except Exception as e:
                logger.debug("Error detecting %s: %s", platform.display_name, e)
                continue
            if installed:
                yield platform

    def detect_installed(self) -> list[PlatformDescriptor]:
        """Get every platform that appears to be installed."""
        return list(self.iter_installed())

    def deployable_subset(self, include_unknown: bool = False) -> list[PlatformDescriptor]:
        """Get installed platforms that can safely receive deployments.

        Args:
            include_unknown: Also return platforms with an unverified format.

        Returns:
            Installed platforms, without ``unknown`` formats unless requested.
        """
        installed = self.iter_installed()
        if include_unknown:
            return list(installed)
        return [p for p in installed if p.kind is not DeploymentKind.UNKNOWN]

    def resolve(self, names: Iterable[str]) -> list[PlatformDescriptor]:
        """Map names to descriptors, dropping names not in the catalog.

        Duplicates are collapsed, keeping the first occurrence.
        """
        resolved: list[PlatformDescriptor] = []
        seen: set[str] = set()
        for name in names:
            platform = self._platforms.get(name)
            if platform is None:
                logger.warning("Ignoring unknown platform: %s", name)
                continue
            if platform.name in seen:
                continue
            seen.add(platform.name)
            resolved.append(platform)
        return resolved

    def link_platforms(self) -> list[PlatformDescriptor]:
        """Platforms that read the canonical SKILL.md directory directly."""
        return [p for p in self._platforms.values() if p.format is SkillFormat.SKILL_MD]

    def conversion_platforms(self) -> list[PlatformDescriptor]:
        """Platforms that need a converted file."""
        return [p for p in self._platforms.values() if p.kind is DeploymentKind.CONVERT]

    def summary(self) -> dict[str, Any]:
        """Summarize platform support by deployment kind."""
        return {
            "linkPlatforms": [p.name for p in self.link_platforms()],
            "conversionPlatforms": [p.name for p in self.conversion_platforms()],
            "totalPlatforms": len(self._platforms),
        }
