"""Deployment adapters and adapter selection.

Adapter choice is a pure function of a platform's deployment kind: a closed
set of kinds, each mapped to one adapter instance.
"""

from __future__ import annotations

from dataclasses import dataclass

from skill_deployer.adapters.convert import FormatConvertingAdapter
from skill_deployer.adapters.link import LinkAdapter
from skill_deployer.filesystem import RealFileSystem
from skill_deployer.platforms.base import PlatformDescriptor
from skill_deployer.protocols import DeploymentAdapter, FileSystem, SkillSource
from skill_deployer.transform import ConversionEngine
from skill_deployer.types import DeploymentKind

__all__ = [
    "AdapterSet",
    "FormatConvertingAdapter",
    "LinkAdapter",
    "get_adapter",
]


@dataclass(frozen=True)
class AdapterSet:
    """One adapter instance per deployment strategy."""

    link: DeploymentAdapter
    convert: DeploymentAdapter

    @classmethod
    def create(
        cls,
        store: SkillSource,
        filesystem: FileSystem | None = None,
        engine: ConversionEngine | None = None,
    ) -> AdapterSet:
        """Build the production adapters sharing one filesystem."""
        fs = filesystem or RealFileSystem()
        return cls(
            link=LinkAdapter(store=store, filesystem=fs),
            convert=FormatConvertingAdapter(
                store=store, filesystem=fs, engine=engine or ConversionEngine()
            ),
        )


def get_adapter(platform: PlatformDescriptor, adapters: AdapterSet) -> DeploymentAdapter:
    """Select the adapter for a platform.

    Unknown formats fall back to linking; callers only reach them after
    explicitly including unknown platforms.
    """
    strategies = {
        DeploymentKind.LINK: adapters.link,
        DeploymentKind.CONVERT: adapters.convert,
        DeploymentKind.UNKNOWN: adapters.link,
    }
    return strategies[platform.kind]
