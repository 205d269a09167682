"""Deployment orchestration across platforms.

This module provides the high-level operations:
- Deploying a skill to every target platform
- Removing a skill from every target platform
- Listing deployed skills per platform
- Reconciling (syncing) a skill: detect drift and repair it

Per-platform isolation is the central contract. One platform's failure is
recorded against that platform and never stops the others.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from skill_deployer.adapters import AdapterSet, get_adapter
from skill_deployer.platforms import PlatformDescriptor, PlatformRegistry
from skill_deployer.skill import SkillStore
from skill_deployer.types import (
    DeployedSkillInfo,
    DeploymentKind,
    DeployResult,
    MultiPlatformDeployResult,
    MultiPlatformRemoveResult,
    RemoveResult,
    SyncResult,
    SyncState,
)
from skill_deployer.validation import validate_skill_name

logger = logging.getLogger(__name__)


class DeploymentManager:
    """Deploys, removes, lists and reconciles skills across platforms.

    Follows Separate Use from Creation: constructor requires all dependencies.
    Use factory method `create()` for production instantiation with defaults.
    """

    def __init__(
        self,
        registry: PlatformRegistry,
        store: SkillStore,
        adapters: AdapterSet,
    ) -> None:
        """Initialize manager with required dependencies.

        Args:
            registry: Platform catalog.
            store: Canonical skill store.
            adapters: Adapter instances, one per deployment strategy.
        """
        self.registry = registry
        self.store = store
        self.adapters = adapters

    @classmethod
    def create(
        cls,
        store: SkillStore,
        registry: PlatformRegistry | None = None,
        adapters: AdapterSet | None = None,
    ) -> DeploymentManager:
        """Factory method for production instantiation.

        Args:
            store: Canonical skill store.
            registry: Optional platform registry (built-in catalog if omitted).
            adapters: Optional adapters (created over the store's filesystem).

        Returns:
            Configured DeploymentManager instance.
        """
        return cls(
            registry=registry or PlatformRegistry.create_default(),
            store=store,
            adapters=adapters or AdapterSet.create(store, filesystem=store.fs),
        )

    def target_platforms(
        self,
        platforms: Iterable[str] | None = None,
        include_unknown: bool = False,
    ) -> list[PlatformDescriptor]:
        """Resolve the platforms an operation applies to.

        Args:
            platforms: Explicit platform names. Names not in the catalog are
                dropped. When empty or None, installed platforms are detected.
            include_unknown: When detecting, also include platforms with an
                unverified format.

        Returns:
            Target platforms in order.
        """
        names = list(platforms or [])
        if names:
            return self.registry.resolve(names)
        return self.registry.deployable_subset(include_unknown=include_unknown)

    def deploy_to_all(
        self,
        skill_name: str,
        force: bool = False,
        project_root: Path | None = None,
        platforms: Iterable[str] | None = None,
        include_unknown: bool = False,
    ) -> MultiPlatformDeployResult:
        """Deploy a skill to every target platform.

        Args:
            skill_name: Skill to deploy.
            force: Replace existing targets.
            project_root: Deploy into project-local directories.
            platforms: Explicit target platforms (auto-detected if omitted).
            include_unknown: Include unverified platforms when auto-detecting.

        Returns:
            MultiPlatformDeployResult. If the canonical source is missing, no
            platform is attempted and ``error`` is set.
        """
        source_path, error = self._resolve_source(skill_name)
        result = MultiPlatformDeployResult(skill_name=skill_name, source_path=source_path)
        if error:
            logger.error(error)
            result.error = error
            return result

        for platform in self.target_platforms(platforms, include_unknown):
            result.add(self._deploy_one(skill_name, source_path, platform, force, project_root))

        logger.debug(
            "Deployed %s: %d succeeded, %d failed",
            skill_name,
            result.success_count,
            result.failure_count,
        )
        return result

    def remove_from_all(
        self,
        skill_name: str,
        project_root: Path | None = None,
        platforms: Iterable[str] | None = None,
        include_unknown: bool = False,
    ) -> MultiPlatformRemoveResult:
        """Remove a skill from every target platform.

        The canonical source does not need to exist.
        """
        result = MultiPlatformRemoveResult(skill_name=skill_name)
        errors = validate_skill_name(skill_name)
        if errors:
            result.error = f"Invalid skill name '{skill_name}': {'; '.join(errors)}"
            logger.error(result.error)
            return result

        for platform in self.target_platforms(platforms, include_unknown):
            adapter = get_adapter(platform, self.adapters)
            try:
                removed = adapter.remove(skill_name, platform, project_root=project_root)
            except Exception as e:
                logger.exception("Removal failed for %s on %s", skill_name, platform.name)
                removed = RemoveResult(
                    success=False,
                    platform=platform.name,
                    skill_name=skill_name,
                    removed_path=None,
                    error=str(e) or type(e).__name__,
                )
            result.add(removed)
        return result

    def list_all_deployed(
        self,
        project_root: Path | None = None,
        platforms: Iterable[str] | None = None,
        include_unknown: bool = False,
    ) -> dict[str, list[DeployedSkillInfo]]:
        """List deployed skills per platform.

        A platform whose listing fails gets an empty list.
        """
        listing: dict[str, list[DeployedSkillInfo]] = {}
        for platform in self.target_platforms(platforms, include_unknown):
            adapter = get_adapter(platform, self.adapters)
            try:
                listing[platform.name] = adapter.list(platform, project_root=project_root)
            except Exception as e:
                logger.warning("Error listing skills for %s: %s", platform.display_name, e)
                listing[platform.name] = []
        return listing

    def sync_to_all(
        self,
        skill_name: str,
        project_root: Path | None = None,
        platforms: Iterable[str] | None = None,
        dry_run: bool = False,
        include_unknown: bool = False,
    ) -> SyncResult:
        """Reconcile a skill across platforms.

        Each platform is checked, then repaired with a forced deploy if it is
        missing or invalid. In dry-run mode only the observed status is
        recorded. Platforms with no directory for the scope are marked
        not applicable and left unchecked.

        Args:
            skill_name: Skill to reconcile.
            project_root: Reconcile project-local directories.
            platforms: Explicit target platforms (auto-detected if omitted).
            dry_run: Report drift without writing anything.
            include_unknown: Include unverified platforms when auto-detecting.

        Returns:
            SyncResult with observed status, applied repairs and the final
            state of every platform.
        """
        source_path, error = self._resolve_source(skill_name)
        result = SyncResult(skill_name=skill_name, source_path=source_path, dry_run=dry_run)
        if error:
            logger.error(error)
            result.error = error
            return result

        for platform in self.target_platforms(platforms, include_unknown):
            self._sync_one(result, platform, project_root)
        return result

    def sync_all_skills(
        self,
        project_root: Path | None = None,
        platforms: Iterable[str] | None = None,
        dry_run: bool = False,
        include_unknown: bool = False,
    ) -> list[SyncResult]:
        """Reconcile every skill in the store."""
        targets = [p.name for p in self.target_platforms(platforms, include_unknown)]
        return [
            self.sync_to_all(
                name,
                project_root=project_root,
                platforms=targets,
                dry_run=dry_run,
            )
            for name in self.store.list_skills()
        ]

    def platform_summary(self) -> dict[str, Any]:
        return self.registry.summary()

    def _resolve_source(self, skill_name: str) -> tuple[Path, str | None]:
        try:
            source_path = self.store.skill_dir(skill_name)
        except ValueError as e:
            return self.store.root / skill_name, str(e)
        if not self.store.exists(skill_name):
            return source_path, f"Source skill directory does not exist: {source_path}"
        return source_path, None

    def _deploy_one(
        self,
        skill_name: str,
        source_path: Path,
        platform: PlatformDescriptor,
        force: bool,
        project_root: Path | None,
    ) -> DeployResult:
        adapter = get_adapter(platform, self.adapters)
        try:
            return adapter.deploy(
                skill_name, source_path, platform, force=force, project_root=project_root
            )
        except Exception as e:
            logger.exception("Deployment failed for %s on %s", skill_name, platform.name)
            return DeployResult(
                success=False,
                platform=platform.name,
                skill_name=skill_name,
                deployed_path=None,
                source_path=source_path,
                is_symlink=platform.kind is not DeploymentKind.CONVERT,
                error=str(e) or type(e).__name__,
            )

    def _sync_one(
        self,
        result: SyncResult,
        platform: PlatformDescriptor,
        project_root: Path | None,
    ) -> None:
        if platform.target_dir(project_root) is None:
            logger.debug(
                "Skipping sync of %s for %s: no skills directory for this scope",
                result.skill_name,
                platform.display_name,
            )
            result.states[platform.name] = SyncState.NOT_APPLICABLE
            return

        adapter = get_adapter(platform, self.adapters)
        try:
            status = adapter.is_deployed(result.skill_name, platform, project_root=project_root)
        except Exception as e:
            logger.exception("Status check failed for %s on %s", result.skill_name, platform.name)
            result.states[platform.name] = SyncState.ERROR
            result.errors[platform.name] = str(e) or type(e).__name__
            return

        result.observed[platform.name] = status
        if status.deployed and status.valid:
            result.states[platform.name] = SyncState.VALID
            return
        if result.dry_run:
            result.states[platform.name] = SyncState.DRIFTED
            return

        repaired = self._deploy_one(
            result.skill_name, result.source_path, platform, force=True, project_root=project_root
        )
        result.applied[platform.name] = repaired
        if repaired.success:
            result.states[platform.name] = SyncState.REPAIRED
        else:
            result.states[platform.name] = SyncState.REPAIR_FAILED
            result.errors[platform.name] = repaired.error or "repair failed"
