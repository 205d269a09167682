"""Link adapter for platforms that read SKILL.md directories.

The platform's skills directory gets a symlink named after the skill,
pointing at the canonical skill directory. Nothing is copied, so the
platform always sees the current source.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from skill_deployer.filesystem import RealFileSystem
from skill_deployer.platforms.base import PlatformDescriptor
from skill_deployer.protocols import FileSystem, SkillSource
from skill_deployer.types import DeployedSkillInfo, DeploymentStatus, DeployResult, RemoveResult

logger = logging.getLogger(__name__)

BACKUP_DIR = ".skill-deployer-backup"


def move_aside(fs: FileSystem, path: Path, skill_name: str) -> Path:
    """Move an object out of a skill's target path without deleting it.

    The object lands in a timestamped entry of the backup directory next to
    it. Hidden entries are skipped by listings, so backups never show up as
    deployed skills.

    Returns:
        Where the object was moved.
    """
    backup_root = path.parent / BACKUP_DIR
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    backup_path = backup_root / f"{skill_name}-{stamp}"
    fs.mkdir(backup_root, parents=True, exist_ok=True)
    fs.move(path, backup_path)
    logger.warning("Moved existing %s aside to %s", path, backup_path)
    return backup_path


class LinkAdapter:
    """Deploys skills as directory symlinks.

    Never deletes content it did not create: a non-link object in the way is
    either reported as a conflict or, with ``force``, moved into a backup
    directory next to it.
    """

    def __init__(self, store: SkillSource, filesystem: FileSystem) -> None:
        """Initialize the adapter.

        Args:
            store: Canonical skill lookup, used to validate existing links.
            filesystem: Filesystem abstraction.
        """
        self.store = store
        self.fs = filesystem

    @classmethod
    def create(cls, store: SkillSource, filesystem: FileSystem | None = None) -> LinkAdapter:
        return cls(store=store, filesystem=filesystem or RealFileSystem())

    def deploy(
        self,
        skill_name: str,
        source_path: Path,
        platform: PlatformDescriptor,
        force: bool = False,
        project_root: Path | None = None,
    ) -> DeployResult:
        """Link a platform's skill path to the canonical source.

        Args:
            skill_name: Name of the skill.
            source_path: Canonical skill directory.
            platform: Target platform.
            force: Replace an existing link or move aside an existing object.
            project_root: Deploy into the project-local skills directory.

        Returns:
            DeployResult with ``is_symlink=True``.
        """

        def failed(error: str, path: Path | None = None) -> DeployResult:
            return DeployResult(
                success=False,
                platform=platform.name,
                skill_name=skill_name,
                deployed_path=path,
                source_path=source_path,
                is_symlink=True,
                error=error,
            )

        target_dir = platform.target_dir(project_root)
        if target_dir is None:
            return failed(f"{platform.display_name} has no skills directory configured")

        if not self.fs.is_dir(source_path):
            return failed(f"Source skill directory does not exist: {source_path}")

        link_path = target_dir / skill_name

        if self.fs.lexists(link_path):
            if not force:
                if self._points_to(link_path, source_path):
                    logger.debug("%s already linked for %s", skill_name, platform.display_name)
                    return self._succeeded(skill_name, source_path, platform, link_path)
                return failed(f"Skill already exists at {link_path}. Use --force to overwrite.")
            self._clear(link_path, skill_name)

        self.fs.mkdir(target_dir, parents=True, exist_ok=True)
        # A relative target would resolve against the link's own directory
        self.fs.symlink(self.fs.resolve(source_path), link_path)
        logger.info(
            "Deployed %s to %s: %s -> %s", skill_name, platform.display_name, link_path, source_path
        )
        return self._succeeded(skill_name, source_path, platform, link_path)

    def remove(
        self,
        skill_name: str,
        platform: PlatformDescriptor,
        project_root: Path | None = None,
    ) -> RemoveResult:
        """Remove a skill link. Non-link objects are left in place."""
        target_dir = platform.target_dir(project_root)
        if target_dir is None:
            return RemoveResult(
                success=False,
                platform=platform.name,
                skill_name=skill_name,
                removed_path=None,
                error=f"{platform.display_name} has no skills directory configured",
            )

        link_path = target_dir / skill_name
        if not self.fs.lexists(link_path):
            return RemoveResult(
                success=True, platform=platform.name, skill_name=skill_name, removed_path=None
            )

        if not self.fs.is_symlink(link_path):
            return RemoveResult(
                success=False,
                platform=platform.name,
                skill_name=skill_name,
                removed_path=None,
                error=f"Path is not a symlink, refusing to remove: {link_path}",
            )

        self.fs.unlink(link_path)
        logger.info("Removed %s from %s: %s", skill_name, platform.display_name, link_path)
        return RemoveResult(
            success=True, platform=platform.name, skill_name=skill_name, removed_path=link_path
        )

    def list(
        self,
        platform: PlatformDescriptor,
        project_root: Path | None = None,
    ) -> list[DeployedSkillInfo]:
        """List skill directories and links in the platform's skills directory.

        Links are valid when they resolve to the canonical directory of the
        same name. Plain directories are reported but never valid.
        """
        target_dir = platform.target_dir(project_root)
        if target_dir is None or not self.fs.is_dir(target_dir):
            return []

        results = []
        for entry in self.fs.iterdir(target_dir):
            if entry.name.startswith("."):
                continue
            try:
                if self.fs.is_symlink(entry):
                    target = self.fs.readlink(entry)
                    results.append(
                        DeployedSkillInfo(
                            name=entry.name,
                            platform=platform.name,
                            path=entry,
                            is_valid=self._is_canonical_link(entry, entry.name),
                            is_symlink=True,
                            target=target,
                        )
                    )
                elif self.fs.is_dir(entry):
                    results.append(
                        DeployedSkillInfo(
                            name=entry.name,
                            platform=platform.name,
                            path=entry,
                            is_valid=False,
                            is_symlink=False,
                        )
                    )
            except OSError as e:
                logger.debug("Skipping unreadable entry %s: %s", entry, e)
        return results

    def is_deployed(
        self,
        skill_name: str,
        platform: PlatformDescriptor,
        project_root: Path | None = None,
    ) -> DeploymentStatus:
        """Check a skill link.

        Deployed means something occupies the skill path. Valid means it is a
        link resolving to exactly the canonical source directory.
        """
        target_dir = platform.target_dir(project_root)
        if target_dir is None:
            return DeploymentStatus(deployed=False, valid=False)

        link_path = target_dir / skill_name
        if not self.fs.lexists(link_path):
            return DeploymentStatus(deployed=False, valid=False)

        return DeploymentStatus(
            deployed=True,
            valid=self._is_canonical_link(link_path, skill_name),
            path=link_path,
        )

    def _succeeded(
        self, skill_name: str, source_path: Path, platform: PlatformDescriptor, link_path: Path
    ) -> DeployResult:
        return DeployResult(
            success=True,
            platform=platform.name,
            skill_name=skill_name,
            deployed_path=link_path,
            source_path=source_path,
            is_symlink=True,
        )

    def _points_to(self, link_path: Path, source_path: Path) -> bool:
        if not self.fs.is_symlink(link_path) or not self.fs.exists(link_path):
            return False
        return self.fs.resolve(link_path) == self.fs.resolve(source_path)

    def _is_canonical_link(self, link_path: Path, skill_name: str) -> bool:
        try:
            expected = self.store.skill_dir(skill_name)
        except ValueError:
            return False
        if not self.fs.is_dir(expected):
            return False
        return self._points_to(link_path, expected)

    def _clear(self, link_path: Path, skill_name: str) -> None:
        """Make room for a new link."""
        if self.fs.is_symlink(link_path):
            self.fs.unlink(link_path)
            logger.debug("Removed existing symlink: %s", link_path)
            return
        move_aside(self.fs, link_path, skill_name)
