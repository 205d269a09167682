"""Format-converting adapter for platforms with their own rules format.

Cursor, Continue and Trae cannot read a SKILL.md directory. For them the
skill is rendered into a single rules file. The file is regenerated in full
on every deploy and identified afterwards by its provenance stamp.
"""

from __future__ import annotations

import logging
from pathlib import Path

from skill_deployer.adapters.link import move_aside
from skill_deployer.filesystem import RealFileSystem
from skill_deployer.platforms.base import PlatformDescriptor
from skill_deployer.protocols import FileSystem, SkillSource
from skill_deployer.skill import MANIFEST_FILE, SkillManifest, SkillManifestError
from skill_deployer.transform import ConversionEngine, ProvenanceStamp, read_stamp
from skill_deployer.types import DeployedSkillInfo, DeploymentStatus, DeployResult, RemoveResult

logger = logging.getLogger(__name__)


class FormatConvertingAdapter:
    """Deploys skills as generated rules files.

    Only files carrying our provenance stamp are ever overwritten without
    ``force`` or removed; a platform directory may hold the user's own rules.
    """

    def __init__(
        self,
        store: SkillSource,
        filesystem: FileSystem,
        engine: ConversionEngine,
    ) -> None:
        """Initialize the adapter.

        Args:
            store: Canonical skill lookup, used to check generated files are
                current.
            filesystem: Filesystem abstraction.
            engine: Conversion engine.
        """
        self.store = store
        self.fs = filesystem
        self.engine = engine

    @classmethod
    def create(
        cls,
        store: SkillSource,
        filesystem: FileSystem | None = None,
        engine: ConversionEngine | None = None,
    ) -> FormatConvertingAdapter:
        return cls(
            store=store,
            filesystem=filesystem or RealFileSystem(),
            engine=engine or ConversionEngine(),
        )

    def deploy(
        self,
        skill_name: str,
        source_path: Path,
        platform: PlatformDescriptor,
        force: bool = False,
        project_root: Path | None = None,
    ) -> DeployResult:
        """Render the skill into the platform's format and write it.

        Args:
            skill_name: Name of the skill.
            source_path: Canonical skill directory.
            platform: Target platform.
            force: Overwrite an existing file even if it differs, moving any
                directory in the way into the backup directory.
            project_root: Deploy into the project-local rules directory.

        Returns:
            DeployResult with ``is_symlink=False``.
        """

        def failed(error: str, path: Path | None = None) -> DeployResult:
            return DeployResult(
                success=False,
                platform=platform.name,
                skill_name=skill_name,
                deployed_path=path,
                source_path=source_path,
                is_symlink=False,
                error=error,
            )

        file_path = platform.target_path(skill_name, project_root)
        if file_path is None:
            # e.g. Cursor has no global rules directory
            logger.debug(
                "Skipping %s for %s: no skills directory for this scope",
                skill_name,
                platform.display_name,
            )
            return DeployResult(
                success=True,
                platform=platform.name,
                skill_name=skill_name,
                deployed_path=None,
                source_path=source_path,
                is_symlink=False,
            )

        manifest_path = source_path / MANIFEST_FILE
        if not self.fs.is_file(manifest_path):
            return failed(f"Failed to read {MANIFEST_FILE} from {source_path}")
        try:
            source_text = self.fs.read_text(manifest_path)
            manifest = SkillManifest.parse(source_text)
        except SkillManifestError as e:
            return failed(f"Failed to parse {manifest_path}: {e}")

        stamp = ProvenanceStamp(name=skill_name, digest=self.fs.file_hash(manifest_path))
        content = self.engine.render(manifest, platform.format, stamp)

        if self.fs.lexists(file_path) and not force:
            if self.fs.is_file(file_path) and self.fs.read_text(file_path) == content:
                logger.debug("%s already current for %s", skill_name, platform.display_name)
                return self._succeeded(skill_name, source_path, platform, file_path)
            return failed(f"Skill already exists at {file_path}. Use --force to overwrite.")

        if self.fs.is_symlink(file_path):
            self.fs.unlink(file_path)
        elif self.fs.lexists(file_path) and not self.fs.is_file(file_path):
            move_aside(self.fs, file_path, skill_name)
        self.fs.mkdir(file_path.parent, parents=True, exist_ok=True)
        self.fs.write_text(file_path, content)
        logger.info("Deployed %s to %s: %s", skill_name, platform.display_name, file_path)
        return self._succeeded(skill_name, source_path, platform, file_path)

    def remove(
        self,
        skill_name: str,
        platform: PlatformDescriptor,
        project_root: Path | None = None,
    ) -> RemoveResult:
        """Delete the generated file for a skill, and nothing else."""
        file_path = platform.target_path(skill_name, project_root)
        if file_path is None or not self.fs.lexists(file_path):
            return RemoveResult(
                success=True, platform=platform.name, skill_name=skill_name, removed_path=None
            )

        if not self.fs.is_file(file_path) or read_stamp(self.fs.read_text(file_path)) is None:
            return RemoveResult(
                success=False,
                platform=platform.name,
                skill_name=skill_name,
                removed_path=None,
                error=f"File was not generated by skill-deployer, refusing to remove: {file_path}",
            )

        self.fs.unlink(file_path)
        logger.info("Removed %s from %s: %s", skill_name, platform.display_name, file_path)
        return RemoveResult(
            success=True, platform=platform.name, skill_name=skill_name, removed_path=file_path
        )

    def list(
        self,
        platform: PlatformDescriptor,
        project_root: Path | None = None,
    ) -> list[DeployedSkillInfo]:
        """List rules files in the platform's directory, each validity-checked."""
        target_dir = platform.target_dir(project_root)
        if target_dir is None or not self.fs.is_dir(target_dir):
            return []

        extension = platform.file_extension or ".md"
        results = []
        for entry in self.fs.iterdir(target_dir):
            if not entry.name.endswith(extension) or not self.fs.is_file(entry):
                continue
            name = entry.name[: -len(extension)]
            results.append(
                DeployedSkillInfo(
                    name=name,
                    platform=platform.name,
                    path=entry,
                    is_valid=self._is_current(entry, name),
                    is_symlink=False,
                )
            )
        return results

    def is_deployed(
        self,
        skill_name: str,
        platform: PlatformDescriptor,
        project_root: Path | None = None,
    ) -> DeploymentStatus:
        """Check a generated file.

        Valid means the file ends with our stamp for this skill and the stamp
        digest matches the current SKILL.md.
        """
        file_path = platform.target_path(skill_name, project_root)
        if file_path is None or not self.fs.lexists(file_path):
            return DeploymentStatus(deployed=False, valid=False)
        return DeploymentStatus(
            deployed=True,
            valid=self._is_current(file_path, skill_name),
            path=file_path,
        )

    def _succeeded(
        self, skill_name: str, source_path: Path, platform: PlatformDescriptor, file_path: Path
    ) -> DeployResult:
        return DeployResult(
            success=True,
            platform=platform.name,
            skill_name=skill_name,
            deployed_path=file_path,
            source_path=source_path,
            is_symlink=False,
        )

    def _is_current(self, file_path: Path, skill_name: str) -> bool:
        try:
            stamp = read_stamp(self.fs.read_text(file_path))
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Cannot read %s: %s", file_path, e)
            return False
        if stamp is None or stamp.name != skill_name:
            return False
        try:
            digest = self.store.manifest_digest(skill_name)
        except ValueError:
            return False
        return digest is not None and stamp.digest == digest
