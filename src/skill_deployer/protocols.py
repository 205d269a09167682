"""Protocol definitions for core abstractions.

This module defines abstract interfaces (Protocols) for the services the
deployment engine depends on. Designing to interfaces enables:
- Loose coupling between components
- Easy substitution of test doubles
- Clear contracts for implementations

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from skill_deployer.types import (
    DeployedSkillInfo,
    DeploymentStatus,
    DeployResult,
    RemoveResult,
)

if TYPE_CHECKING:
    from skill_deployer.platforms.base import PlatformDescriptor


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem operations.

    Abstracts file I/O so adapters can be exercised against test doubles.
    """

    def read_text(self, path: Path) -> str:
        """Read text content from a file."""
        ...

    def write_text(self, path: Path, content: str) -> None:
        """Write text content to a file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if a path exists, following symlinks."""
        ...

    def lexists(self, path: Path) -> bool:
        """Check if a path exists without following symlinks."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file."""
        ...

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link."""
        ...

    def readlink(self, path: Path) -> Path:
        """Return the absolute target of a symlink."""
        ...

    def resolve(self, path: Path) -> Path:
        """Return the canonical absolute form of a path."""
        ...

    def symlink(self, target: Path, link: Path) -> None:
        """Create a directory symlink."""
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        ...

    def iterdir(self, path: Path) -> list[Path]:
        """List directory entries."""
        ...

    def unlink(self, path: Path) -> None:
        """Remove a file or symlink."""
        ...

    def move(self, src: Path, dst: Path) -> None:
        """Move a file or directory."""
        ...

    def file_hash(self, path: Path) -> str:
        """Get the SHA256 hex digest of a file."""
        ...


@runtime_checkable
class DeploymentAdapter(Protocol):
    """Protocol for deploying skills into one kind of platform layout.

    Implementations never raise for expected conditions (conflicts, missing
    targets); those come back as failed records. Unexpected errors may
    propagate and are isolated per platform by the DeploymentManager.
    """

    def deploy(
        self,
        skill_name: str,
        source_path: Path,
        platform: PlatformDescriptor,
        force: bool = False,
        project_root: Path | None = None,
    ) -> DeployResult:
        """Make a skill visible to a platform.

        Args:
            skill_name: Name of the skill.
            source_path: Canonical skill directory.
            platform: Target platform.
            force: Replace whatever currently occupies the target.
            project_root: Deploy into the project-local directory instead of
                the platform's global one.

        Returns:
            DeployResult for this platform.
        """
        ...

    def remove(
        self,
        skill_name: str,
        platform: PlatformDescriptor,
        project_root: Path | None = None,
    ) -> RemoveResult:
        """Remove a deployed skill. Removing nothing is a success."""
        ...

    def list(
        self,
        platform: PlatformDescriptor,
        project_root: Path | None = None,
    ) -> list[DeployedSkillInfo]:
        """List every skill present in the platform's directory."""
        ...

    def is_deployed(
        self,
        skill_name: str,
        platform: PlatformDescriptor,
        project_root: Path | None = None,
    ) -> DeploymentStatus:
        """Check whether a skill is deployed and matches its source."""
        ...


@runtime_checkable
class SkillSource(Protocol):
    """Protocol for canonical skill lookup."""

    @property
    def root(self) -> Path:
        """Directory holding one subdirectory per skill."""
        ...

    def skill_dir(self, name: str) -> Path:
        """Get the canonical directory for a skill."""
        ...

    def exists(self, name: str) -> bool:
        """Check whether a skill's canonical directory exists."""
        ...

    def list_skills(self) -> list[str]:
        """List skill names present in the store."""
        ...

    def manifest_digest(self, name: str) -> str | None:
        """Get the digest of a skill's SKILL.md, or None if absent."""
        ...
