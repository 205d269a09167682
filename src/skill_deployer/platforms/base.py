"""Platform descriptor shared by every catalog entry.

A platform is one external tool that can consume a deployed skill. Each
descriptor carries its identity, the skill format the tool reads, where it
looks for skills, and a predicate for detecting whether it is installed.
Paths are resolved at query time so a changed home directory or environment
is always picked up.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from skill_deployer.types import DeploymentKind, SkillFormat


def home_path(*parts: str) -> Callable[[], Path]:
    """Build a resolver for a path under the user's home directory."""

    def resolve() -> Path:
        return Path.home().joinpath(*parts)

    return resolve


def env_or_home_path(env_var: str, env_parts: tuple[str, ...], *home_parts: str) -> Callable[[], Path]:
    """Build a resolver that prefers a directory named by an environment variable.

    Args:
        env_var: Environment variable holding a base directory.
        env_parts: Path components appended to the variable's value.
        home_parts: Fallback path components under the home directory.
    """

    def resolve() -> Path:
        base = os.environ.get(env_var)
        if base:
            return Path(base).joinpath(*env_parts)
        return Path.home().joinpath(*home_parts)

    return resolve


def home_exists(*parts: str) -> Callable[[], bool]:
    """Build a detection predicate that checks a path under home exists."""

    def detect() -> bool:
        return Path.home().joinpath(*parts).exists()

    return detect


@dataclass(frozen=True)
class PlatformDescriptor:
    """Identity and layout of one target platform.

    Attributes:
        name: Stable key, e.g. ``claude-code``.
        display_name: Human-readable label.
        format: Skill format the platform consumes.
        project_dir: Skills directory relative to a project root, or None.
        global_dir: Resolver for the user-wide skills directory, or None if
            the platform has no global location.
        detect: Predicate returning True if the platform is installed.
        file_extension: Extension of generated files for file-per-skill
            platforms.
        skills_as_files: True if each skill is a single file rather than a
            directory.
    """

    name: str
    display_name: str
    format: SkillFormat
    project_dir: str | None
    global_dir: Callable[[], Path] | None
    detect: Callable[[], bool]
    file_extension: str = ""
    skills_as_files: bool = False

    @property
    def kind(self) -> DeploymentKind:
        return DeploymentKind.for_format(self.format)

    @property
    def global_skills_dir(self) -> Path | None:
        """Resolve the user-wide skills directory."""
        return self.global_dir() if self.global_dir is not None else None

    def target_dir(self, project_root: Path | None = None) -> Path | None:
        """Get the directory skills are deployed into.

        Args:
            project_root: Project to deploy into. When given and the platform
                supports project-local skills, the project directory wins.

        Returns:
            Target directory, or None if the platform has none for this scope.
        """
        if project_root is not None and self.project_dir:
            return project_root / self.project_dir
        return self.global_skills_dir

    def target_path(self, skill_name: str, project_root: Path | None = None) -> Path | None:
        """Get the path a skill occupies on this platform."""
        target_dir = self.target_dir(project_root)
        if target_dir is None:
            return None
        if self.skills_as_files:
            return target_dir / f"{skill_name}{self.file_extension or '.md'}"
        return target_dir / skill_name

    def is_installed(self) -> bool:
        """Evaluate the detection predicate."""
        return bool(self.detect())
