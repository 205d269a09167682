"""Shared data types for skill deployment."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "DeployResult",
    "DeployedSkillInfo",
    "DeploymentKind",
    "DeploymentStatus",
    "MultiPlatformDeployResult",
    "MultiPlatformRemoveResult",
    "RemoveResult",
    "SkillFormat",
    "SyncResult",
    "SyncState",
]


class SkillFormat(str, Enum):
    """On-disk skill format a platform consumes."""

    SKILL_MD = "skill-md"
    CURSOR_MDC = "cursor-mdc"
    RULES_MD = "rules-md"
    UNKNOWN = "unknown"


class DeploymentKind(str, Enum):
    """How a skill reaches a platform."""

    LINK = "link-capable"
    CONVERT = "conversion-required"
    UNKNOWN = "unknown"

    @classmethod
    def for_format(cls, fmt: SkillFormat) -> DeploymentKind:
        """Classify a skill format."""
        if fmt is SkillFormat.SKILL_MD:
            return cls.LINK
        if fmt in (SkillFormat.CURSOR_MDC, SkillFormat.RULES_MD):
            return cls.CONVERT
        return cls.UNKNOWN


class SyncState(str, Enum):
    """Terminal state of one platform after a sync pass."""

    VALID = "valid"
    REPAIRED = "repaired"
    REPAIR_FAILED = "repair-failed"
    DRIFTED = "drifted"
    ERROR = "error"
    NOT_APPLICABLE = "not-applicable"


def _path_str(path: Path | None) -> str | None:
    return str(path) if path is not None else None


def _check_outcome(success: bool, error: str | None, skill_name: str) -> None:
    if success and error is not None:
        raise ValueError("success=True but error is set")
    if not success and not error:
        raise ValueError("success=False requires error message")
    if not skill_name:
        raise ValueError("skill_name cannot be empty")


@dataclass(frozen=True)
class DeployResult:
    """Result of deploying one skill to one platform.

    Attributes:
        success: True if the platform now carries the skill.
        platform: Target platform name.
        skill_name: Name of the deployed skill.
        deployed_path: Link or generated file location (None on failure or
            when the platform has no directory for the requested scope).
        source_path: Canonical skill directory.
        is_symlink: True for link deployments, False for generated copies.
        error: Error message (None on success).
    """

    success: bool
    platform: str
    skill_name: str
    deployed_path: Path | None
    source_path: Path
    is_symlink: bool
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        _check_outcome(self.success, self.error, self.skill_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "platform": self.platform,
            "skillName": self.skill_name,
            "deployedPath": _path_str(self.deployed_path),
            "sourcePath": str(self.source_path),
            "isSymlink": self.is_symlink,
            "error": self.error,
        }


@dataclass(frozen=True)
class RemoveResult:
    """Result of removing one skill from one platform.

    ``removed_path`` is None when there was nothing to remove.
    """

    success: bool
    platform: str
    skill_name: str
    removed_path: Path | None
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        _check_outcome(self.success, self.error, self.skill_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "platform": self.platform,
            "skillName": self.skill_name,
            "removedPath": _path_str(self.removed_path),
            "error": self.error,
        }


@dataclass(frozen=True)
class DeployedSkillInfo:
    """Observed state of one deployed skill at query time."""

    name: str
    platform: str
    path: Path
    is_valid: bool
    is_symlink: bool
    target: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "platform": self.platform,
            "path": str(self.path),
            "isValid": self.is_valid,
            "isSymlink": self.is_symlink,
            "target": _path_str(self.target),
        }


@dataclass(frozen=True)
class DeploymentStatus:
    """Whether a skill is present on a platform and matches its source."""

    deployed: bool
    valid: bool
    path: Path | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.valid and not self.deployed:
            raise ValueError("valid=True requires deployed=True")

    def to_dict(self) -> dict[str, Any]:
        return {"deployed": self.deployed, "valid": self.valid, "path": _path_str(self.path)}


@dataclass
class MultiPlatformDeployResult:
    """Deploy outcome across a set of platforms.

    Counters are derived from ``results``, so every attempted platform is
    counted exactly once.
    """

    skill_name: str
    source_path: Path
    results: dict[str, DeployResult] = field(default_factory=dict)
    error: str | None = None

    def add(self, result: DeployResult) -> None:
        """Record the result for one platform."""
        if result.platform in self.results:
            raise ValueError(f"Platform '{result.platform}' already recorded")
        self.results[result.platform] = result

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results.values() if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results.values() if not r.success)

    def to_dict(self) -> dict[str, Any]:
        return {
            "skillName": self.skill_name,
            "sourcePath": str(self.source_path),
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "error": self.error,
            "results": {name: r.to_dict() for name, r in self.results.items()},
        }


@dataclass
class MultiPlatformRemoveResult:
    """Remove outcome across a set of platforms."""

    skill_name: str
    results: dict[str, RemoveResult] = field(default_factory=dict)
    error: str | None = None

    def add(self, result: RemoveResult) -> None:
        """Record the result for one platform."""
        if result.platform in self.results:
            raise ValueError(f"Platform '{result.platform}' already recorded")
        self.results[result.platform] = result

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results.values() if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results.values() if not r.success)

    def to_dict(self) -> dict[str, Any]:
        return {
            "skillName": self.skill_name,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "error": self.error,
            "results": {name: r.to_dict() for name, r in self.results.items()},
        }


@dataclass
class SyncResult:
    """Outcome of reconciling one skill across platforms.

    Attributes:
        skill_name: Reconciled skill.
        source_path: Canonical skill directory.
        dry_run: True if no repairs were attempted.
        observed: Status seen per platform before any repair.
        applied: Repair deploy results, only for platforms that were repaired.
        states: Terminal sync state per platform.
        errors: Messages for platforms whose check or repair raised.
        error: Set when the whole sync was skipped (missing source).
    """

    skill_name: str
    source_path: Path
    dry_run: bool = False
    observed: dict[str, DeploymentStatus] = field(default_factory=dict)
    applied: dict[str, DeployResult] = field(default_factory=dict)
    states: dict[str, SyncState] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    @property
    def needs_sync(self) -> list[str]:
        """Platforms whose deployment was missing or invalid."""
        return [name for name, status in self.observed.items() if not status.valid]

    @property
    def repaired(self) -> list[str]:
        return [name for name, state in self.states.items() if state is SyncState.REPAIRED]

    @property
    def failed(self) -> list[str]:
        return [
            name
            for name, state in self.states.items()
            if state in (SyncState.REPAIR_FAILED, SyncState.ERROR)
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "skillName": self.skill_name,
            "sourcePath": str(self.source_path),
            "dryRun": self.dry_run,
            "error": self.error,
            "observed": {name: s.to_dict() for name, s in self.observed.items()},
            "applied": {name: r.to_dict() for name, r in self.applied.items()},
            "states": {name: s.value for name, s in self.states.items()},
            "errors": dict(self.errors),
        }
