"""Canonical skill storage and SKILL.md parsing.

Every skill lives in exactly one canonical directory,
``<root>/<name>/SKILL.md`` with an optional ``rules/`` subdirectory. The
deployment engine only ever reads from here.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from skill_deployer.filesystem import RealFileSystem
from skill_deployer.protocols import FileSystem
from skill_deployer.validation import parse_frontmatter, validate_skill_name

logger = logging.getLogger(__name__)

MANIFEST_FILE = "SKILL.md"


class SkillManifestError(ValueError):
    """Raised when a SKILL.md file cannot be parsed."""


class SkillManifest(BaseModel):
    """Structured description of a skill, read from SKILL.md frontmatter.

    Only ``name`` and ``description`` are required. Unrecognised keys are
    ignored so manifests written by newer tools still load.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    description: str
    display_name: str | None = Field(default=None, alias="displayName")
    skill_id: str | None = Field(default=None, alias="skillId")
    workflow_id: str | None = Field(default=None, alias="workflowId")
    installation_id: str | None = Field(default=None, alias="installationId")
    triggers: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    version: str | None = None
    body: str = ""

    @field_validator("name", "description", mode="before")
    @classmethod
    def _require_text(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("must not be empty")
        return value

    @field_validator("triggers", "tags", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("version", "skill_id", "workflow_id", "installation_id", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def title(self) -> str:
        """Human-readable title, e.g. ``my-skill`` -> ``My Skill``."""
        if self.display_name:
            return self.display_name
        return " ".join(word[:1].upper() + word[1:] for word in self.name.split("-"))

    @property
    def has_metadata(self) -> bool:
        return bool(self.skill_id or self.workflow_id or self.installation_id)

    @classmethod
    def parse(cls, content: str) -> SkillManifest:
        """Parse SKILL.md content.

        Args:
            content: Full SKILL.md text.

        Returns:
            Parsed SkillManifest.

        Raises:
            SkillManifestError: If frontmatter is missing or invalid, or if
                ``name``/``description`` are absent.
        """
        result = parse_frontmatter(content)
        if not result.success:
            raise SkillManifestError("; ".join(result.errors))

        try:
            data = yaml.safe_load(result.data) or {}
        except yaml.YAMLError as e:
            raise SkillManifestError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(data, dict):
            raise SkillManifestError("Frontmatter must be a mapping")

        try:
            return cls.model_validate({**data, "body": result.body.strip()})
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise SkillManifestError(f"Invalid SKILL.md frontmatter: {fields}") from e


class SkillStore:
    """Read-only view over the canonical skills directory.

    Follows Separate Use from Creation: the constructor takes the root and
    filesystem explicitly. Use `create()` for production defaults.
    """

    def __init__(self, root: Path, filesystem: FileSystem) -> None:
        """Initialize the store.

        Args:
            root: Directory holding one subdirectory per skill.
            filesystem: Filesystem abstraction.
        """
        self._root = root
        self.fs = filesystem

    @classmethod
    def create(cls, root: Path, filesystem: FileSystem | None = None) -> SkillStore:
        """Factory method for production instantiation.

        The root is made absolute so links created from it never depend on
        the working directory.
        """
        return cls(root=root.expanduser().resolve(), filesystem=filesystem or RealFileSystem())

    @property
    def root(self) -> Path:
        return self._root

    def skill_dir(self, name: str) -> Path:
        """Get the canonical directory for a skill.

        Raises:
            ValueError: If the name is not a valid skill name.
        """
        errors = validate_skill_name(name)
        if errors:
            raise ValueError(f"Invalid skill name '{name}': {'; '.join(errors)}")
        return self._root / name

    def manifest_path(self, name: str) -> Path:
        return self.skill_dir(name) / MANIFEST_FILE

    def exists(self, name: str) -> bool:
        """Check whether a skill's canonical directory exists.

        Invalid names never exist.
        """
        if validate_skill_name(name):
            return False
        return self.fs.is_dir(self._root / name)

    def list_skills(self) -> list[str]:
        """List skill names present in the store, sorted.

        Hidden entries and directories with invalid names are skipped.
        """
        if not self.fs.is_dir(self._root):
            return []
        names = []
        for entry in self.fs.iterdir(self._root):
            if entry.name.startswith("."):
                continue
            if not self.fs.is_dir(entry):
                continue
            if validate_skill_name(entry.name):
                logger.debug("Skipping skill directory with invalid name: %s", entry)
                continue
            names.append(entry.name)
        return names

    def manifest_digest(self, name: str) -> str | None:
        """Get the SHA256 digest of a skill's SKILL.md.

        Returns:
            Hex digest, or None if the manifest does not exist.
        """
        path = self.manifest_path(name)
        if not self.fs.is_file(path):
            return None
        return self.fs.file_hash(path)
