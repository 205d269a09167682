"""Validation utilities for skill-deployer.

Shared helpers for checking skill names and splitting SKILL.md files into
frontmatter and body.
"""

from __future__ import annotations

import re

SKILL_NAME_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")
MAX_SKILL_NAME_LENGTH = 64


class FrontmatterResult:
    """Result of parsing frontmatter from content."""

    __slots__ = ("body", "data", "errors", "success")

    def __init__(
        self, data: str = "", body: str = "", errors: list[str] | None = None
    ) -> None:
        """Initialize frontmatter result.

        Args:
            data: The frontmatter content (raw YAML string).
            body: Everything after the closing delimiter.
            errors: List of parsing errors encountered.
        """
        self.data = data
        self.body = body
        self.errors = errors or []
        self.success = len(self.errors) == 0


def parse_frontmatter(content: str) -> FrontmatterResult:
    """Parse YAML frontmatter from markdown content.

    Extracts the frontmatter block between the opening and closing '---'
    delimiters. The closing delimiter must sit on its own line.

    Args:
        content: The full markdown content with optional frontmatter.

    Returns:
        FrontmatterResult with data (raw YAML string), body and any errors.

    Example:
        >>> result = parse_frontmatter("---\\nname: test\\n---\\nBody")
        >>> result.success
        True
        >>> result.data
        'name: test'
        >>> result.body
        'Body'
    """
    if not content.startswith("---"):
        return FrontmatterResult(errors=["Content must have YAML frontmatter"])

    match = re.search(r"^---[ \t]*$", content[3:], re.MULTILINE)
    if match is None:
        return FrontmatterResult(errors=["Invalid frontmatter: missing closing ---"])

    frontmatter = content[3 : 3 + match.start()].strip()
    body = content[3 + match.end() :].lstrip("\n")
    return FrontmatterResult(data=frontmatter, body=body)


def validate_skill_name(name: str) -> list[str]:
    """Validate a skill name.

    Names are lowercase alphanumerics and hyphens, 1-64 characters, without
    a leading or trailing hyphen. This also keeps names safe to use as a
    single path component.

    Args:
        name: Candidate skill name.

    Returns:
        List of validation errors (empty if valid).
    """
    if not name:
        return ["Skill name cannot be empty"]
    errors = []
    if len(name) > MAX_SKILL_NAME_LENGTH:
        errors.append(f"Skill name must be at most {MAX_SKILL_NAME_LENGTH} characters")
    if not SKILL_NAME_PATTERN.match(name):
        errors.append(
            "Skill name must use lowercase letters, digits and hyphens, "
            "and cannot start or end with a hyphen"
        )
    return errors
