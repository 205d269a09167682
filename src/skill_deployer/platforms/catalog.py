"""Built-in platform catalog.

The catalog is a closed set: every ``PlatformName`` member has exactly one
descriptor, and nothing is registered at runtime.

SKILL.md platforms read the canonical directory through a symlink. Cursor,
Continue and Trae need a converted rules file. Qoder's layout is unverified.
"""

from __future__ import annotations

from enum import Enum

from skill_deployer.platforms.base import (
    PlatformDescriptor,
    env_or_home_path,
    home_exists,
    home_path,
)
from skill_deployer.types import SkillFormat


class PlatformName(str, Enum):
    """Every supported platform."""

    CLAUDE_CODE = "claude-code"
    CODEX = "codex"
    ANTIGRAVITY = "antigravity"
    GITHUB_COPILOT = "github-copilot"
    WINDSURF = "windsurf"
    OPENCODE = "opencode"
    MOLTBOT = "moltbot"
    CURSOR = "cursor"
    CONTINUE = "continue"
    TRAE = "trae"
    QODER = "qoder"


BUILTIN_PLATFORMS: dict[PlatformName, PlatformDescriptor] = {
    # SKILL.md format (symlink compatible)
    PlatformName.CLAUDE_CODE: PlatformDescriptor(
        name=PlatformName.CLAUDE_CODE.value,
        display_name="Claude Code",
        format=SkillFormat.SKILL_MD,
        project_dir=".claude/skills",
        global_dir=home_path(".claude", "skills"),
        detect=home_exists(".claude"),
    ),
    PlatformName.CODEX: PlatformDescriptor(
        name=PlatformName.CODEX.value,
        display_name="Codex",
        format=SkillFormat.SKILL_MD,
        project_dir=".codex/skills",
        global_dir=env_or_home_path("CODEX_HOME", ("skills",), ".codex", "skills"),
        detect=home_exists(".codex"),
    ),
    PlatformName.ANTIGRAVITY: PlatformDescriptor(
        name=PlatformName.ANTIGRAVITY.value,
        display_name="Antigravity",
        format=SkillFormat.SKILL_MD,
        project_dir=".agent/skills",
        global_dir=home_path(".gemini", "antigravity", "skills"),
        detect=home_exists(".gemini", "antigravity"),
    ),
    PlatformName.GITHUB_COPILOT: PlatformDescriptor(
        name=PlatformName.GITHUB_COPILOT.value,
        display_name="GitHub Copilot",
        format=SkillFormat.SKILL_MD,
        project_dir=".github/skills",
        global_dir=home_path(".copilot", "skills"),
        detect=home_exists(".copilot"),
    ),
    PlatformName.WINDSURF: PlatformDescriptor(
        name=PlatformName.WINDSURF.value,
        display_name="Windsurf",
        format=SkillFormat.SKILL_MD,
        project_dir=".windsurf/skills",
        global_dir=home_path(".codeium", "windsurf", "skills"),
        detect=home_exists(".codeium", "windsurf"),
    ),
    PlatformName.OPENCODE: PlatformDescriptor(
        name=PlatformName.OPENCODE.value,
        display_name="OpenCode",
        format=SkillFormat.SKILL_MD,
        project_dir=".opencode/skill",
        global_dir=home_path(".config", "opencode", "skill"),
        detect=home_exists(".config", "opencode"),
    ),
    PlatformName.MOLTBOT: PlatformDescriptor(
        name=PlatformName.MOLTBOT.value,
        display_name="Moltbot",
        format=SkillFormat.SKILL_MD,
        project_dir="skills",
        # Moltbot still reads from its old .clawdbot directory
        global_dir=home_path(".clawdbot", "skills"),
        detect=home_exists(".clawdbot"),
    ),
    # Different formats (require conversion)
    PlatformName.CURSOR: PlatformDescriptor(
        name=PlatformName.CURSOR.value,
        display_name="Cursor",
        format=SkillFormat.CURSOR_MDC,
        project_dir=".cursor/rules",
        global_dir=None,
        detect=home_exists(".cursor"),
        file_extension=".mdc",
        skills_as_files=True,
    ),
    PlatformName.CONTINUE: PlatformDescriptor(
        name=PlatformName.CONTINUE.value,
        display_name="Continue",
        format=SkillFormat.RULES_MD,
        project_dir=".continue/rules",
        global_dir=home_path(".continue", "rules"),
        detect=home_exists(".continue"),
        file_extension=".md",
        skills_as_files=True,
    ),
    PlatformName.TRAE: PlatformDescriptor(
        name=PlatformName.TRAE.value,
        display_name="Trae",
        format=SkillFormat.RULES_MD,
        project_dir=".trae/rules",
        global_dir=home_path(".trae", "rules"),
        detect=home_exists(".trae"),
        file_extension=".md",
        skills_as_files=True,
    ),
    # Unverified layout
    PlatformName.QODER: PlatformDescriptor(
        name=PlatformName.QODER.value,
        display_name="Qoder",
        format=SkillFormat.UNKNOWN,
        project_dir=".qoder/skills",
        global_dir=home_path(".qoder", "skills"),
        detect=home_exists(".qoder"),
    ),
}
