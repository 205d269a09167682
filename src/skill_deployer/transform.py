"""SKILL.md conversion engine.

Some platforms cannot read a SKILL.md directory. For them the skill is
rendered into the platform's own rules format using the Strategy pattern:
each target format has one strategy, looked up by SkillFormat.

Every rendered file ends with a provenance stamp naming the skill and the
digest of the SKILL.md it was built from. The stamp is how a generated file
is recognised as ours, and how a stale or truncated copy is detected.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

import yaml

from skill_deployer.skill import SkillManifest
from skill_deployer.types import SkillFormat

STAMP_PREFIX = "skill-deployer"
_STAMP_RE = re.compile(
    r"^<!--\s*" + re.escape(STAMP_PREFIX) + r":\s*name=(?P<name>\S+)\s+digest=(?P<digest>[0-9a-f]+)\s*-->$"
)


@dataclass(frozen=True)
class ProvenanceStamp:
    """Marker written as the last line of every generated file."""

    name: str
    digest: str

    def render(self) -> str:
        return f"<!-- {STAMP_PREFIX}: name={self.name} digest={self.digest} -->"


def read_stamp(content: str) -> ProvenanceStamp | None:
    """Find the provenance stamp on the last non-blank line.

    Args:
        content: Generated file content.

    Returns:
        The stamp, or None if the file is not ours or has been truncated.
    """
    for line in reversed(content.splitlines()):
        if not line.strip():
            continue
        match = _STAMP_RE.match(line.strip())
        if match is None:
            return None
        return ProvenanceStamp(name=match.group("name"), digest=match.group("digest"))
    return None


class BaseConversionStrategy(ABC):
    """Base class for conversion strategies.

    Subclasses render the head of the document; the metadata section and
    provenance stamp are shared.
    """

    target_format: SkillFormat

    @abstractmethod
    def render_head(self, manifest: SkillManifest) -> list[str]:
        """Render the format-specific opening lines."""
        ...

    def render(self, manifest: SkillManifest, stamp: ProvenanceStamp) -> str:
        """Render the full document.

        Template Method: format-specific head, the skill body, then the
        shared metadata section and stamp.
        """
        lines = self.render_head(manifest)
        if manifest.body:
            lines.append(manifest.body)
        lines.extend(self._render_metadata(manifest))
        lines.append("")
        lines.append(stamp.render())
        return "\n".join(lines) + "\n"

    def _render_metadata(self, manifest: SkillManifest) -> list[str]:
        if not manifest.has_metadata:
            return []
        lines = ["", "---", "", "## Skill Metadata", ""]
        if manifest.skill_id:
            lines.append(f"- **Skill ID**: {manifest.skill_id}")
        if manifest.workflow_id:
            lines.append(f"- **Workflow ID**: {manifest.workflow_id}")
        if manifest.installation_id:
            lines.append(f"- **Installation ID**: {manifest.installation_id}")
        return lines


class CursorMdcStrategy(BaseConversionStrategy):
    """Render a Cursor ``.mdc`` rule.

    Cursor rules carry their own frontmatter: a description, file globs
    (left empty so the rule is not bound to files) and ``alwaysApply``.
    """

    target_format = SkillFormat.CURSOR_MDC

    def render_head(self, manifest: SkillManifest) -> list[str]:
        description = yaml.safe_dump(
            {"description": manifest.description},
            default_flow_style=False,
            allow_unicode=True,
            width=float("inf"),
        ).strip()
        return [
            "---",
            description,
            "globs:",
            "alwaysApply: false",
            "---",
            "",
            f"# {manifest.title}",
            "",
            manifest.description,
            "",
        ]


class RulesMarkdownStrategy(BaseConversionStrategy):
    """Render a plain markdown rule for Continue and Trae."""

    target_format = SkillFormat.RULES_MD

    def render_head(self, manifest: SkillManifest) -> list[str]:
        lines = [f"# {manifest.title}", "", f"> {manifest.description}", ""]
        if manifest.triggers:
            lines.extend(["## Triggers", ""])
            lines.extend(f"- {trigger}" for trigger in manifest.triggers)
            lines.append("")
        return lines


class ConversionEngine:
    """Renders skills into platform formats.

    Strategies are registered in a lookup table keyed by target format, so
    new formats can be added without modifying render().
    """

    def __init__(self) -> None:
        """Initialize the engine with the built-in strategies."""
        self._strategies: dict[SkillFormat, BaseConversionStrategy] = {}
        self.register_strategy(CursorMdcStrategy())
        self.register_strategy(RulesMarkdownStrategy())

    def register_strategy(self, strategy: BaseConversionStrategy) -> None:
        self._strategies[strategy.target_format] = strategy

    def get_strategy(self, fmt: SkillFormat) -> BaseConversionStrategy | None:
        return self._strategies.get(fmt)

    def supports(self, fmt: SkillFormat) -> bool:
        return fmt in self._strategies

    def render(self, manifest: SkillManifest, fmt: SkillFormat, stamp: ProvenanceStamp) -> str:
        """Render a skill into the given format.

        Args:
            manifest: Parsed SKILL.md.
            fmt: Target format.
            stamp: Provenance stamp to append.

        Returns:
            Complete file content.

        Raises:
            ValueError: If no strategy handles the format.
        """
        strategy = self.get_strategy(fmt)
        if strategy is None:
            raise ValueError(f"Unsupported format: {fmt.value}")
        return strategy.render(manifest, stamp)
