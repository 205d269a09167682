"""Rich console output for CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from skill_deployer.platforms import PlatformDescriptor
    from skill_deployer.settings import DeployerSettings
    from skill_deployer.types import (
        DeployedSkillInfo,
        MultiPlatformDeployResult,
        MultiPlatformRemoveResult,
        SyncResult,
    )

OK = "[green]✓[/green]"
FAIL = "[red]✗[/red]"


class Output:
    """Styled, non-interactive output for skill-deployer commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize output.

        Args:
            console: Console to write to. A new one is created if omitted.
        """
        self.console = console or Console()

    def show_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def show_info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_json(self, data: Any) -> None:
        """Print data as JSON."""
        self.console.print_json(json.dumps(data, default=str))

    def show_platforms(
        self, platforms: list[PlatformDescriptor], installed: set[str]
    ) -> None:
        """Display the platform catalog.

        Args:
            platforms: Catalog entries.
            installed: Names of platforms detected on this machine.
        """
        table = Table(title="Platforms")
        table.add_column("Name", style="cyan")
        table.add_column("Platform")
        table.add_column("Format")
        table.add_column("Deployment")
        table.add_column("Installed")
        table.add_column("Skills Directory")

        for platform in platforms:
            directory = platform.global_skills_dir or platform.project_dir or "N/A"
            table.add_row(
                platform.name,
                platform.display_name,
                platform.format.value,
                platform.kind.value,
                OK if platform.name in installed else "",
                str(directory),
            )

        self.console.print(table)

    def show_deploy_result(self, result: MultiPlatformDeployResult) -> None:
        """Display a multi-platform deploy outcome."""
        if result.error:
            self.show_error(result.error)
            return
        if not result.results:
            self.show_warning("No target platforms found")
            return

        for name, record in result.results.items():
            if record.success:
                where = record.deployed_path or "not applicable for this scope"
                kind = "linked" if record.is_symlink else "generated"
                self.show_success(f"{name}: {kind} {where}")
            else:
                self.show_error(f"{name}: {record.error}")
        self._show_counts(result.success_count, result.failure_count)

    def show_remove_result(self, result: MultiPlatformRemoveResult) -> None:
        """Display a multi-platform remove outcome."""
        if result.error:
            self.show_error(result.error)
            return
        if not result.results:
            self.show_warning("No target platforms found")
            return

        for name, record in result.results.items():
            if not record.success:
                self.show_error(f"{name}: {record.error}")
            elif record.removed_path is None:
                self.show_info(f"{name}: nothing to remove")
            else:
                self.show_success(f"{name}: removed {record.removed_path}")
        self._show_counts(result.success_count, result.failure_count)

    def show_deployed(self, listing: dict[str, list[DeployedSkillInfo]]) -> None:
        """Display deployed skills per platform."""
        if not any(listing.values()):
            self.console.print("[yellow]No deployed skills[/yellow]")
            return

        table = Table(title="Deployed Skills")
        table.add_column("Platform", style="cyan")
        table.add_column("Skill")
        table.add_column("Type")
        table.add_column("Valid")
        table.add_column("Path")

        for platform, skills in listing.items():
            for info in skills:
                table.add_row(
                    platform,
                    info.name,
                    "symlink" if info.is_symlink else "file",
                    OK if info.is_valid else FAIL,
                    str(info.path),
                )

        self.console.print(table)

    def show_sync_result(self, result: SyncResult) -> None:
        """Display the outcome of reconciling one skill."""
        if result.error:
            self.show_error(result.error)
            return
        if not result.states:
            self.show_warning("No target platforms found")
            return

        table = Table(title=f"Sync: {result.skill_name}" + (" (dry run)" if result.dry_run else ""))
        table.add_column("Platform", style="cyan")
        table.add_column("Deployed")
        table.add_column("Valid")
        table.add_column("State")
        table.add_column("Detail")

        for name, state in result.states.items():
            status = result.observed.get(name)
            table.add_row(
                name,
                (OK if status.deployed else FAIL) if status else "?",
                (OK if status.valid else FAIL) if status else "?",
                state.value,
                result.errors.get(name, ""),
            )

        self.console.print(table)

    def show_settings(self, settings: DeployerSettings, skills_root: str, config_file: str) -> None:
        self.console.print("\n[bold]Configuration[/bold]")
        self.console.print(f"  Config file: {config_file}")
        self.console.print(f"  Skills directory: {skills_root}")
        platforms = ", ".join(settings.default_platforms) or "auto-detect"
        self.console.print(f"  Default platforms: {platforms}")
        self.console.print(f"  Include unknown formats: {settings.include_unknown}")

    def _show_counts(self, success: int, failure: int) -> None:
        total = success + failure
        line = f"{success} of {total} platform(s) succeeded"
        if failure:
            self.console.print(f"[yellow]{line}[/yellow]")
        else:
            self.console.print(f"[green]{line}[/green]")
