"""CLI commands using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.logging import RichHandler

from skill_deployer import __version__
from skill_deployer.console import Output
from skill_deployer.context import create_context

if TYPE_CHECKING:
    from skill_deployer.context import AppContext

app = typer.Typer(
    name="skill-deployer",
    help="Deploy canonical skills to every installed AI coding platform",
    no_args_is_help=True,
)

platform_app = typer.Typer(help="Inspect and sync platforms")
config_app = typer.Typer(help="Configuration commands")

app.add_typer(platform_app, name="platform")
app.add_typer(config_app, name="config")

output = Output()

AgentOption = Annotated[
    str | None,
    typer.Option("--agent", "-a", help="Target platforms (comma-separated)"),
]
ProjectOption = Annotated[
    Path | None,
    typer.Option("--project", help="Deploy into this project instead of user-wide directories"),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print JSON output")]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        output.console.print(f"skill-deployer v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=output.console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Show debug logging")] = False,
) -> None:
    """Deploy canonical skills to every installed AI coding platform."""
    configure_logging(verbose)


# ============================================================================
# Helpers
# ============================================================================


def _parse_agents(ctx: AppContext, agents_arg: str | None) -> list[str] | None:
    """Parse and validate a comma-separated platform list.

    Falls back to the configured default platforms. None means auto-detect.

    Raises:
        typer.Exit: If a platform name is not in the catalog.
    """
    if not agents_arg:
        return list(ctx.settings.default_platforms) or None

    names = [a.strip() for a in agents_arg.split(",") if a.strip()]
    unknown = [n for n in names if not ctx.registry.is_valid(n)]
    if unknown:
        output.show_error(f"Unknown agent: {', '.join(unknown)}")
        output.show_info(f"Valid agents: {', '.join(ctx.registry.names())}")
        raise typer.Exit(1)
    return names


def _finish(failed: bool) -> None:
    if failed:
        raise typer.Exit(1)


# ============================================================================
# Skill Commands
# ============================================================================


@app.command()
def deploy(
    name: Annotated[str, typer.Argument(help="Skill name")],
    agent: AgentOption = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite existing targets")] = False,
    project: ProjectOption = None,
    include_unknown: Annotated[
        bool, typer.Option("--include-unknown", help="Also deploy to unverified platforms")
    ] = False,
    json_output: JsonOption = False,
    _context=None,
) -> None:
    """Deploy a skill to installed platforms."""
    ctx = _context or create_context()
    platforms = _parse_agents(ctx, agent)

    result = ctx.manager.deploy_to_all(
        name,
        force=force,
        project_root=project,
        platforms=platforms,
        include_unknown=include_unknown or ctx.settings.include_unknown,
    )

    if json_output:
        output.show_json(result.to_dict())
    else:
        output.show_deploy_result(result)
    _finish(result.error is not None or result.failure_count > 0)


@app.command()
def remove(
    name: Annotated[str, typer.Argument(help="Skill name")],
    agent: AgentOption = None,
    project: ProjectOption = None,
    json_output: JsonOption = False,
    _context=None,
) -> None:
    """Remove a skill from installed platforms."""
    ctx = _context or create_context()
    platforms = _parse_agents(ctx, agent)

    result = ctx.manager.remove_from_all(
        name,
        project_root=project,
        platforms=platforms,
        include_unknown=ctx.settings.include_unknown,
    )

    if json_output:
        output.show_json(result.to_dict())
    else:
        output.show_remove_result(result)
    _finish(result.error is not None or result.failure_count > 0)


@app.command("list")
def list_deployed(
    agent: AgentOption = None,
    project: ProjectOption = None,
    json_output: JsonOption = False,
    _context=None,
) -> None:
    """List deployed skills per platform."""
    ctx = _context or create_context()
    platforms = _parse_agents(ctx, agent)

    listing = ctx.manager.list_all_deployed(
        project_root=project,
        platforms=platforms,
        include_unknown=ctx.settings.include_unknown,
    )

    if json_output:
        output.show_json(
            {name: [info.to_dict() for info in skills] for name, skills in listing.items()}
        )
    else:
        output.show_deployed(listing)


@app.command()
def sync(
    name: Annotated[str, typer.Argument(help="Skill name")],
    agent: AgentOption = None,
    project: ProjectOption = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show what would be repaired without changes")
    ] = False,
    json_output: JsonOption = False,
    _context=None,
) -> None:
    """Repair missing or broken deployments of a skill."""
    ctx = _context or create_context()
    platforms = _parse_agents(ctx, agent)

    result = ctx.manager.sync_to_all(
        name,
        project_root=project,
        platforms=platforms,
        dry_run=dry_run,
        include_unknown=ctx.settings.include_unknown,
    )

    if json_output:
        output.show_json(result.to_dict())
    else:
        output.show_sync_result(result)
    _finish(result.error is not None or bool(result.failed))


# ============================================================================
# Platform Commands
# ============================================================================


@platform_app.command("list")
def platform_list(
    json_output: JsonOption = False,
    _context=None,
) -> None:
    """Show supported platforms and which are installed."""
    ctx = _context or create_context()
    platforms = ctx.registry.all_platforms()
    installed = {p.name for p in ctx.registry.detect_installed()}

    if json_output:
        output.show_json(
            [
                {
                    "name": p.name,
                    "displayName": p.display_name,
                    "format": p.format.value,
                    "kind": p.kind.value,
                    "installed": p.name in installed,
                    "projectDir": p.project_dir,
                    "globalSkillsDir": p.global_skills_dir,
                }
                for p in platforms
            ]
        )
    else:
        output.show_platforms(platforms, installed)


@platform_app.command("sync")
def platform_sync(
    agent: AgentOption = None,
    project: ProjectOption = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show what would be repaired without changes")
    ] = False,
    json_output: JsonOption = False,
    _context=None,
) -> None:
    """Sync every canonical skill to installed platforms."""
    ctx = _context or create_context()
    platforms = _parse_agents(ctx, agent)

    if not ctx.store.list_skills():
        output.show_warning(f"No skills found in {ctx.store.root}")
        return

    results = ctx.manager.sync_all_skills(
        project_root=project,
        platforms=platforms,
        dry_run=dry_run,
        include_unknown=ctx.settings.include_unknown,
    )

    if json_output:
        output.show_json([r.to_dict() for r in results])
    else:
        for result in results:
            output.show_sync_result(result)
    _finish(any(r.error is not None or r.failed for r in results))


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    _context=None,
) -> None:
    """Show current configuration."""
    ctx = _context or create_context()
    output.show_settings(
        ctx.settings,
        skills_root=str(ctx.store.root),
        config_file=str(ctx.settings_manager.config_file),
    )


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Configuration key")],
    value: Annotated[str, typer.Argument(help="Configuration value")],
    _context=None,
) -> None:
    """Set a configuration value."""
    ctx = _context or create_context()

    if key == "default-platforms":
        _parse_agents(ctx, value)

    try:
        ctx.settings = ctx.settings_manager.set_value(key, value)
    except ValueError as e:
        output.show_error(str(e))
        raise typer.Exit(1) from e
    output.show_success(f"Set {key} to {value}")


if __name__ == "__main__":
    app()
