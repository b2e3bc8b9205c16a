"""CLI entry point: init, sync, list and the local skill commands."""

from __future__ import annotations

import logging
import os
import sys
from functools import cached_property
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Confirm

from ..config.settings import Settings
from ..core.manifest import Manifest, SkillSource, load_manifest
from ..core.scaffold import Scaffolder, ScaffoldMode
from ..core.sync import ManifestSynchronizer, SyncEvent
from ..core.workspace import LocalWorkspace
from ..core.writer import WriteResult
from ..errors import MalformedManifest, VibeSkillsError
from ..skills.local import REGISTRY_BROWSE_URL, ChangeStatus, LocalSkills, validate_skill_name

console = Console()
err_console = Console(stderr=True)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

SOURCE_HEADINGS = [
    (SkillSource.CORE, "CORE"),
    (SkillSource.REGISTRY, "REGISTRY"),
    (SkillSource.LEGACY, "LEGACY"),
    (SkillSource.LOCAL, "LOCAL"),
]


class AppContext:
    """Per-invocation state; settings are only loaded by commands that need them."""

    def __init__(self, project_dir: str | None, config_path: str | None):
        self.project_dir = Path(project_dir or os.getcwd())
        self.config_path = config_path

    @cached_property
    def settings(self) -> Settings:
        return Settings.load(self.config_path, project_dir=self.project_dir)

    @cached_property
    def workspace(self) -> LocalWorkspace:
        return LocalWorkspace(self.project_dir)


class SkillsGroup(click.Group):
    """Click group that reports every failure once and exits with status 1."""

    def main(self, args=None, prog_name=None, complete_var=None, standalone_mode=True, **extra):
        try:
            rv = super().main(
                args=args,
                prog_name=prog_name,
                complete_var=complete_var,
                standalone_mode=False,
                **extra,
            )
            exit_code = rv if isinstance(rv, int) else 0
        except click.UsageError as e:
            if e.ctx is not None:
                click.echo(e.ctx.get_help(), err=True)
            click.echo(f"\nError: {e.format_message()}", err=True)
            exit_code = 1
        except click.ClickException as e:
            e.show()
            exit_code = e.exit_code
        except click.Abort:
            click.echo("Aborted!", err=True)
            exit_code = 1
        except VibeSkillsError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            exit_code = e.exit_code
        except OSError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            exit_code = 1
        except Exception as e:
            logging.getLogger(__name__).debug("Unhandled error", exc_info=True)
            err_console.print(f"[red]Error:[/red] {escape(str(e)) or type(e).__name__}")
            exit_code = 1

        if standalone_mode:
            sys.exit(exit_code)
        return exit_code


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("vibe_skills")
    logger.handlers = [RichHandler(console=err_console, show_time=False, show_path=False)]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _print_write(path: str, result: WriteResult) -> None:
    if result is WriteResult.CREATED:
        console.print(f"  [green]Created[/green] {escape(path)}")
    else:
        console.print(f"  [dim]Skipped {escape(path)} (already exists)[/dim]")


def _print_sync_event(event: SyncEvent, subject: str) -> None:
    if event is SyncEvent.DETECTED:
        console.print(f"  [green]Detected[/green] {escape(subject)}")
    elif event is SyncEvent.SKIPPED:
        console.print(f"  [yellow]Skipping[/yellow] {escape(subject)} (no skill file found)")


@click.group(cls=SkillsGroup, invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.option("-C", "--project-dir", default=None, help="Project directory (defaults to CWD)")
@click.option("-c", "--config", "config_path", default=None, help="Path to config file")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, project_dir: str | None, config_path: str | None, verbose: bool) -> None:
    """vibe-skills: scaffold agent context files and manage the skills manifest."""
    _configure_logging(verbose)
    ctx.obj = AppContext(project_dir, config_path)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("project_name", required=False)
@click.option("--full/--lite", "full", default=None, help="Scaffold the full context system")
@click.pass_obj
def init(app: AppContext, project_name: str | None, full: bool | None) -> None:
    """Scaffold the context system (lite by default)."""
    settings = app.settings
    if full is None:
        mode = ScaffoldMode(settings.default_mode)
    else:
        mode = ScaffoldMode.FULL if full else ScaffoldMode.LITE
    project_name = project_name or app.project_dir.resolve().name

    console.print("\n[bold]Initializing context system...[/bold]")
    console.print(f"   Project: {escape(project_name)}")
    console.print(f"   Mode: {mode.value.capitalize()}\n")

    scaffolder = Scaffolder(app.workspace, settings, reporter=_print_write)
    report = scaffolder.scaffold(project_name, mode)

    console.print(
        f"\n[green]Done![/green] {len(report.created)} created, {len(report.skipped)} skipped."
    )
    ctx_dir = settings.paths.context_dir
    console.print("\nNext steps:")
    console.print(f"  1. Edit {ctx_dir}/project.md with your product details")
    console.print(f"  2. Edit {ctx_dir}/conventions.md with your coding standards")
    if mode is ScaffoldMode.LITE:
        console.print("  3. Run 'vibe-skills init --full' later to add architecture, stack and skills")
    else:
        console.print(f"  3. Add skills under {settings.paths.skills_dir}/<name>/{settings.paths.skill_file}")
        console.print("  4. Run 'vibe-skills sync' to update the skills manifest")
    console.print()


@cli.command()
@click.pass_obj
def sync(app: AppContext) -> None:
    """Scan the skills directory and rebuild the manifest."""
    settings = app.settings
    console.print(f"\n[bold]Syncing skills from {escape(settings.paths.skills_dir)}/...[/bold]\n")
    report = ManifestSynchronizer(app.workspace, settings, reporter=_print_sync_event).sync()
    for name in report.removed:
        console.print(f"  [red]Removed[/red] {escape(name)}")
    console.print(
        f"\nUpdated {escape(settings.paths.manifest_path)} ({len(report.manifest.skills)} skill(s))\n"
    )


@cli.command("list")
@click.pass_obj
def list_skills(app: AppContext) -> None:
    """List skills recorded in the manifest."""
    settings = app.settings
    try:
        manifest = load_manifest(app.workspace, settings.paths.manifest_path)
    except MalformedManifest as e:
        logging.getLogger(__name__).warning("%s; treating it as empty", e)
        manifest = Manifest(schema_ref=settings.schema_uri)

    if manifest is None:
        console.print("\nNo skills installed. Run 'vibe-skills init --full' first.\n")
        return
    if not manifest.skills:
        console.print("\nNo skills found in manifest.\n")
        return

    console.print(f"\n[bold]Installed Skills ({len(manifest.skills)}):[/bold]")
    for source, heading in SOURCE_HEADINGS:
        entries = manifest.by_source(source)
        if not entries:
            continue
        console.print(f"\n  {heading}:")
        for name, record in sorted(entries, key=lambda entry: entry[0]):
            console.print(f"    {escape(name)}@{escape(record.version)} — {escape(record.description)}")
    console.print()


@cli.command()
@click.argument("name")
@click.pass_obj
def add(app: AppContext, name: str) -> None:
    """Create a local skill stub and record it in the manifest."""
    change = LocalSkills(app.workspace, app.settings).add(name)
    if change.status is ChangeStatus.UNCHANGED:
        console.print(f"Skill '{escape(name)}' is already installed.")
        return
    console.print(f"\n[green]Installed skill:[/green] {escape(name)}")
    console.print(f"   Edit: {escape(change.skill_path)}")
    console.print(f"   Manifest updated: {escape(app.settings.paths.manifest_path)}\n")


@cli.command()
@click.argument("name")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def remove(app: AppContext, name: str, yes: bool) -> None:
    """Delete a skill directory and drop it from the manifest."""
    validate_skill_name(name)
    skills = LocalSkills(app.workspace, app.settings)
    skills.require_root()
    if not skills.exists(name):
        console.print(f"Skill '{escape(name)}' is not installed.")
        return
    if not yes and not Confirm.ask(f"Remove skill '{escape(name)}' and its files?", default=False):
        console.print("Cancelled.")
        return
    skills.remove(name)
    console.print(f"\n[green]Removed skill:[/green] {escape(name)}")
    console.print(f"   Manifest updated: {escape(app.settings.paths.manifest_path)}\n")


@cli.command()
@click.argument("query", nargs=-1, required=True)
def search(query: tuple[str, ...]) -> None:
    """Search the skill registry (not yet available)."""
    console.print(f"\nSearching for \"{escape(' '.join(query))}\"...\n")
    console.print("  Registry search is not yet available.")
    console.print(f"  For now, browse available skills at: {REGISTRY_BROWSE_URL}\n")


@cli.command("help")
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this message and exit."""
    click.echo(ctx.parent.get_help())


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
