"""
Command Line Interface for PaperUpdater.

This module provides the main CLI interface using Click framework
for keeping a Paper server JAR up to date.
"""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, DownloadColumn, Progress, SpinnerColumn, TextColumn, TransferSpeedColumn
from rich.table import Table

from . import __version__
from .config.logging_config import setup_logging
from .config.settings import config
from .constants import (
    DEFAULT_DESTINATION, DEFAULT_HISTORY_FILENAME, DEFAULT_PROJECT, DEFAULT_VERSIONS_LIMIT,
    DOWNLOAD_CHUNK_SIZE, SUPPORTED_PROJECTS
)
from .exceptions import CorruptHistoryError, UpdaterError, ValidationError
from .history import VersionHistoryStore
from .installer import sha256_file
from .resolver import is_stable_release
from .updater import ServerUpdater
from .utils.api import PaperAPI
from .utils.validation import PathValidator, UpdateValidator

console = Console()
logger = logging.getLogger(__name__)


def create_client(project: Optional[str] = None) -> PaperAPI:
    """Create the build API client from configuration."""
    project = UpdateValidator.validate_project(project or config.get("api.project", DEFAULT_PROJECT))
    return PaperAPI.from_config(config, project=project)


def _resolve_paths(destination: Optional[str], history_file: Optional[str]):
    destination_path = PathValidator.validate_destination(
        destination or config.get("paths.destination") or DEFAULT_DESTINATION
    )
    history_path = PathValidator.validate_history_file(
        history_file or config.get("paths.history_file"),
        destination_path,
        DEFAULT_HISTORY_FILENAME,
    )
    return destination_path, history_path


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


project_option = click.option(
    '--project', '-p',
    type=click.Choice(SUPPORTED_PROJECTS),
    help='PaperMC project to install (default from config: paper)'
)
destination_option = click.option(
    '--destination', '-d',
    type=click.Path(dir_okay=False),
    help='Server JAR to keep up to date (default: server.jar)'
)
history_option = click.option(
    '--history-file',
    type=click.Path(dir_okay=False),
    help='Version record file (default: update_history.json beside the JAR)'
)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.version_option(version=__version__, prog_name="paperupdater")
def main(debug: bool, no_color: bool) -> None:
    """PaperUpdater - keep a Paper Minecraft server JAR up to date."""

    log_level = "DEBUG" if debug else config.get("logging.level", "INFO")
    enable_rich = not no_color and config.get("ui.colored_output", True)
    setup_logging(log_level=log_level, enable_rich_logging=enable_rich)


@main.command()
@click.argument('version', required=False)
@click.option('--keep-version', is_flag=True,
              help='Stay on the installed Minecraft version and only update its build')
@project_option
@destination_option
@history_option
@click.option('--check', is_flag=True, help='Only report whether an update is available')
@click.option('--no-progress', is_flag=True, help='Do not show a download progress bar')
def update(
    version: Optional[str],
    keep_version: bool,
    project: Optional[str],
    destination: Optional[str],
    history_file: Optional[str],
    check: bool,
    no_progress: bool,
) -> None:
    """Install the latest build of VERSION (default: newest Minecraft version)."""

    try:
        requested_version = UpdateValidator.validate_version(version) if version is not None else None
        destination_path, history_path = _resolve_paths(destination, history_file)
        client = create_client(project)
        updater = ServerUpdater(
            client,
            destination_path,
            history_path,
            stable_only=bool(config.get("updates.stable_only", False)),
            chunk_size=config.get_number("downloads.chunk_size", DOWNLOAD_CHUNK_SIZE),
        )
    except UpdaterError as e:
        _fail(str(e))

    try:
        with client:
            if check:
                decision = updater.check(requested_version, keep_version)
                if decision.needs_download:
                    console.print(f"[yellow]Update available: {decision.target.label}[/yellow]")
                else:
                    console.print(f"[green]Up to date: {decision.target.label}[/green]")
                return

            show_progress = not no_progress and config.get("ui.progress_bar", True)
            if show_progress:
                with Progress(
                    SpinnerColumn(),
                    TextColumn("[progress.description]{task.description}"),
                    BarColumn(),
                    DownloadColumn(),
                    TransferSpeedColumn(),
                    console=console,
                    transient=True,
                ) as progress:
                    task_id = progress.add_task("Downloading server jar...", total=None)

                    def progress_callback(downloaded: int, total: int) -> None:
                        progress.update(task_id, completed=downloaded, total=total)

                    result = updater.update(requested_version, keep_version, progress_callback)
            else:
                result = updater.update(requested_version, keep_version)

    except UpdaterError as e:
        logger.debug(f"Update failed: {e}")
        _fail(str(e))

    target = result.decision.target
    if result.installed:
        console.print(Panel(
            f"[green]Installed {escape(target.label)}[/green]\n\n"
            f"Server jar: {escape(str(destination_path))}\n"
            f"SHA256: {result.record.sha256}",
            title="Update Complete",
            border_style="green"
        ))
    else:
        console.print(f"[green]Already up to date: {escape(target.label)}[/green]")


@main.command()
@project_option
@click.option('--limit', '-n', default=DEFAULT_VERSIONS_LIMIT, show_default=True,
              type=click.IntRange(min=1), help='Number of recent versions to show')
def versions(project: Optional[str], limit: int) -> None:
    """List Minecraft versions available upstream."""

    try:
        client = create_client(project)
        with client:
            available_versions = client.list_minecraft_versions()
    except UpdaterError as e:
        _fail(str(e))

    if not available_versions:
        console.print(f"[yellow]No versions found for {client.project}[/yellow]")
        return

    table = Table(title=f"Available {client.project.title()} Versions")
    table.add_column("Version", style="cyan")
    table.add_column("Stable", style="green")

    for version in available_versions[-limit:]:
        table.add_row(version, "yes" if is_stable_release(version) else "no")

    console.print(table)

    if len(available_versions) > limit:
        console.print(f"[dim]Showing recent {limit} versions out of {len(available_versions)} total[/dim]")


@main.command()
@destination_option
@history_option
def status(destination: Optional[str], history_file: Optional[str]) -> None:
    """Show the recorded installation."""

    try:
        destination_path, history_path = _resolve_paths(destination, history_file)
    except ValidationError as e:
        _fail(str(e))

    store = VersionHistoryStore(history_path)
    try:
        record = store.load()
    except CorruptHistoryError as e:
        console.print(f"[yellow]Version history is unusable: {escape(str(e))}[/yellow]")
        console.print("The next update will reinstall the latest build.")
        return

    if record is None:
        console.print("[yellow]No installation recorded.[/yellow]")
        return

    if not destination_path.exists():
        jar_state = "[red]missing[/red]"
    else:
        try:
            matches = sha256_file(destination_path) == record.sha256
        except OSError as e:
            logger.warning(f"Could not read {destination_path}: {e}")
            jar_state = "[red]unreadable[/red]"
        else:
            jar_state = "[green]verified[/green]" if matches else "[red]modified[/red]"

    table = Table(title="Installed Server")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Project", record.project.title())
    table.add_row("Minecraft Version", record.minecraft_version)
    table.add_row("Build", str(record.build_number))
    table.add_row("SHA256", record.sha256)
    table.add_row("Recorded At", record.recorded_at.isoformat(timespec="seconds"))
    table.add_row("Server Jar", f"{escape(str(destination_path))} ({jar_state})")
    table.add_row("History File", escape(str(history_path)))

    console.print(table)


@main.command()
@click.option('--reset', is_flag=True, help='Reset configuration to defaults')
def config_cmd(reset: bool) -> None:
    """Manage configuration settings."""

    if reset:
        if click.confirm("Are you sure you want to reset configuration to defaults?"):
            config.reset_to_defaults()
            console.print("[green]Configuration reset to defaults.[/green]")
        return

    console.print(f"[blue]Configuration file: {escape(str(config.config_file))}[/blue]")
    console.print("Use --reset to reset to defaults or edit the file directly.")


if __name__ == "__main__":
    main()
