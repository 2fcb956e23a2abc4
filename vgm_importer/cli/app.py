"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from vgm_importer import __version__
from vgm_importer.core.import_manager import ImportManager
from vgm_importer.exceptions import VgmImporterError
from vgm_importer.models.stats import ImportStats
from vgm_importer.storage.catalogue import CatalogueStore
from vgm_importer.storage.config_manager import ConfigManager

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_stats_table,
    print_summary_panel,
)

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("vgm_importer")

app = typer.Typer(
    name="vgm-importer",
    help=(
        "Imports vgmrips soundtrack packs into the track catalogue. Use"
        " 'vgm-importer <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "vgm-importer"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _config_file(ctx: typer.Context) -> Path:
    return (ctx.obj or {}).get("config_file") or CONFIG_FILE


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    config_file: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Use this config file instead of the default location.",
    ),
):
    """vgmrips Soundtrack Importer"""
    if version:
        console.print(f"[bold]vgm-importer[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("vgm_importer").setLevel(log_level)

    ctx.obj = {"config_file": config_file}

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing config file without asking."
    ),
):
    """Write a config file with the default settings."""
    config_file = _config_file(ctx)
    if (
        config_file.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    try:
        ConfigManager(config_file).save_new_config()
    except VgmImporterError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
    console.print(
        f"\n[bold green]✓ Configuration saved to '{config_file}'[/bold green]"
    )
    console.print("Ready to import! Try: [cyan]vgm-importer import:vgmrips[/cyan]")


@app.command(name="import:vgmrips")
def import_command(
    ctx: typer.Context,
    manifest: Path | None = typer.Option(  # noqa: B008
        None, "--manifest", "-m", help="Path of the games.json manifest."
    ),
    archives: Path | None = typer.Option(  # noqa: B008
        None, "--archives", "-a", help="Directory holding the soundtrack zips."
    ),
    uploads: Path | None = typer.Option(  # noqa: B008
        None, "--uploads", "-u", help="Directory the track files are written to."
    ),
    database: Path | None = typer.Option(  # noqa: B008
        None, "--database", "-d", help="Path of the catalogue database."
    ),
    max_games: int | None = typer.Option(
        None,
        "--max-games",
        "-n",
        help="Stop after this many games (0 imports the whole manifest).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Walk the manifest and archives without writing rows or files.",
    ),
):
    """Import the games listed in the vgmrips manifest."""
    cli_options = {
        key: value
        for key, value in {
            "manifest_path": manifest,
            "archive_root": archives,
            "uploads_root": uploads,
            "database_path": database,
            "max_games": max_games,
        }.items()
        if value is not None
    }
    cli_options["dry_run"] = dry_run

    async def _import_async() -> tuple[ImportStats, float]:
        config = ConfigManager(_config_file(ctx)).load_config(cli_options)
        catalogue = CatalogueStore(config.database_path, config.pool_size)
        manager = ImportManager(config, catalogue)

        if config.dry_run:
            console.print("[bold cyan]🎵 Starting dry run...[/bold cyan]")
        else:
            console.print("[bold cyan]🎵 Starting import...[/bold cyan]")

        start_time = time.monotonic()
        stats = await manager.run()
        return stats, time.monotonic() - start_time

    try:
        stats, duration = asyncio.run(_import_async())
    except VgmImporterError as e:
        console.print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e

    print_summary_panel(stats, duration)


@app.command()
def validate(ctx: typer.Context):
    """Validate the current configuration."""
    config_file = _config_file(ctx)
    try:
        config = ConfigManager(config_file).load_config()
    except VgmImporterError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
    print_config(config_file, config)


@app.command()
def stats(ctx: typer.Context):
    """Show statistics from the catalogue database."""
    try:
        config = ConfigManager(_config_file(ctx)).load_config()
    except VgmImporterError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e

    if not config.database_path.is_file():
        console.print(
            f"[yellow]No catalogue at '{config.database_path}' yet.[/yellow] Run"
            " [cyan]vgm-importer import:vgmrips[/cyan] first."
        )
        raise typer.Exit(code=1)

    async def _get_stats():
        catalogue = CatalogueStore(config.database_path, config.pool_size)
        return await catalogue.get_stats()

    try:
        stats_data = asyncio.run(_get_stats())
    except VgmImporterError as e:
        console.print(f"[red]Error accessing catalogue: {e}[/red]")
        raise typer.Exit(code=1) from e
    print_stats_table(stats_data)
