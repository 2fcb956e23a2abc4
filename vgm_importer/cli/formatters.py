"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from vgm_importer.models.config import ImportConfig
from vgm_importer.models.stats import ImportStats
from vgm_importer.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ManifestReadError": [
            "• Check that the manifest path exists and is readable.",
            "• Set `manifest_path` in the config or pass --manifest.",
        ],
        "ManifestParseError": [
            "• The manifest must be a JSON object: {system: {game: archive}}.",
            "• A truncated download often leaves invalid JSON behind.",
        ],
        "ArchiveOpenError": [
            "• Check that the archive named in the manifest is in the archive"
            " directory.",
            "• Re-download the pack if the zip file is corrupt.",
        ],
        "EntryNamePatternError": [
            "• Track files must be named '<2-3 digits> <title>.vgz'.",
            "• The archive may not match the game the manifest lists for it.",
            "• Rows already created for this game were kept.",
        ],
        "ConfigurationError": [
            "• Run `vgm-importer validate` to see the effective settings.",
            "• Run `vgm-importer init --force` to write a fresh config file.",
        ],
        "CatalogueError": [
            "• Check that the catalogue database is writable.",
            "• Another process may be holding a lock on the database.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config: ImportConfig):
    """Displays the effective configuration."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Manifest:", str(config.manifest_path))
    table.add_row("Archives:", str(config.archive_root))
    table.add_row("Uploads:", str(config.uploads_root))
    table.add_row("Catalogue:", str(config.database_path))
    table.add_row(
        "Max Games:", "All" if not config.max_games else str(config.max_games)
    )
    table.add_row("Track Extension:", config.track_extension)
    table.add_row("Chunk Size:", format_size(config.chunk_size))
    table.add_row("Pool Size:", str(config.pool_size))

    source = str(config_path) if config_path.is_file() else "built-in defaults"
    console.print(
        Panel(
            table,
            title=f"[bold green]✓ Validated Settings[/bold green] ([dim]{source}[/dim])",
            border_style="green",
        )
    )


def print_stats_table(stats_data: dict[str, Any]):
    """Displays catalogue statistics."""
    console = Console()
    console.print(
        f"\n[bold]Systems:[/] [green]{stats_data['systems']}[/green]  "
        f"[bold]Games:[/] [green]{stats_data['games']}[/green]  "
        f"[bold]Tracks:[/] [green]{stats_data['tracks']}[/green]  "
        f"[bold]Playlists:[/] [green]{stats_data['playlists']}[/green]\n"
    )

    if top_systems := stats_data.get("top_systems"):
        table = Table(title="Top 10 Systems")
        table.add_column("Rank", style="dim")
        table.add_column("System", style="cyan")
        table.add_column("Games", justify="right", style="green")
        for i, (system, count) in enumerate(top_systems, 1):
            table.add_row(str(i), system, str(count))
        console.print(table)
    else:
        console.print("[dim]No games in the catalogue yet.[/dim]")


def print_summary_panel(stats: ImportStats, duration_s: float):
    """Displays the final summary of an import session."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("✓ Games:", f"[bold green]{stats.games_imported}[/bold green]")
    stats_table.add_row(
        "✓ Tracks:", f"[bold green]{stats.tracks_imported}[/bold green]"
    )
    stats_table.add_row("✓ Playlists:", f"[green]{stats.playlists_created}[/green]")
    stats_table.add_row(
        "Systems:",
        f"{len(stats.systems_seen)} [dim]({stats.systems_created} new)[/dim]",
    )
    if stats.entries_drained > 0:
        stats_table.add_row(
            "○ Skipped Entries:", f"[yellow]{stats.entries_drained}[/yellow]"
        )

    stats_table.add_row("", "")  # Spacer
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_size(stats.bytes_written)}[/cyan]"
    )
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    if stats.tracks_imported > 0 and duration_s > 0:
        tracks_per_minute = (stats.tracks_imported / duration_s) * 60
        stats_table.add_row(
            "Throughput:", f"[cyan]{tracks_per_minute:.1f} tracks/min[/cyan]"
        )

    if stats.dry_run:
        title = "🔍 [bold]Dry Run Summary[/bold]"
        border_color = "yellow"
    else:
        title = "🎵 [bold]Import Complete![/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
