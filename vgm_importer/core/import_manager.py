"""
The main orchestrator: walks the manifest, creates catalogue rows and drives
extraction of every game's soundtrack archive.
"""

import asyncio
import itertools
import logging
from typing import IO

from rich.markup import escape

from vgm_importer.models.config import ImportConfig
from vgm_importer.models.entities import ManifestEntry, System, Track
from vgm_importer.models.stats import ImportStats
from vgm_importer.storage.catalogue import CatalogueStore
from vgm_importer.utils.formatting import playlist_name_for
from vgm_importer.utils.path import generate_upload_name, resolve_archive_path

from .classifier import EntryNameClassifier
from .extractor import ArchiveExtractor
from .manifest import parse_manifest
from .track_processor import TrackProcessor

log = logging.getLogger(__name__)


class ImportManager:
    """Orchestrates the entire import process."""

    def __init__(self, config: ImportConfig, catalogue: CatalogueStore):
        self.config = config
        self.catalogue = catalogue
        self.stats = ImportStats(dry_run=config.dry_run)
        self.extractor = ArchiveExtractor(
            EntryNameClassifier(config.track_extension), config.chunk_size
        )
        self.track_processor = TrackProcessor(config, catalogue, self.stats)
        # Systems created during a dry run are never saved, so find_one misses them.
        self._unsaved_systems: dict[str, System] = {}

    async def run(self) -> ImportStats:
        """
        Imports the games listed in the manifest, one at a time.

        At most ``config.max_games`` entries are processed (0 means all of them).
        The first fatal error aborts the run and nothing already saved or
        written is rolled back.
        """
        entries = parse_manifest(self.config.manifest_path)
        if self.config.max_games:
            entries = itertools.islice(entries, self.config.max_games)

        for entry in entries:
            await self._import_game(entry)

        if not self.stats.games_imported:
            log.warning("[yellow]The manifest lists no games. Nothing to do.[/yellow]")
        return self.stats

    async def _resolve_system(self, name: str) -> System:
        """Finds a System by exact name, creating and saving it when absent."""
        if found := await self.catalogue.systems.find_one(name=name):
            return found
        if name in self._unsaved_systems:
            return self._unsaved_systems[name]

        system = self.catalogue.systems.create(name=name)
        if not self.config.dry_run:
            system = await self.catalogue.systems.save(system)
        else:
            self._unsaved_systems[name] = system
        self.stats.systems_created += 1
        log.debug(f"Created system '{escape(name)}'.")
        return system

    async def _import_game(self, entry: ManifestEntry) -> None:
        log.info(
            f"\n[bold cyan]▶ Game:[/] {escape(entry.game_name)} "
            f"[dim]({escape(entry.system_name)})[/dim]"
        )
        archive_path = resolve_archive_path(
            self.config.archive_root, entry.archive_file_name
        )

        system = await self._resolve_system(entry.system_name)
        self.stats.systems_seen.add(system.name)

        game = self.catalogue.games.create(name=entry.game_name, system=system)
        if not self.config.dry_run:
            game = await self.catalogue.games.save(game)

        pending: list[asyncio.Task[Track]] = []

        async def on_track(ordinal: str, name: str, stream: IO[bytes]) -> None:
            if self.config.dry_run:
                self.stats.tracks_imported += 1
                log.info(f"  [cyan]→ (Dry Run)[/] {ordinal} {escape(name)}")
                return

            file_name = generate_upload_name(self.config.track_extension)
            await self.track_processor.write_upload(stream, file_name)
            pending.append(
                asyncio.create_task(
                    self.track_processor.persist_track(name, file_name, game)
                )
            )

        try:
            result = await self.extractor.extract(archive_path, on_track, game.name)
            tracks = list(await asyncio.gather(*pending))
        except BaseException:
            for task in pending:
                task.cancel()
            raise

        self.stats.entries_drained += result.entries_drained
        self.stats.games_imported += 1

        if self.config.dry_run:
            log.info(
                f"  [cyan]→ (Dry Run)[/] Would create playlist "
                f"'{escape(playlist_name_for(game.name))}' with "
                f"{result.tracks_forwarded} tracks."
            )
            return

        playlist = self.catalogue.playlists.create(
            name=playlist_name_for(game.name), games=[game], tracks=tracks
        )
        playlist = await self.catalogue.playlists.save(playlist)
        self.stats.playlists_created += 1
        log.info(
            f"  [bold green]♫ Playlist:[/] {escape(playlist.name)} "
            f"[dim]({len(playlist.tracks)} tracks)[/dim]"
        )
