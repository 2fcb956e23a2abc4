"""
Handles the processing of a single track: writing its upload file and
persisting its catalogue row.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import IO

import aiofiles
import aiofiles.os
from rich.markup import escape

from vgm_importer.models.config import ImportConfig
from vgm_importer.models.entities import Game, Track
from vgm_importer.models.stats import ImportStats
from vgm_importer.storage.catalogue import CatalogueStore
from vgm_importer.utils.path import create_dir

log = logging.getLogger(__name__)


class TrackProcessor:
    """
    Writes extracted track bytes to the uploads directory and saves the
    matching Track rows.
    """

    def __init__(
        self,
        config: ImportConfig,
        catalogue: CatalogueStore,
        stats: ImportStats,
    ):
        self.config = config
        self.catalogue = catalogue
        self.stats = stats
        self._uploads_ready = False

    async def write_upload(self, stream: IO[bytes], file_name: str) -> Path:
        """
        Copies the entry stream verbatim to ``<uploads_root>/<file_name>``.

        The bytes land in a temporary file first and are renamed into place once
        the stream is exhausted.
        """
        if not self._uploads_ready:
            await asyncio.to_thread(create_dir, self.config.uploads_root)
            self._uploads_ready = True

        final_path = self.config.uploads_root / file_name
        temp_path = final_path.with_suffix(f"{final_path.suffix}.tmp")
        bytes_written = 0
        try:
            async with aiofiles.open(temp_path, "wb") as f:
                while chunk := await asyncio.to_thread(
                    stream.read, self.config.chunk_size
                ):
                    await f.write(chunk)
                    bytes_written += len(chunk)
            await aiofiles.os.rename(temp_path, final_path)
        finally:
            if temp_path.exists():
                try:
                    os.remove(temp_path)
                except OSError:
                    pass

        self.stats.bytes_written += bytes_written
        log.debug(
            f"  Wrote {bytes_written} bytes to [dim]{escape(str(final_path))}[/dim]"
        )
        return final_path

    async def persist_track(self, name: str, file_name: str, game: Game) -> Track:
        """Creates and saves the Track row linked to the game being imported."""
        track = self.catalogue.tracks.create(name=name, file=file_name, games=[game])
        track = await self.catalogue.tracks.save(track)
        self.stats.tracks_imported += 1
        log.info(f"  [green]✓[/green] {escape(track.name)}")
        return track
