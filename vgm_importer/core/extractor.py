"""
Streams a soundtrack zip entry by entry, forwarding tracks and draining the rest.
"""

import asyncio
import logging
import zipfile
import zlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from vgm_importer.exceptions import ArchiveOpenError
from vgm_importer.models.config import DEFAULT_CHUNK_SIZE

from .classifier import EntryNameClassifier

log = logging.getLogger(__name__)

TrackCallback = Callable[[str, str, IO[bytes]], Awaitable[None]]


@dataclass
class ExtractionResult:
    """Counts reported once every entry of an archive has been visited."""

    tracks_forwarded: int = 0
    entries_drained: int = 0


class ArchiveExtractor:
    """
    Walks a zip archive in storage order.

    Entry payloads are opened as streams and read in chunks, so no entry is
    ever held in memory as a whole. Blocking reads run in worker threads.
    """

    def __init__(
        self,
        classifier: EntryNameClassifier | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.classifier = classifier or EntryNameClassifier()
        self.chunk_size = chunk_size

    @staticmethod
    def _open_archive(archive_path: Path) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(archive_path)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveOpenError(f"Cannot open archive '{archive_path}': {e}") from e

    def _drain(self, stream: IO[bytes]) -> int:
        """Reads and discards whatever is left in the stream."""
        drained = 0
        while chunk := stream.read(self.chunk_size):
            drained += len(chunk)
        return drained

    def _drain_entry(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> int:
        with archive.open(info) as stream:
            return self._drain(stream)

    async def extract(
        self, archive_path: Path, on_track: TrackCallback, game_name: str
    ) -> ExtractionResult:
        """
        Classifies every entry and hands track entries to ``on_track``.

        ``on_track`` receives the ordinal, the track name and the entry stream.
        It must consume the stream before returning; whatever it leaves unread is
        drained before the next entry is touched.

        Raises:
            ArchiveOpenError: If the archive is missing, unreadable or corrupt.
            EntryNamePatternError: If a track entry is badly named. Extraction
                stops at that entry.
        """
        archive = await asyncio.to_thread(self._open_archive, archive_path)
        result = ExtractionResult()
        try:
            entries = sorted(archive.infolist(), key=lambda info: info.header_offset)
            log.debug(f"Archive '{archive_path.name}' holds {len(entries)} entries.")

            for info in entries:
                track = self.classifier.classify(info.filename, game_name)
                try:
                    if track is None:
                        if not info.is_dir():
                            await asyncio.to_thread(self._drain_entry, archive, info)
                        result.entries_drained += 1
                        log.debug(f"  [dim]Drained '{info.filename}'[/dim]")
                        continue

                    stream = await asyncio.to_thread(archive.open, info)
                    with stream:
                        await on_track(track.ordinal, track.name, stream)
                        await asyncio.to_thread(self._drain, stream)
                    result.tracks_forwarded += 1
                except (
                    zipfile.BadZipFile,
                    zlib.error,
                    EOFError,
                    NotImplementedError,
                ) as e:
                    raise ArchiveOpenError(
                        f"Entry '{info.filename}' of '{archive_path}' is corrupt: {e}"
                    ) from e
        finally:
            archive.close()

        return result
