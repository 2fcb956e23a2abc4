"""
Reads the vgmrips manifest: a JSON object of system name -> {game name: archive}.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from vgm_importer.exceptions import ManifestParseError, ManifestReadError
from vgm_importer.models.entities import ManifestEntry

log = logging.getLogger(__name__)


def _load_manifest(manifest_path: Path) -> dict:
    try:
        with open(manifest_path, encoding="utf-8") as f:
            raw = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(
            f"Could not read manifest '{manifest_path}': {e}"
        ) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestParseError(
            f"Manifest '{manifest_path}' is not valid JSON: {e}"
        ) from e

    if not isinstance(data, dict):
        raise ManifestParseError(
            f"Manifest '{manifest_path}' must be a JSON object of systems, "
            f"got {type(data).__name__}."
        )
    return data


def parse_manifest(manifest_path: Path) -> Iterator[ManifestEntry]:
    """
    Lazily yields one ManifestEntry per (system, game) pair.

    Systems are walked in document order, and games in document order within
    each system. The file is read when the generator is first advanced, and the
    sequence cannot be restarted without calling this function again.

    Raises:
        ManifestReadError: If the file cannot be read.
        ManifestParseError: If the file is not valid JSON or has the wrong shape.
    """
    data = _load_manifest(manifest_path)
    log.debug(f"Loaded manifest '{manifest_path}' with {len(data)} systems.")

    for system_name, games in data.items():
        if not isinstance(games, dict):
            raise ManifestParseError(
                f"Games of system '{system_name}' must be a JSON object."
            )
        for game_name, archive_file_name in games.items():
            if not isinstance(archive_file_name, str):
                raise ManifestParseError(
                    f"Archive of game '{game_name}' ({system_name}) must be a string."
                )
            yield ManifestEntry(system_name, game_name, archive_file_name)
