"""
Catalogue entities and the transient records passed between pipeline stages.

Entities with ``id`` set to ``None`` have not been saved yet; the catalogue
assigns the id on save.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ManifestEntry:
    """One (system, game, archive) triple read from the manifest."""

    system_name: str
    game_name: str
    archive_file_name: str


@dataclass(frozen=True)
class TrackName:
    """Ordinal and display name parsed from an archive entry."""

    ordinal: str
    name: str


@dataclass
class System:
    name: str
    id: int | None = None


@dataclass
class Game:
    name: str
    system: System
    id: int | None = None


@dataclass
class Track:
    name: str
    file: str
    games: list[Game] = field(default_factory=list)
    id: int | None = None


@dataclass
class Playlist:
    name: str
    games: list[Game] = field(default_factory=list)
    tracks: list[Track] = field(default_factory=list)
    id: int | None = None
