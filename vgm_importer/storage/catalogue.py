"""
Manages the SQLite database that holds the systems, games, tracks and playlists
created by imports.
"""

import asyncio
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from vgm_importer.exceptions import CatalogueError
from vgm_importer.models.entities import Game, Playlist, System, Track

log = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS systems (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS games (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    system_id INTEGER NOT NULL REFERENCES systems(id),
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE IF NOT EXISTS tracks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    file TEXT NOT NULL UNIQUE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE IF NOT EXISTS track_games (
    track_id INTEGER NOT NULL REFERENCES tracks(id),
    game_id INTEGER NOT NULL REFERENCES games(id),
    PRIMARY KEY (track_id, game_id)
);
CREATE TABLE IF NOT EXISTS playlists (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE IF NOT EXISTS playlist_games (
    playlist_id INTEGER NOT NULL REFERENCES playlists(id),
    game_id INTEGER NOT NULL REFERENCES games(id),
    PRIMARY KEY (playlist_id, game_id)
);
CREATE TABLE IF NOT EXISTS playlist_tracks (
    playlist_id INTEGER NOT NULL REFERENCES playlists(id),
    track_id INTEGER NOT NULL REFERENCES tracks(id),
    position INTEGER NOT NULL,
    PRIMARY KEY (playlist_id, position)
);
CREATE INDEX IF NOT EXISTS idx_systems_name ON systems(name);
CREATE INDEX IF NOT EXISTS idx_games_name ON games(name);
"""


def _require_saved(entity: Any, owner: str) -> int:
    if entity.id is None:
        raise CatalogueError(
            f"{type(entity).__name__} '{entity.name}' must be saved before {owner}."
        )
    return entity.id


def _system_from_row(row: sqlite3.Row) -> System:
    return System(name=row["name"], id=row["id"])


def _game_from_row(conn: sqlite3.Connection, row: sqlite3.Row) -> Game:
    system_row = conn.execute(
        "SELECT * FROM systems WHERE id = ?", (row["system_id"],)
    ).fetchone()
    return Game(name=row["name"], system=_system_from_row(system_row), id=row["id"])


def _track_from_row(conn: sqlite3.Connection, row: sqlite3.Row) -> Track:
    games = [
        _game_from_row(conn, game_row)
        for game_row in conn.execute(
            "SELECT g.* FROM games g JOIN track_games tg ON tg.game_id = g.id "
            "WHERE tg.track_id = ? ORDER BY g.id",
            (row["id"],),
        ).fetchall()
    ]
    return Track(name=row["name"], file=row["file"], games=games, id=row["id"])


class Repository:
    """
    find_one/create/save access to one entity type.

    ``create`` only builds an unsaved entity; nothing touches the database
    until ``save`` is awaited.
    """

    entity_class: type
    table: str
    columns: tuple[str, ...] = ("id", "name")

    def __init__(self, store: "CatalogueStore"):
        self._store = store

    def create(self, **fields):
        """Builds an unsaved entity from the given fields."""
        return self.entity_class(**fields)

    async def find_one(self, **criteria):
        """Returns the first entity matching all criteria, or None."""
        unknown = set(criteria) - set(self.columns)
        if unknown:
            raise CatalogueError(
                f"Cannot search {self.table} by {', '.join(sorted(unknown))}."
            )
        return await self._store.run_in_executor(self._find_one_sync, criteria)

    async def save(self, entity):
        """Inserts or updates the entity and returns it with its id set."""
        return await self._store.run_in_executor(self._save_sync, entity)

    def _find_one_sync(self, criteria: dict[str, Any]):
        where = " AND ".join(f"{column} = ?" for column in criteria) or "1 = 1"
        query = (
            f"SELECT * FROM {self.table} WHERE {where} ORDER BY id LIMIT 1"  # noqa: S608
        )
        try:
            with self._store.connection() as conn:
                row = conn.execute(query, tuple(criteria.values())).fetchone()
                return self._load(conn, row) if row else None
        except sqlite3.Error as e:
            log.error(f"Lookup in '{self.table}' failed: {e}")
            raise CatalogueError(f"Lookup in '{self.table}' failed: {e}") from e

    def _save_sync(self, entity):
        try:
            with self._store.connection() as conn:
                self._write(conn, entity)
                conn.commit()
            return entity
        except sqlite3.Error as e:
            log.error(f"Saving {type(entity).__name__} '{entity.name}' failed: {e}")
            raise CatalogueError(
                f"Saving {type(entity).__name__} '{entity.name}' failed: {e}"
            ) from e

    def _load(self, conn: sqlite3.Connection, row: sqlite3.Row):
        raise NotImplementedError

    def _write(self, conn: sqlite3.Connection, entity) -> None:
        raise NotImplementedError


class SystemRepository(Repository):
    entity_class = System
    table = "systems"

    def _load(self, conn, row):
        return _system_from_row(row)

    def _write(self, conn, entity):
        if entity.id is None:
            cur = conn.execute("INSERT INTO systems (name) VALUES (?)", (entity.name,))
            entity.id = cur.lastrowid
        else:
            conn.execute(
                "UPDATE systems SET name = ? WHERE id = ?", (entity.name, entity.id)
            )


class GameRepository(Repository):
    entity_class = Game
    table = "games"
    columns = ("id", "name", "system_id")

    def _load(self, conn, row):
        return _game_from_row(conn, row)

    def _write(self, conn, entity):
        system_id = _require_saved(entity.system, f"game '{entity.name}'")
        if entity.id is None:
            cur = conn.execute(
                "INSERT INTO games (name, system_id) VALUES (?, ?)",
                (entity.name, system_id),
            )
            entity.id = cur.lastrowid
        else:
            conn.execute(
                "UPDATE games SET name = ?, system_id = ? WHERE id = ?",
                (entity.name, system_id, entity.id),
            )


class TrackRepository(Repository):
    entity_class = Track
    table = "tracks"
    columns = ("id", "name", "file")

    def _load(self, conn, row):
        return _track_from_row(conn, row)

    def _write(self, conn, entity):
        game_ids = [_require_saved(g, f"track '{entity.name}'") for g in entity.games]
        if entity.id is None:
            cur = conn.execute(
                "INSERT INTO tracks (name, file) VALUES (?, ?)",
                (entity.name, entity.file),
            )
            entity.id = cur.lastrowid
        else:
            conn.execute(
                "UPDATE tracks SET name = ?, file = ? WHERE id = ?",
                (entity.name, entity.file, entity.id),
            )
            conn.execute("DELETE FROM track_games WHERE track_id = ?", (entity.id,))
        conn.executemany(
            "INSERT OR IGNORE INTO track_games (track_id, game_id) VALUES (?, ?)",
            [(entity.id, game_id) for game_id in game_ids],
        )


class PlaylistRepository(Repository):
    entity_class = Playlist
    table = "playlists"

    def _load(self, conn, row):
        games = [
            _game_from_row(conn, game_row)
            for game_row in conn.execute(
                "SELECT g.* FROM games g JOIN playlist_games pg ON pg.game_id = g.id "
                "WHERE pg.playlist_id = ? ORDER BY g.id",
                (row["id"],),
            ).fetchall()
        ]
        tracks = [
            _track_from_row(conn, track_row)
            for track_row in conn.execute(
                "SELECT t.* FROM tracks t JOIN playlist_tracks pt ON pt.track_id = t.id"
                " WHERE pt.playlist_id = ? ORDER BY pt.position",
                (row["id"],),
            ).fetchall()
        ]
        return Playlist(name=row["name"], games=games, tracks=tracks, id=row["id"])

    def _write(self, conn, entity):
        owner = f"playlist '{entity.name}'"
        game_ids = [_require_saved(g, owner) for g in entity.games]
        track_ids = [_require_saved(t, owner) for t in entity.tracks]
        if entity.id is None:
            cur = conn.execute(
                "INSERT INTO playlists (name) VALUES (?)", (entity.name,)
            )
            entity.id = cur.lastrowid
        else:
            conn.execute(
                "UPDATE playlists SET name = ? WHERE id = ?", (entity.name, entity.id)
            )
            conn.execute(
                "DELETE FROM playlist_games WHERE playlist_id = ?", (entity.id,)
            )
            conn.execute(
                "DELETE FROM playlist_tracks WHERE playlist_id = ?", (entity.id,)
            )
        conn.executemany(
            "INSERT OR IGNORE INTO playlist_games (playlist_id, game_id) VALUES (?, ?)",
            [(entity.id, game_id) for game_id in game_ids],
        )
        conn.executemany(
            "INSERT INTO playlist_tracks (playlist_id, track_id, position) "
            "VALUES (?, ?, ?)",
            [(entity.id, track_id, pos) for pos, track_id in enumerate(track_ids)],
        )


class CatalogueStore:
    """
    A thread-safe SQLite catalogue with one repository per entity type and a
    bounded pool of worker-thread connections.
    """

    def __init__(self, db_path: Path, pool_size: int = 5):
        self.db_path = db_path
        self._pool_size = pool_size
        self._connection_semaphore = asyncio.Semaphore(pool_size)
        self.systems = SystemRepository(self)
        self.games = GameRepository(self)
        self.tracks = TrackRepository(self)
        self.playlists = PlaylistRepository(self)
        self._initialize_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Gets a new database connection with optimized PRAGMA settings."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=30, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA foreign_keys=ON;")
            return conn
        except sqlite3.Error as e:
            log.error(f"Failed to connect to catalogue database: {e}")
            raise CatalogueError(f"Cannot open catalogue '{self.db_path}': {e}") from e

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yields a connection inside a transaction and closes it afterwards."""
        conn = self._get_connection()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _initialize_db(self) -> None:
        """Creates the database file and tables if they don't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self.connection() as conn:
                conn.executescript(SCHEMA)
                conn.commit()
        except (OSError, sqlite3.Error) as e:
            log.error(f"Failed to initialize catalogue at '{self.db_path}': {e}")
            raise CatalogueError(
                f"Failed to initialize catalogue at '{self.db_path}': {e}"
            ) from e

    async def run_in_executor(self, func, *args):
        """Runs a synchronous database function within the connection pool semaphore."""
        async with self._connection_semaphore:
            return await asyncio.to_thread(func, *args)

    def _get_stats_sync(self) -> dict[str, Any]:
        """Synchronous implementation for getting catalogue statistics."""
        try:
            with self.connection() as conn:
                counts = {
                    table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]  # noqa: S608
                    for table in ("systems", "games", "tracks", "playlists")
                }
                top_systems = [
                    (row["name"], row["count"])
                    for row in conn.execute(
                        """
                        SELECT s.name AS name, COUNT(g.id) AS count
                        FROM systems s
                        JOIN games g ON g.system_id = s.id
                        GROUP BY s.id
                        ORDER BY count DESC, s.name
                        LIMIT 10
                        """
                    )
                ]
                return {**counts, "top_systems": top_systems}
        except sqlite3.Error as e:
            log.error(f"Failed to get catalogue stats: {e}")
            raise CatalogueError(f"Failed to get catalogue stats: {e}") from e

    async def get_stats(self) -> dict[str, Any]:
        """Retrieves row counts and the systems with the most games."""
        return await self.run_in_executor(self._get_stats_sync)
