"""
Tests for the SQLite catalogue repositories.
"""

import asyncio

import pytest

from vgm_importer.exceptions import CatalogueError
from vgm_importer.storage.catalogue import CatalogueStore


def run(db_path, body):
    """Run ``body(catalogue)`` against a store bound to a fresh event loop."""

    async def _run():
        return await body(CatalogueStore(db_path))

    return asyncio.run(_run())


class TestSystems:
    """find_one/create/save for the simplest entity."""

    def test_create_does_not_persist(self, tmp_path):
        async def body(catalogue):
            system = catalogue.systems.create(name="NES")
            assert system.id is None
            return await catalogue.systems.find_one(name="NES")

        assert run(tmp_path / "c.sqlite", body) is None

    def test_save_assigns_id_and_is_found_by_name(self, tmp_path):
        async def body(catalogue):
            saved = await catalogue.systems.save(catalogue.systems.create(name="NES"))
            found = await catalogue.systems.find_one(name="NES")
            return saved, found

        saved, found = run(tmp_path / "c.sqlite", body)
        assert saved.id is not None
        assert found == saved

    def test_lookup_is_exact(self, tmp_path):
        async def body(catalogue):
            await catalogue.systems.save(catalogue.systems.create(name="NES"))
            return await catalogue.systems.find_one(name="nes")

        assert run(tmp_path / "c.sqlite", body) is None

    def test_unknown_criteria_rejected(self, tmp_path):
        async def body(catalogue):
            return await catalogue.systems.find_one(colour="blue")

        with pytest.raises(CatalogueError):
            run(tmp_path / "c.sqlite", body)

    def test_save_updates_existing_row(self, tmp_path):
        async def body(catalogue):
            system = await catalogue.systems.save(catalogue.systems.create(name="NES"))
            system.name = "Famicom"
            await catalogue.systems.save(system)
            return await catalogue.systems.find_one(id=system.id)

        assert run(tmp_path / "c.sqlite", body).name == "Famicom"


class TestReferences:
    """Saved entities may only point at saved entities."""

    def test_game_needs_saved_system(self, tmp_path):
        async def body(catalogue):
            system = catalogue.systems.create(name="NES")
            game = catalogue.games.create(name="Contra", system=system)
            await catalogue.games.save(game)

        with pytest.raises(CatalogueError, match="must be saved"):
            run(tmp_path / "c.sqlite", body)

    def test_track_round_trip_keeps_games(self, tmp_path):
        async def body(catalogue):
            system = await catalogue.systems.save(catalogue.systems.create(name="NES"))
            game = await catalogue.games.save(
                catalogue.games.create(name="Contra", system=system)
            )
            track = await catalogue.tracks.save(
                catalogue.tracks.create(name="Jungle", file="abc.vgz", games=[game])
            )
            return game, await catalogue.tracks.find_one(file="abc.vgz")

        game, track = run(tmp_path / "c.sqlite", body)
        assert track.name == "Jungle"
        assert track.games == [game]

    def test_playlist_keeps_track_order(self, tmp_path):
        async def body(catalogue):
            system = await catalogue.systems.save(catalogue.systems.create(name="NES"))
            game = await catalogue.games.save(
                catalogue.games.create(name="Contra", system=system)
            )
            tracks = []
            for name in ("Waterfall", "Jungle", "Snow Field"):
                tracks.append(
                    await catalogue.tracks.save(
                        catalogue.tracks.create(
                            name=name, file=f"{name}.vgz", games=[game]
                        )
                    )
                )
            playlist = catalogue.playlists.create(
                name="Contra OST", games=[game], tracks=tracks
            )
            await catalogue.playlists.save(playlist)
            return await catalogue.playlists.find_one(name="Contra OST")

        playlist = run(tmp_path / "c.sqlite", body)
        assert [t.name for t in playlist.tracks] == ["Waterfall", "Jungle", "Snow Field"]
        assert [g.name for g in playlist.games] == ["Contra"]


class TestStats:
    def test_counts_and_top_systems(self, tmp_path):
        async def body(catalogue):
            nes = await catalogue.systems.save(catalogue.systems.create(name="NES"))
            snes = await catalogue.systems.save(catalogue.systems.create(name="SNES"))
            for name in ("Contra", "Metroid"):
                await catalogue.games.save(catalogue.games.create(name=name, system=nes))
            await catalogue.games.save(catalogue.games.create(name="F-Zero", system=snes))
            return await catalogue.get_stats()

        stats = run(tmp_path / "c.sqlite", body)
        assert stats["systems"] == 2
        assert stats["games"] == 3
        assert stats["tracks"] == 0
        assert stats["top_systems"] == [("NES", 2), ("SNES", 1)]

    def test_database_directory_is_created(self, tmp_path):
        async def body(catalogue):
            return await catalogue.get_stats()

        db_path = tmp_path / "nested" / "dir" / "c.sqlite"
        assert run(db_path, body)["systems"] == 0
        assert db_path.is_file()
