"""
Tests for manifest parsing.

Covers entry ordering, laziness and the labelling of read/parse failures.
"""

import json

import pytest

from vgm_importer.core.manifest import parse_manifest
from vgm_importer.exceptions import ManifestParseError, ManifestReadError
from vgm_importer.models.entities import ManifestEntry


class TestManifestOrdering:
    """Entries come out system by system, game by game, in document order."""

    def test_one_entry_per_game_in_key_order(self, import_env):
        path = import_env.write_manifest(
            '{"Sega Genesis": {"Sonic": "sonic.zip", "Streets of Rage": "sor.zip"},'
            ' "Atari 2600": {"Pitfall": "pitfall.zip"},'
            ' "Arcade": {"Zaxxon": "zaxxon.zip", "Galaga": "galaga.zip"}}'
        )

        entries = list(parse_manifest(path))

        assert entries == [
            ManifestEntry("Sega Genesis", "Sonic", "sonic.zip"),
            ManifestEntry("Sega Genesis", "Streets of Rage", "sor.zip"),
            ManifestEntry("Atari 2600", "Pitfall", "pitfall.zip"),
            ManifestEntry("Arcade", "Zaxxon", "zaxxon.zip"),
            ManifestEntry("Arcade", "Galaga", "galaga.zip"),
        ]

    def test_system_without_games_yields_nothing(self, import_env):
        path = import_env.write_manifest({"Empty": {}, "NES": {"Contra": "c.zip"}})

        assert [e.game_name for e in parse_manifest(path)] == ["Contra"]

    def test_empty_manifest(self, import_env):
        path = import_env.write_manifest({})

        assert list(parse_manifest(path)) == []

    def test_sequence_is_single_pass(self, import_env):
        """A consumed generator stays exhausted; re-parsing starts over."""
        path = import_env.write_manifest({"NES": {"Contra": "c.zip"}})

        entries = parse_manifest(path)
        assert len(list(entries)) == 1
        assert list(entries) == []
        assert len(list(parse_manifest(path))) == 1

    def test_file_is_read_lazily(self, import_env):
        """Nothing is read until the sequence is first advanced."""
        path = import_env.root / "later.json"

        entries = parse_manifest(path)
        path.write_text(json.dumps({"NES": {"Contra": "c.zip"}}), encoding="utf-8")

        assert next(entries).game_name == "Contra"


class TestManifestErrors:
    """Read and parse failures are labelled, never leaked raw."""

    def test_missing_file(self, import_env):
        with pytest.raises(ManifestReadError):
            list(parse_manifest(import_env.root / "missing.json"))

    def test_truncated_json(self, import_env):
        path = import_env.write_manifest('{"Sega Genesis": {"Sonic": ')

        with pytest.raises(ManifestParseError) as exc_info:
            list(parse_manifest(path))

        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_top_level_must_be_object(self, import_env):
        path = import_env.write_manifest(["sonic.zip"])

        with pytest.raises(ManifestParseError):
            list(parse_manifest(path))

    def test_games_must_be_object(self, import_env):
        path = import_env.write_manifest({"Sega Genesis": ["sonic.zip"]})

        with pytest.raises(ManifestParseError, match="Sega Genesis"):
            list(parse_manifest(path))

    def test_archive_name_must_be_string(self, import_env):
        path = import_env.write_manifest({"Sega Genesis": {"Sonic": 42}})

        with pytest.raises(ManifestParseError, match="Sonic"):
            list(parse_manifest(path))
