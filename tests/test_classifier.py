"""
Tests for archive entry classification.
"""

import pytest

from vgm_importer.core.classifier import EntryNameClassifier, classify_entry
from vgm_importer.exceptions import EntryNamePatternError
from vgm_importer.models.entities import TrackName


class TestTrackNames:
    """Well-formed track entries yield their ordinal and name."""

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("042 Title Theme.vgz", TrackName("042", "Title Theme")),
            ("01 Green Hill Zone.vgz", TrackName("01", "Green Hill Zone")),
            ("07 Boss (Act 3).vgz", TrackName("07", "Boss (Act 3)")),
            ("12 Ending, Part_2 - Reprise.vgz", TrackName("12", "Ending, Part_2 - Reprise")),
            ("Sonic/03 Marble Zone.vgz", TrackName("03", "Marble Zone")),
        ],
    )
    def test_parses_ordinal_and_name(self, path, expected):
        assert classify_entry(path, "Sonic") == expected

    def test_name_is_not_trimmed(self):
        """Only the single separating space is consumed."""
        assert classify_entry("01  Spaced.vgz", "Sonic") == TrackName("01", " Spaced")


class TestNotTracks:
    """Entries without the track extension are simply not tracks."""

    @pytest.mark.parametrize(
        "path",
        ["readme.txt", "01 Intro.VGZ", "01 Intro.vgm", "Sonic/", "cover.png", "vgz"],
    )
    def test_returns_none(self, path):
        assert classify_entry(path, "Sonic") is None

    def test_custom_extension(self):
        classifier = EntryNameClassifier(".vgm")

        assert classifier.classify("01 Intro.vgz", "Sonic") is None
        assert classifier.classify("01 Intro.vgm", "Sonic") == TrackName("01", "Intro")


class TestBadTrackNames:
    """Track entries that break the naming convention abort the import."""

    @pytest.mark.parametrize(
        "path",
        ["abc.vgz", "42title.vgz", "Track One.vgz", "1 Intro.vgz", "1234 Intro.vgz", "01 .vgz"],
    )
    def test_raises_pattern_error(self, path):
        with pytest.raises(EntryNamePatternError):
            classify_entry(path, "Sonic")

    def test_error_names_file_and_game(self):
        with pytest.raises(EntryNamePatternError) as exc_info:
            classify_entry("Track One.vgz", "Sonic")

        assert exc_info.value.path == "Track One.vgz"
        assert exc_info.value.game_name == "Sonic"
        assert "Track One.vgz" in str(exc_info.value)
        assert "Sonic" in str(exc_info.value)

    @pytest.mark.parametrize("path", ["01 Pokémon Center.vgz", "٠١ Intro.vgz"])
    def test_only_ascii_letters_and_digits(self, path):
        with pytest.raises(EntryNamePatternError):
            classify_entry(path, "Pokemon")
