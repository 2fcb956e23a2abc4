"""
Decides which archive entries are importable tracks and parses their names.
"""

import posixpath
import re

from vgm_importer.exceptions import EntryNamePatternError
from vgm_importer.models.config import DEFAULT_TRACK_EXTENSION
from vgm_importer.models.entities import TrackName


class EntryNameClassifier:
    """
    Classifies archive entry paths.

    Entries whose extension (case-sensitive) is not the track extension are
    not tracks. Entries that have it must be named '<2-3 digits> <title><ext>'.
    """

    def __init__(self, track_extension: str = DEFAULT_TRACK_EXTENSION):
        self.track_extension = track_extension
        self._pattern = re.compile(
            r"^(?P<ordinal>\d{2,3}) (?P<name>[\w\s(),_-]+)"
            + re.escape(track_extension)
            + r"$",
            re.ASCII,
        )

    def is_candidate(self, entry_path: str) -> bool:
        """True if the entry carries the track extension and is not a directory."""
        if entry_path.endswith("/"):
            return False
        return posixpath.splitext(entry_path)[1] == self.track_extension

    def classify(self, entry_path: str, game_name: str) -> TrackName | None:
        """
        Returns the parsed ordinal and name, or None when the entry is not a track.

        Raises:
            EntryNamePatternError: If the entry has the track extension but its
                file name does not follow the naming convention.
        """
        if not self.is_candidate(entry_path):
            return None

        match = self._pattern.match(posixpath.basename(entry_path))
        if not match:
            raise EntryNamePatternError(entry_path, game_name)
        return TrackName(match.group("ordinal"), match.group("name"))


_default_classifier = EntryNameClassifier()


def classify_entry(entry_path: str, game_name: str) -> TrackName | None:
    """Classifies an entry using the default '.vgz' track extension."""
    return _default_classifier.classify(entry_path, game_name)
