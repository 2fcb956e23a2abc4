"""
Dataclass for tracking import session statistics.
"""

from dataclasses import dataclass, field


@dataclass
class ImportStats:
    """Tracks what an import session created, wrote and skipped."""

    games_imported: int = 0
    systems_created: int = 0
    tracks_imported: int = 0
    playlists_created: int = 0
    entries_drained: int = 0
    bytes_written: int = 0
    dry_run: bool = False
    systems_seen: set[str] = field(default_factory=set)
