"""
Data Models Layer.

This package contains the configuration model, the catalogue entities and the
session statistics used throughout the application.
"""

from .config import ImportConfig
from .entities import Game, ManifestEntry, Playlist, System, Track, TrackName
from .stats import ImportStats

__all__ = [
    "Game",
    "ImportConfig",
    "ImportStats",
    "ManifestEntry",
    "Playlist",
    "System",
    "Track",
    "TrackName",
]
