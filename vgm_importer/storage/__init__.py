"""
Storage Layer.

This package handles all data persistence: the configuration file and the
SQLite catalogue of systems, games, tracks and playlists.
"""

from .catalogue import CatalogueStore
from .config_manager import ConfigManager

__all__ = ["CatalogueStore", "ConfigManager"]
