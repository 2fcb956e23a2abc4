"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class VgmImporterError(Exception):
    """Base exception for all application-specific errors."""


class ManifestReadError(VgmImporterError):
    """Raised when the manifest file cannot be read from disk."""


class ManifestParseError(VgmImporterError):
    """Raised when the manifest is not valid JSON or has an unexpected shape."""


class ArchiveOpenError(VgmImporterError):
    """Raised when a soundtrack archive is missing, unreadable or corrupt."""


class EntryNamePatternError(VgmImporterError):
    """
    Raised when an archive entry has the track extension but its name does not
    follow the '<ordinal> <title>.vgz' convention.
    """

    def __init__(self, path: str, game_name: str):
        self.path = path
        self.game_name = game_name
        super().__init__(f'file name: "{path}" can not be parsed; game: {game_name}')


class ConfigurationError(VgmImporterError):
    """Raised for issues related to configuration loading or validation."""


class CatalogueError(VgmImporterError):
    """Raised when the catalogue database rejects a read or write."""
