"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

DEFAULT_TRACK_EXTENSION = ".vgz"
DEFAULT_CHUNK_SIZE = 262144  # 256 KB
MIN_CHUNK_SIZE = 4096  # 4 KB
MAX_CHUNK_SIZE = 16777216  # 16 MB


class ImportConfig(BaseModel):
    """A validated configuration model for an import run."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Input and output locations
    manifest_path: Path = Path("vgmrips/games.json")
    archive_root: Path = Path("vgmrips")
    uploads_root: Path = Path("uploads")
    database_path: Path = Path("catalogue.sqlite")

    # Import behaviour
    max_games: int = 0  # 0 processes the whole manifest
    track_extension: str = DEFAULT_TRACK_EXTENSION
    dry_run: bool = False

    # Performance tuning
    chunk_size: int = DEFAULT_CHUNK_SIZE
    pool_size: int = 5

    @field_validator("max_games")
    @classmethod
    def validate_max_games(cls, v: int) -> int:
        """Ensures the game limit is zero (no limit) or positive."""
        if v < 0:
            raise ValueError("Max games must be 0 (no limit) or a positive number.")
        return v

    @field_validator("track_extension")
    @classmethod
    def validate_track_extension(cls, v: str) -> str:
        """Ensures the extension is a dotted suffix such as '.vgz'."""
        if not v.startswith(".") or len(v) < 2 or "/" in v or "\\" in v:
            raise ValueError(
                f"Track extension must look like '.vgz', but got: {v!r}"
            )
        return v

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        """Keeps stream reads within a sensible window."""
        if v < MIN_CHUNK_SIZE or v > MAX_CHUNK_SIZE:
            raise ValueError(
                f"Chunk size must be between {MIN_CHUNK_SIZE} and {MAX_CHUNK_SIZE}."
            )
        return v

    @field_validator("pool_size")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        """Ensures a reasonable number of database connections."""
        if v < 1 or v > 32:
            raise ValueError("Pool size must be between 1 and 32.")
        return v

    @model_validator(mode="after")
    def validate_path_conflicts(self) -> "ImportConfig":
        """Checks that uploads never land on top of the source archives."""
        if self.uploads_root.resolve() == self.archive_root.resolve():
            raise ValueError("Uploads directory cannot be the archive directory.")
        if self.manifest_path.suffix.lower() != ".json":
            raise ValueError(
                f"Manifest must be a .json file, but got: {self.manifest_path}"
            )
        return self

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"dry_run"}
        return {key for key in cls.model_fields if key not in internal_fields}
