"""
Utilities for resolving archive locations and naming uploaded track files.
"""

import uuid
from pathlib import Path

from pathvalidate import ValidationError, validate_filename

from vgm_importer.exceptions import ArchiveOpenError


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def resolve_archive_path(archive_root: Path, archive_file_name: str) -> Path:
    """
    Joins a manifest archive name onto the archive root.

    The name must be a single path component so a manifest can never point
    outside the archive directory. Only the host platform's file name rules
    apply; names such as 'Ys: The Vanished Omens.zip' are fine on POSIX.
    """
    if (
        archive_file_name in (".", "..")
        or Path(archive_file_name).name != archive_file_name
    ):
        raise ArchiveOpenError(
            f"Archive name '{archive_file_name}' must not contain a directory part."
        )
    try:
        validate_filename(archive_file_name, platform="auto")
    except ValidationError as e:
        raise ArchiveOpenError(
            f"Archive name '{archive_file_name}' is not a valid file name: {e}"
        ) from e
    return archive_root / archive_file_name


def generate_upload_name(extension: str) -> str:
    """Returns a collision-free stored file name such as '3f2c...e1.vgz'."""
    return f"{uuid.uuid4().hex}{extension}"
