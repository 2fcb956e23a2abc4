"""Pytest configuration and shared fixtures."""

import json
import sqlite3
import zipfile
from dataclasses import dataclass
from pathlib import Path

import pytest

from vgm_importer.models.config import ImportConfig


def make_zip(path: Path, entries: dict[str, bytes | str], compression=zipfile.ZIP_DEFLATED):
    """Create a ZIP archive; entries are written in dict order."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=compression) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


@dataclass
class ImportEnv:
    """Isolated working tree for import tests."""
    root: Path

    @property
    def archive_root(self) -> Path:
        return self.root / "vgmrips"

    @property
    def uploads_root(self) -> Path:
        return self.root / "uploads"

    @property
    def manifest_path(self) -> Path:
        return self.archive_root / "games.json"

    @property
    def database_path(self) -> Path:
        return self.root / "catalogue.sqlite"

    def write_manifest(self, data) -> Path:
        """Write the manifest. A str is written verbatim, anything else as JSON."""
        self.archive_root.mkdir(parents=True, exist_ok=True)
        raw = data if isinstance(data, str) else json.dumps(data)
        self.manifest_path.write_text(raw, encoding="utf-8")
        return self.manifest_path

    def make_archive(
        self, name: str, entries: dict[str, bytes | str], compression=zipfile.ZIP_DEFLATED
    ) -> Path:
        return make_zip(self.archive_root / name, entries, compression)

    def config(self, **overrides) -> ImportConfig:
        settings = {
            "manifest_path": self.manifest_path,
            "archive_root": self.archive_root,
            "uploads_root": self.uploads_root,
            "database_path": self.database_path,
        }
        settings.update(overrides)
        return ImportConfig(**settings)

    def query(self, sql: str, params: tuple = ()) -> list[tuple]:
        """Run a read query against the catalogue database."""
        conn = sqlite3.connect(self.database_path)
        try:
            return conn.execute(sql, params).fetchall()
        finally:
            conn.close()

    def count(self, table: str) -> int:
        return self.query(f"SELECT COUNT(*) FROM {table}")[0][0]

    def uploaded_files(self) -> list[Path]:
        if not self.uploads_root.exists():
            return []
        return sorted(self.uploads_root.iterdir())


@pytest.fixture
def import_env(tmp_path):
    return ImportEnv(root=tmp_path)
