"""
Core application engine for orchestrating an import.

This package contains the primary logic. The `ImportManager` walks the manifest
and creates catalogue rows, the `ArchiveExtractor` streams each soundtrack
archive, and the `TrackProcessor` stores every extracted track.
"""
