from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Optional

from .config import LibrarySettings
from .metadata import MetadataReader
from .models import Song
from .titles import filename_from_title

logger = logging.getLogger(__name__)


class LibraryScanner:
    """Lists the playable songs found under the library root."""

    def __init__(self, settings: LibrarySettings, reader: Optional[MetadataReader] = None) -> None:
        self.settings = settings
        self.reader = reader or MetadataReader()
        self._exts = {ext.lower() for ext in self.settings.include_extensions}

    @property
    def root(self) -> Path:
        return self.settings.root

    @property
    def extensions(self) -> set[str]:
        return set(self._exts)

    def iter_paths(self) -> Iterator[Path]:
        root = self.settings.root
        if not root.exists() or not root.is_dir():
            logger.warning("Music library not found: %s", root)
            return
        candidates = root.rglob("*") if self.settings.recursive else root.iterdir()
        paths = [path for path in candidates if path.is_file() and self._should_include(path)]
        yield from sorted(paths, key=lambda p: (p.name.lower(), str(p)))

    def iter_songs(self) -> Iterator[Song]:
        for path in self.iter_paths():
            yield self.reader.read(path)

    def list_songs(self) -> list[Song]:
        return list(self.iter_songs())

    def find_by_title(self, title: str) -> Optional[Song]:
        wanted = title.strip().lower()
        songs = self.list_songs()
        for song in songs:
            if song.title.lower() == wanted:
                return song
        for song in songs:
            if song.filename.lower() == filename_from_title(title, song.path.suffix):
                return song
        return None

    def _should_include(self, path: Path) -> bool:
        if path.suffix.lower() not in self._exts:
            return False
        if path.name.startswith("."):
            return False
        rel = str(path)
        for pattern in self.settings.exclude_patterns:
            if fnmatch.fnmatch(rel, pattern) or fnmatch.fnmatch(path.name, pattern):
                return False
        return True
