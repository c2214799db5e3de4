from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import mutagen
from mutagen import MutagenError

from .models import Song
from .titles import title_from_filename

logger = logging.getLogger(__name__)

# Frame ids used when a container carries raw ID3 tags (e.g. WAV) instead of easy keys.
ID3_FRAMES = {
    "title": "TIT2",
    "artist": "TPE1",
    "album": "TALB",
}


class MetadataReader:
    """Reads tags and stream info with mutagen, falling back to the file name for titles."""

    def read(self, path: Path) -> Song:
        fallback_title = title_from_filename(path.name)
        try:
            audio = mutagen.File(path, easy=True)
        except (MutagenError, OSError) as exc:
            logger.debug("Could not read tags from %s: %s", path, exc)
            return Song(path=path, title=fallback_title)
        if audio is None:
            logger.debug("Unrecognised audio container: %s", path)
            return Song(path=path, title=fallback_title)

        tags = getattr(audio, "tags", None)
        info = getattr(audio, "info", None)
        return Song(
            path=path,
            title=self._tag(tags, "title") or fallback_title,
            artist=self._tag(tags, "artist"),
            album=self._tag(tags, "album"),
            duration_seconds=self._info_float(info, "length"),
            sample_rate=self._info_int(info, "sample_rate"),
            channels=self._info_int(info, "channels"),
        )

    @staticmethod
    def _tag(tags: Any, key: str) -> Optional[str]:
        if not tags:
            return None
        value = None
        try:
            value = tags.get(key)
        except (KeyError, ValueError):
            value = None
        if value is None and key in ID3_FRAMES:
            frame = tags.get(ID3_FRAMES[key]) if hasattr(tags, "getall") else None
            value = getattr(frame, "text", None)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def _info_float(info: Any, attr: str) -> Optional[float]:
        value = getattr(info, attr, None)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _info_int(info: Any, attr: str) -> Optional[int]:
        value = getattr(info, attr, None)
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
