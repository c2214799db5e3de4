from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..audio_cache import ResampleCache
from ..audio_io import load_audio
from ..devices import OutputDevice
from ..models import AudioLoadError, Song
from ..scanner import LibraryScanner

logger = logging.getLogger(__name__)


def run(
    scanner: LibraryScanner,
    cache: ResampleCache,
    device: OutputDevice,
    *,
    titles: Optional[Sequence[str]] = None,
) -> tuple[int, int]:
    """Build device-rate cache entries; returns ``(prepared, failed)``."""
    songs: list[Song] = []
    failed = 0
    if titles:
        for title in titles:
            song = scanner.find_by_title(title)
            if song is None:
                logger.error("Song not found in library: %s", title)
                failed += 1
                continue
            songs.append(song)
    else:
        songs = scanner.list_songs()

    prepared = 0
    for song in songs:
        try:
            clip = load_audio(song.path)
        except AudioLoadError as exc:
            logger.error("%s", exc)
            failed += 1
            continue
        _, rate = device.determine_sample_rate(clip.sample_rate)
        if cache.has(song, rate):
            logger.info("Already cached: %s @ %d Hz", song.title, rate)
        else:
            cache.prepare(song, clip, rate)
            logger.info("Prepared %s @ %d Hz", song.title, rate)
        prepared += 1
    return prepared, failed
