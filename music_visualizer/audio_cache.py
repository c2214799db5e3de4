from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path

from .audio_io import load_audio, save_wav
from .models import AudioClip, AudioLoadError, Song
from .resample import resample_clip
from .titles import title_from_filename

logger = logging.getLogger(__name__)


class ResampleCache:
    """Keeps device-rate copies of songs so resampling only happens once per rate."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    @staticmethod
    def cache_key(song: Song) -> str:
        """File-derived title plus a short digest of the resolved source path."""
        stem = title_from_filename(song.path.name)
        stem = re.sub(r"[\\/]+", "-", stem)
        stem = re.sub(r"\.{2,}", ".", stem).strip(" .") or "song"
        digest = hashlib.sha1(str(song.path.expanduser().resolve()).encode("utf-8")).hexdigest()[:8]
        return f"{stem}-{digest}"

    def cache_path(self, song: Song, sample_rate: int) -> Path:
        return self.directory / f"{self.cache_key(song)}-{int(sample_rate)}Hz.wav"

    def has(self, song: Song, sample_rate: int) -> bool:
        return self.cache_path(song, sample_rate).exists()

    def load_cached(self, song: Song, sample_rate: int) -> AudioClip | None:
        path = self.cache_path(song, sample_rate)
        if not path.exists():
            return None
        try:
            clip = load_audio(path)
        except AudioLoadError as exc:
            logger.warning("%s. Will process original file...", exc)
            return None
        if clip.sample_rate != sample_rate:
            logger.warning(
                "Cached file %s has rate %d Hz, expected %d Hz; rebuilding",
                path,
                clip.sample_rate,
                sample_rate,
            )
            return None
        return clip

    def prepare(self, song: Song, clip: AudioClip, final_rate: int) -> AudioClip:
        cached = self.load_cached(song, final_rate)
        if cached is not None:
            logger.debug("Using cached audio for %s at %d Hz", song.title, final_rate)
            return cached
        processed = resample_clip(clip, final_rate)
        if processed.is_empty:
            return processed
        path = self.cache_path(song, final_rate)
        try:
            save_wav(path, processed)
        except AudioLoadError as exc:
            logger.warning("Could not save cache to '%s': %s", path, exc)
        return processed

    def entries(self) -> list[Path]:
        if not self.directory.exists():
            return []
        return sorted(path for path in self.directory.glob("*Hz.wav") if path.is_file())

    def clear(self) -> int:
        removed = 0
        for path in self.entries():
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
        return removed
