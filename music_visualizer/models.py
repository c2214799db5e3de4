from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import numpy as np


@dataclass(slots=True)
class Song:
    path: Path
    title: str
    artist: Optional[str] = None
    album: Optional[str] = None
    duration_seconds: Optional[float] = None
    sample_rate: Optional[int] = None
    channels: Optional[int] = None

    @property
    def filename(self) -> str:
        return self.path.name

    def to_record(self) -> Dict[str, object]:
        return {
            "path": str(self.path),
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "duration_seconds": (
                round(self.duration_seconds, 3) if self.duration_seconds is not None else None
            ),
            "sample_rate": self.sample_rate,
            "channels": self.channels,
        }


@dataclass(slots=True)
class AudioClip:
    """Decoded PCM audio; ``samples`` is float32 shaped ``(frames, channels)``."""

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        samples = np.asarray(self.samples, dtype=np.float32)
        if samples.ndim == 1:
            samples = samples.reshape(-1, 1)
        if samples.ndim != 2:
            raise ValueError(f"Expected 1-D or 2-D samples, got shape {samples.shape}")
        self.samples = samples

    @classmethod
    def empty(cls, sample_rate: int = 44100, channels: int = 2) -> "AudioClip":
        return cls(np.zeros((0, channels), dtype=np.float32), sample_rate)

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])

    @property
    def channels(self) -> int:
        return int(self.samples.shape[1])

    @property
    def is_empty(self) -> bool:
        return self.frames == 0

    @property
    def duration_seconds(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.frames / float(self.sample_rate)

    def interleaved(self) -> np.ndarray:
        return self.samples.reshape(-1)

    def mono(self) -> np.ndarray:
        if self.channels == 1:
            return self.samples[:, 0]
        return self.samples.mean(axis=1).astype(np.float32, copy=False)


class MusicVisualizerError(Exception):
    """Base class for errors raised by this package."""


class AudioLoadError(MusicVisualizerError):
    """Raised when audio cannot be decoded or written."""


class PlaybackError(MusicVisualizerError):
    """Raised when the output device refuses a stream."""


class PlaylistError(MusicVisualizerError):
    """Raised for unknown or conflicting playlists."""
