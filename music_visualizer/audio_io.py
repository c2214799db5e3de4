from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import soundfile as sf

from .models import AudioClip, AudioLoadError

logger = logging.getLogger(__name__)

WAV_SUBTYPE = "PCM_16"


def load_audio(path: Path) -> AudioClip:
    """Decode ``path`` into float32 frames in [-1, 1]."""
    try:
        samples, sample_rate = sf.read(str(path), dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, OSError) as exc:
        raise AudioLoadError(f"Failed to load audio file '{path}': {exc}") from exc
    logger.debug(
        "Loaded %s (%d frames, %d Hz, %d ch)",
        path,
        samples.shape[0],
        sample_rate,
        samples.shape[1],
    )
    return AudioClip(samples, int(sample_rate))


def save_wav(path: Path, clip: AudioClip) -> None:
    """Write ``clip`` as 16-bit PCM, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        data = np.clip(clip.samples, -1.0, 1.0)
        sf.write(str(path), data, clip.sample_rate, subtype=WAV_SUBTYPE, format="WAV")
    except (sf.LibsndfileError, RuntimeError, OSError) as exc:
        raise AudioLoadError(f"Could not save '{path}': {exc}") from exc
