from __future__ import annotations

import logging
from math import gcd

import numpy as np
from scipy.signal import resample_poly

from .models import AudioClip

logger = logging.getLogger(__name__)


def resample_ratio(from_rate: int, to_rate: int) -> tuple[int, int]:
    g = gcd(int(from_rate), int(to_rate))
    return int(to_rate) // g, int(from_rate) // g


def resample_clip(clip: AudioClip, to_rate: int) -> AudioClip:
    """Polyphase-resample every channel of ``clip`` to ``to_rate``."""
    if to_rate <= 0:
        raise ValueError(f"Invalid target sample rate: {to_rate}")
    if clip.sample_rate == to_rate:
        return clip
    if clip.is_empty:
        return AudioClip(clip.samples, to_rate)
    up, down = resample_ratio(clip.sample_rate, to_rate)
    logger.info("Resampling from %d Hz to %d Hz...", clip.sample_rate, to_rate)
    resampled = resample_poly(clip.samples, up, down, axis=0)
    resampled = np.clip(resampled, -1.0, 1.0).astype(np.float32, copy=False)
    logger.info("Resampled to %d frames.", resampled.shape[0])
    return AudioClip(resampled, to_rate)
