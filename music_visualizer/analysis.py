from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import numpy as np

from .config import VisualSettings

EPSILON = 1e-10


@dataclass(slots=True)
class SpectrumFrame:
    bars: np.ndarray
    rms: float
    beat: bool
    energy: float


class SpectrumAnalyzer:
    """Turns the latest played samples into smoothed, log-spaced band levels.

    Bands are spaced logarithmically between ``min_frequency`` and
    ``max_frequency`` (clamped to Nyquist), levels are dB above ``floor_db``
    scaled to [0, 1]. A beat is flagged when the instant energy beats the
    rolling average by ``beat_sensitivity``.
    """

    def __init__(self, settings: VisualSettings, sample_rate: int) -> None:
        self.settings = settings
        self.sample_rate = sample_rate
        self._window = np.hanning(settings.fft_size).astype(np.float32)
        self._window_gain = float(self._window.sum()) / 2.0
        self._edges = self._band_edges()
        self._levels = np.zeros(settings.bar_count, dtype=np.float32)
        self._history: deque[float] = deque(maxlen=settings.beat_history)

    @property
    def band_edges(self) -> np.ndarray:
        return self._edges.copy()

    def set_sample_rate(self, sample_rate: int) -> None:
        if sample_rate == self.sample_rate:
            return
        self.sample_rate = sample_rate
        self._edges = self._band_edges()
        self.reset()

    def reset(self) -> None:
        self._levels[:] = 0.0
        self._history.clear()

    def analyze(self, samples: np.ndarray) -> SpectrumFrame:
        size = self.settings.fft_size
        window = np.zeros(size, dtype=np.float32)
        data = np.asarray(samples, dtype=np.float32).reshape(-1)[-size:]
        window[size - data.shape[0]:] = data

        rms = float(np.sqrt(np.mean(window * window)))
        spectrum = np.abs(np.fft.rfft(window * self._window)) / self._window_gain
        raw = self._band_levels(spectrum)
        levels = self._smooth(raw)

        energy = rms * rms
        beat = self._detect_beat(energy)
        return SpectrumFrame(bars=levels.copy(), rms=rms, beat=beat, energy=energy)

    def _band_edges(self) -> np.ndarray:
        nyquist = self.sample_rate / 2.0
        high = min(self.settings.max_frequency, nyquist)
        low = min(max(self.settings.min_frequency, 1.0), high / 2.0)
        hz = np.geomspace(low, high, self.settings.bar_count + 1)
        bins = np.round(hz * self.settings.fft_size / self.sample_rate).astype(int)
        max_bin = self.settings.fft_size // 2
        bins = np.clip(bins, 1, max_bin)
        # every band needs at least one bin
        for index in range(1, bins.shape[0]):
            if bins[index] <= bins[index - 1]:
                bins[index] = min(bins[index - 1] + 1, max_bin + 1)
        return bins

    def _band_levels(self, spectrum: np.ndarray) -> np.ndarray:
        levels = np.zeros(self.settings.bar_count, dtype=np.float32)
        floor = self.settings.floor_db
        for index in range(self.settings.bar_count):
            lo, hi = self._edges[index], self._edges[index + 1]
            band = spectrum[lo:hi]
            if band.size == 0:
                continue
            magnitude = float(np.max(band))
            db = 20.0 * np.log10(magnitude + EPSILON)
            levels[index] = np.clip((db - floor) / -floor, 0.0, 1.0)
        return levels

    def _smooth(self, raw: np.ndarray) -> np.ndarray:
        rising = raw > self._levels
        factor = np.where(rising, self.settings.attack, self.settings.decay).astype(np.float32)
        self._levels += (raw - self._levels) * factor
        self._levels[self._levels < 1e-4] = 0.0
        return self._levels

    def _detect_beat(self, energy: float) -> bool:
        history = self._history
        beat = False
        if len(history) >= max(4, history.maxlen // 4) and energy > EPSILON:
            average = sum(history) / len(history)
            beat = energy > average * self.settings.beat_sensitivity
        history.append(energy)
        return beat
