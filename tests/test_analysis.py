import unittest

import numpy as np

from music_visualizer.analysis import SpectrumAnalyzer
from music_visualizer.config import VisualSettings

RATE = 8000
SIZE = 1024


def _sine(freq: float, amplitude: float) -> np.ndarray:
    t = np.arange(SIZE) / float(RATE)
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


class TestSpectrumAnalyzer(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = VisualSettings(bar_count=16, fft_size=SIZE, max_frequency=4000.0)
        self.analyzer = SpectrumAnalyzer(self.settings, RATE)

    def test_band_edges_are_strictly_increasing_and_within_nyquist(self) -> None:
        edges = self.analyzer.band_edges
        self.assertEqual(edges.shape[0], 17)
        self.assertTrue(np.all(np.diff(edges) > 0))
        self.assertGreaterEqual(int(edges[0]), 1)
        self.assertLessEqual(int(edges[-1]), SIZE // 2 + 1)

    def test_silence_gives_flat_zero_frame(self) -> None:
        frame = self.analyzer.analyze(np.zeros(SIZE, dtype=np.float32))
        self.assertEqual(frame.bars.shape, (16,))
        self.assertTrue(np.all(frame.bars == 0.0))
        self.assertEqual(frame.rms, 0.0)
        self.assertFalse(frame.beat)

    def test_sine_peaks_in_matching_band(self) -> None:
        target_bin = int(1000 * SIZE / RATE)
        edges = self.analyzer.band_edges
        expected = int(np.searchsorted(edges, target_bin, side="right") - 1)

        frame = self.analyzer.analyze(_sine(1000.0, 0.5))

        self.assertEqual(int(np.argmax(frame.bars)), expected)
        self.assertAlmostEqual(frame.rms, 0.5 / np.sqrt(2), places=2)
        self.assertLessEqual(float(frame.bars.max()), 1.0)

    def test_short_input_is_zero_padded(self) -> None:
        frame = self.analyzer.analyze(_sine(1000.0, 0.5)[:100])
        self.assertEqual(frame.bars.shape, (16,))
        self.assertGreater(float(frame.bars.max()), 0.0)

    def test_levels_rise_fast_and_fall_slowly(self) -> None:
        loud = self.analyzer.analyze(_sine(1000.0, 0.8)).bars.copy()
        quiet = self.analyzer.analyze(np.zeros(SIZE, dtype=np.float32)).bars
        peak = int(np.argmax(loud))
        self.assertGreater(quiet[peak], 0.0)
        self.assertLess(quiet[peak], loud[peak])
        self.assertAlmostEqual(float(quiet[peak]), float(loud[peak]) * 0.85, places=5)

    def test_beat_on_energy_jump(self) -> None:
        quiet = _sine(200.0, 0.02)
        for _ in range(20):
            self.assertFalse(self.analyzer.analyze(quiet).beat)
        self.assertTrue(self.analyzer.analyze(_sine(200.0, 0.8)).beat)

    def test_no_beat_before_history_fills(self) -> None:
        self.analyzer.analyze(_sine(200.0, 0.02))
        self.assertFalse(self.analyzer.analyze(_sine(200.0, 0.8)).beat)

    def test_sample_rate_change_rebuilds_bands(self) -> None:
        before = self.analyzer.band_edges
        self.analyzer.set_sample_rate(44100)
        self.assertFalse(np.array_equal(before, self.analyzer.band_edges))


if __name__ == "__main__":
    unittest.main()
