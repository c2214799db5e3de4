import unittest

import numpy as np

from music_visualizer.models import AudioClip
from music_visualizer.resample import resample_clip, resample_ratio


class TestResample(unittest.TestCase):
    def test_ratio_is_reduced(self) -> None:
        self.assertEqual(resample_ratio(48000, 44100), (147, 160))
        self.assertEqual(resample_ratio(22050, 44100), (2, 1))

    def test_same_rate_returns_same_clip(self) -> None:
        clip = AudioClip(np.zeros((10, 2)), 44100)
        self.assertIs(resample_clip(clip, 44100), clip)

    def test_empty_clip_takes_new_rate(self) -> None:
        clip = AudioClip.empty(22050, 2)
        result = resample_clip(clip, 44100)
        self.assertEqual(result.sample_rate, 44100)
        self.assertTrue(result.is_empty)

    def test_stereo_downsample_keeps_channels_and_duration(self) -> None:
        t = np.arange(48000) / 48000.0
        tone = 0.5 * np.sin(2 * np.pi * 440 * t)
        clip = AudioClip(np.stack([tone, tone * 0.5], axis=1), 48000)

        result = resample_clip(clip, 44100)

        self.assertEqual(result.sample_rate, 44100)
        self.assertEqual(result.samples.shape, (44100, 2))
        self.assertEqual(result.samples.dtype, np.float32)
        self.assertLessEqual(float(np.max(np.abs(result.samples))), 1.0)
        # Second channel stays half the first one away from the edges.
        middle = slice(1000, 43000)
        np.testing.assert_allclose(
            result.samples[middle, 1], result.samples[middle, 0] * 0.5, atol=1e-3
        )

    def test_invalid_rate(self) -> None:
        with self.assertRaises(ValueError):
            resample_clip(AudioClip(np.zeros(4), 8000), 0)


if __name__ == "__main__":
    unittest.main()
