import tempfile
import unittest
from pathlib import Path

import numpy as np

from music_visualizer.audio_cache import ResampleCache
from music_visualizer.audio_io import load_audio
from music_visualizer.models import AudioClip, Song


def _tone(rate: int, seconds: float = 0.2) -> AudioClip:
    t = np.arange(int(rate * seconds)) / float(rate)
    tone = 0.3 * np.sin(2 * np.pi * 220 * t)
    return AudioClip(np.stack([tone, tone], axis=1), rate)


class TestResampleCache(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.cache = ResampleCache(self.tmp / "music_cache")
        self.song = Song(path=self.tmp / "my-song.wav", title="My Song")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_cache_path_names_file_title_and_rate(self) -> None:
        path = self.cache.cache_path(self.song, 44100)
        self.assertEqual(path.parent, self.tmp / "music_cache")
        self.assertTrue(path.name.startswith("My Song-"))
        self.assertTrue(path.name.endswith("-44100Hz.wav"))

    def test_cache_key_ignores_tag_title(self) -> None:
        tagged = Song(path=self.song.path, title="../../escape")
        self.assertEqual(self.cache.cache_path(tagged, 44100), self.cache.cache_path(self.song, 44100))

    def test_same_title_in_different_folders_gets_separate_entries(self) -> None:
        first = Song(path=self.tmp / "a" / "intro.wav", title="Intro")
        second = Song(path=self.tmp / "b" / "intro.wav", title="Intro")
        loud = AudioClip(np.full((10, 2), 0.5), 44100)
        quiet = AudioClip(np.full((10, 2), -0.5), 44100)

        self.cache.prepare(first, loud, 44100)
        prepared = self.cache.prepare(second, quiet, 44100)

        self.assertLess(float(prepared.samples.max()), 0.0)
        self.assertNotEqual(self.cache.cache_path(first, 44100), self.cache.cache_path(second, 44100))
        self.assertEqual(len(self.cache.entries()), 2)

    def test_prepare_resamples_and_writes_cache(self) -> None:
        prepared = self.cache.prepare(self.song, _tone(22050), 44100)

        self.assertEqual(prepared.sample_rate, 44100)
        self.assertEqual(prepared.frames, 8820)
        cached = self.cache.cache_path(self.song, 44100)
        self.assertTrue(cached.exists())
        self.assertEqual(load_audio(cached).sample_rate, 44100)

    def test_same_rate_is_still_copied_into_cache(self) -> None:
        self.cache.prepare(self.song, _tone(44100), 44100)
        self.assertTrue(self.cache.has(self.song, 44100))

    def test_existing_cache_entry_wins(self) -> None:
        first = self.cache.prepare(self.song, _tone(22050), 44100)
        other = AudioClip(np.zeros((10, 2)), 22050)

        second = self.cache.prepare(self.song, other, 44100)

        self.assertEqual(second.frames, first.frames)
        self.assertGreater(float(np.max(np.abs(second.samples))), 0.1)

    def test_corrupt_cache_entry_is_rebuilt(self) -> None:
        path = self.cache.cache_path(self.song, 44100)
        path.parent.mkdir(parents=True)
        path.write_bytes(b"garbage")

        with self.assertLogs("music_visualizer.audio_cache", level="WARNING"):
            prepared = self.cache.prepare(self.song, _tone(22050), 44100)

        self.assertEqual(prepared.sample_rate, 44100)
        self.assertEqual(load_audio(path).frames, prepared.frames)

    def test_unwritable_cache_is_only_a_warning(self) -> None:
        blocker = self.tmp / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        cache = ResampleCache(blocker)

        with self.assertLogs("music_visualizer.audio_cache", level="WARNING") as logs:
            prepared = cache.prepare(self.song, _tone(22050), 44100)

        self.assertEqual(prepared.sample_rate, 44100)
        self.assertIn("Could not save cache", "\n".join(logs.output))

    def test_clear_removes_entries(self) -> None:
        self.cache.prepare(self.song, _tone(22050), 44100)
        self.cache.prepare(self.song, _tone(22050), 48000)
        self.assertEqual(len(self.cache.entries()), 2)
        self.assertEqual(self.cache.clear(), 2)
        self.assertEqual(self.cache.entries(), [])


if __name__ == "__main__":
    unittest.main()
