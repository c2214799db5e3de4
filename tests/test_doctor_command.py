import tempfile
import unittest
from pathlib import Path

import numpy as np
import soundfile as sf

from music_visualizer.commands.doctor import run
from music_visualizer.config import CacheSettings, LibrarySettings, Settings


class _Device:
    def __init__(self, info: dict | None) -> None:
        self._info = info

    def info(self) -> dict | None:
        return self._info


FAKE_OUT = {"name": "Fake Out", "default_samplerate": 48000.0}


class TestDoctorCommand(unittest.TestCase):
    def _settings(self, tmp: Path, root: Path) -> Settings:
        return Settings(
            library=LibrarySettings(root=root),
            cache=CacheSettings(directory=tmp / "cache", database_path=tmp / "cache" / "db.sqlite3"),
        )

    def test_reports_library_songs_and_device(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            root = tmp / "music"
            root.mkdir()
            sf.write(str(root / "a-song.wav"), np.zeros((16, 2), dtype=np.float32), 8000)

            report = run(self._settings(tmp, root), device=_Device(FAKE_OUT))  # type: ignore[arg-type]

            self.assertTrue(report.ok)
            joined = "\n".join(report.checks)
            self.assertIn("Music library: OK", joined)
            self.assertIn("1 song(s)", joined)
            self.assertIn("Playlist database: OK", joined)
            self.assertIn("Output device: OK (Fake Out @ 48000 Hz)", joined)

    def test_missing_library_is_an_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            report = run(self._settings(tmp, tmp / "missing"), device=_Device(FAKE_OUT))  # type: ignore[arg-type]
            self.assertFalse(report.ok)
            self.assertIn("Music library: ERROR", "\n".join(report.checks))

    def test_empty_library_and_no_device_are_warnings(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            root = tmp / "music"
            root.mkdir()
            report = run(self._settings(tmp, root), device=_Device(None))  # type: ignore[arg-type]
            self.assertTrue(report.ok)
            joined = "\n".join(report.checks)
            self.assertIn("Music library: WARNING", joined)
            self.assertIn("Output device: WARNING", joined)


if __name__ == "__main__":
    unittest.main()
