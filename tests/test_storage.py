import tempfile
import unittest
from pathlib import Path

from music_visualizer.models import PlaylistError
from music_visualizer.storage import LibraryStore


class TestLibraryStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = LibraryStore(Path(self._tmp.name) / "cache" / "library.sqlite3")

    def tearDown(self) -> None:
        self.store.close()
        self._tmp.cleanup()

    def test_create_and_list_playlists(self) -> None:
        self.store.create_playlist("Road Trip")
        self.store.create_playlist("ambient")
        self.store.add_track("Road Trip", "/music/a.wav")
        self.assertEqual(self.store.list_playlists(), [("ambient", 0), ("Road Trip", 1)])

    def test_duplicate_and_blank_names_are_rejected(self) -> None:
        self.store.create_playlist("Mix")
        with self.assertRaises(PlaylistError):
            self.store.create_playlist("Mix")
        with self.assertRaises(PlaylistError):
            self.store.create_playlist("   ")

    def test_tracks_keep_insertion_order(self) -> None:
        self.store.create_playlist("Mix")
        self.assertEqual(self.store.add_track("Mix", "/music/a.wav"), 0)
        self.assertEqual(self.store.add_track("Mix", Path("/music/b.wav")), 1)
        self.assertEqual(self.store.add_track("Mix", "/music/a.wav"), 2)
        self.assertEqual(
            self.store.playlist_tracks("Mix"),
            [Path("/music/a.wav"), Path("/music/b.wav"), Path("/music/a.wav")],
        )

    def test_remove_track_renumbers_positions(self) -> None:
        self.store.create_playlist("Mix")
        for name in ("a", "b", "c"):
            self.store.add_track("Mix", f"/music/{name}.wav")
        self.store.remove_track("Mix", 1)
        self.assertEqual(
            self.store.playlist_tracks("Mix"), [Path("/music/a.wav"), Path("/music/c.wav")]
        )
        self.assertEqual(self.store.add_track("Mix", "/music/d.wav"), 2)
        with self.assertRaises(PlaylistError):
            self.store.remove_track("Mix", 7)

    def test_unknown_playlist_raises(self) -> None:
        with self.assertRaises(PlaylistError):
            self.store.add_track("Nope", "/music/a.wav")
        with self.assertRaises(PlaylistError):
            self.store.playlist_tracks("Nope")
        with self.assertRaises(PlaylistError):
            self.store.delete_playlist("Nope")

    def test_delete_removes_tracks(self) -> None:
        self.store.create_playlist("Mix")
        self.store.add_track("Mix", "/music/a.wav")
        self.store.delete_playlist("Mix")
        self.assertEqual(self.store.list_playlists(), [])
        self.store.create_playlist("Mix")
        self.assertEqual(self.store.playlist_tracks("Mix"), [])

    def test_play_history_is_most_recent_first(self) -> None:
        self.store.record_play("/music/a.wav")
        self.store.record_play("/music/b.wav")
        plays = self.store.recent_plays(limit=5)
        self.assertEqual([path for path, _ in plays], ["/music/b.wav", "/music/a.wav"])
        self.assertEqual(len(self.store.recent_plays(limit=1)), 1)
        self.store.clear_history()
        self.assertEqual(self.store.recent_plays(), [])

    def test_data_survives_reopen(self) -> None:
        self.store.create_playlist("Mix")
        self.store.add_track("Mix", "/music/a.wav")
        self.store.close()
        self.store = LibraryStore(Path(self._tmp.name) / "cache" / "library.sqlite3")
        self.assertEqual(self.store.playlist_tracks("Mix"), [Path("/music/a.wav")])


if __name__ == "__main__":
    unittest.main()
