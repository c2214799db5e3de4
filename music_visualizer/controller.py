from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .audio_cache import ResampleCache
from .audio_io import load_audio
from .devices import OutputDevice
from .models import AudioLoadError, Song
from .player import Player
from .scanner import LibraryScanner
from .storage import LibraryStore

logger = logging.getLogger(__name__)


class MusicController:
    """Owns song selection, the play queue and the player state."""

    def __init__(
        self,
        scanner: LibraryScanner,
        cache: ResampleCache,
        device: OutputDevice,
        player: Player,
        store: Optional[LibraryStore] = None,
    ) -> None:
        self.scanner = scanner
        self.cache = cache
        self.device = device
        self.player = player
        self.store = store
        self.current: Optional[Song] = None
        self._queue: list[Song] = []
        self._queue_index = -1
        self._wants_play = False

    @property
    def is_playing(self) -> bool:
        return self._wants_play and self.player.is_playing

    @property
    def has_song(self) -> bool:
        return self.current is not None and not self.player.is_empty

    @property
    def queue(self) -> list[Song]:
        return list(self._queue)

    def songs(self) -> list[Song]:
        return self.scanner.list_songs()

    def select(self, song_or_title: Song | str) -> bool:
        song = self._resolve(song_or_title)
        if song is None:
            logger.error("Song not found in library: %s", song_or_title)
            self._clear_current()
            return False
        try:
            clip = load_audio(song.path)
        except AudioLoadError as exc:
            logger.error("%s", exc)
            self._clear_current()
            return False
        _, final_rate = self.device.determine_sample_rate(clip.sample_rate)
        prepared = self.cache.prepare(song, clip, final_rate)
        self.player.load(prepared)
        self._wants_play = False
        self.current = song
        logger.info("Loaded %s (%.1fs at %d Hz)", song.title, prepared.duration_seconds, final_rate)
        return not prepared.is_empty

    def set_playing(self, should_play: bool) -> bool:
        if should_play and not self.has_song:
            self._wants_play = False
            return False
        was_playing = self.player.is_playing
        from_start = self.player.position_frames == 0 or self.player.finished
        self.player.update(should_play)
        self._wants_play = should_play and self.player.is_playing
        if self._wants_play and not was_playing and from_start:
            self._record_play()
        return self._wants_play

    def toggle_play(self) -> bool:
        return self.set_playing(not self.is_playing)

    def unload(self) -> None:
        self._clear_current()
        self._queue = []
        self._queue_index = -1

    def queue_songs(self, songs: Sequence[Song], *, start: int = 0) -> bool:
        self._queue = list(songs)
        if not self._queue:
            self._queue_index = -1
            return False
        return self._play_queue_index(max(0, min(start, len(self._queue) - 1)))

    def queue_playlist(self, name: str) -> bool:
        if self.store is None:
            logger.error("No playlist store configured")
            return False
        songs = [self.scanner.reader.read(path) for path in self.store.playlist_tracks(name)]
        missing = [song.path for song in songs if not song.path.exists()]
        for path in missing:
            logger.warning("Playlist %s references missing file %s", name, path)
        return self.queue_songs([song for song in songs if song.path.exists()])

    def next_track(self) -> bool:
        if not self._queue:
            return False
        if self._queue_index + 1 >= len(self._queue):
            self.set_playing(False)
            return False
        return self._play_queue_index(self._queue_index + 1)

    def previous_track(self) -> bool:
        if not self._queue:
            return False
        if self.player.position_seconds > 3.0 or self._queue_index <= 0:
            self.player.seek(0.0)
            return True
        return self._play_queue_index(self._queue_index - 1)

    def tick(self) -> None:
        """Advance the queue once the current clip ran out."""
        if not self._wants_play or not self.player.finished:
            return
        if self._queue and self._queue_index + 1 < len(self._queue):
            self.next_track()
            return
        self.player.stop()
        self._wants_play = False

    def _play_queue_index(self, index: int) -> bool:
        self._queue_index = index
        if not self.select(self._queue[index]):
            return False
        return self.set_playing(True)

    def _resolve(self, song_or_title: Song | str) -> Optional[Song]:
        if isinstance(song_or_title, Song):
            return song_or_title
        candidate = Path(song_or_title)
        if candidate.suffix and candidate.exists():
            return self.scanner.reader.read(candidate)
        return self.scanner.find_by_title(song_or_title)

    def _clear_current(self) -> None:
        self.player.unload()
        self.current = None
        self._wants_play = False

    def _record_play(self) -> None:
        if self.store is None or self.current is None:
            return
        self.store.record_play(self.current.path)
