from __future__ import annotations

import logging
from dataclasses import dataclass

from .audio_cache import ResampleCache
from .config import Settings
from .controller import MusicController
from .devices import OutputDevice
from .player import Player
from .scanner import LibraryScanner
from .storage import LibraryStore

logger = logging.getLogger(__name__)


@dataclass
class VisualizerApp:
    settings: Settings
    store: LibraryStore
    scanner: LibraryScanner
    cache: ResampleCache
    device: OutputDevice
    player: Player
    controller: MusicController

    @classmethod
    def create(
        cls,
        settings: Settings,
        *,
        device: OutputDevice | None = None,
        player: Player | None = None,
    ) -> "VisualizerApp":
        store = LibraryStore(settings.cache.database_path)
        scanner = LibraryScanner(settings.library)
        cache = ResampleCache(settings.cache.directory)
        device = device or OutputDevice(settings.playback)
        player = player or Player(settings.playback)
        controller = MusicController(scanner, cache, device, player, store=store)
        return cls(
            settings=settings,
            store=store,
            scanner=scanner,
            cache=cache,
            device=device,
            player=player,
            controller=controller,
        )

    def close(self) -> None:
        try:
            self.player.pause()
        except Exception as exc:
            logger.warning("Failed to stop playback cleanly: %s", exc)
        self.store.close()
