from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from ..controller import MusicController
from ..models import Song
from .button import Button, Point, Rect
from .colors import BLACK, BLUE, DARK_GRAY, GREEN, LIGHT_BLUE, RED, SLATE, WHITE
from .draw import RectShape, Shape, TextShape

logger = logging.getLogger(__name__)

PLAY_TAG = "play_button"
BACK_TAG = "back_button"
SONG_TAG_PREFIX = "song_"

BUTTON_HEIGHT = 50.0
SONG_SPACING = 60.0
SONG_LIST_OFFSET = 80.0


class Menu:
    """Control panel: a song picker, then play/pause and back once a song is loaded.

    Mouse presses act on the press edge only; holding the button down does
    not retrigger. The same applies to keys.
    """

    def __init__(self, menu_rect: Rect, controller: MusicController) -> None:
        self.menu_rect = menu_rect
        self.controller = controller
        self.buttons: list[Button] = [
            Button(
                "PLAY",
                PLAY_TAG,
                Rect(menu_rect.x, menu_rect.y - menu_rect.h * 0.3, menu_rect.w * 0.8, BUTTON_HEIGHT),
            ),
            Button(
                "BACK",
                BACK_TAG,
                Rect(menu_rect.x, menu_rect.y + menu_rect.h * 0.3, menu_rect.w * 0.8, BUTTON_HEIGHT),
            ),
        ]
        self._songs: list[Song] = []
        self._song_buttons_created = False
        self._was_mouse_pressed = False
        self._keys_down: set[str] = set()

    @property
    def is_playing(self) -> bool:
        return self.controller.is_playing

    @property
    def showing_song_select(self) -> bool:
        return not self.controller.has_song

    def invalidate_songs(self) -> None:
        self._song_buttons_created = False

    def resize(self, menu_rect: Rect) -> None:
        self.menu_rect = menu_rect
        play = self.get_button(PLAY_TAG)
        back = self.get_button(BACK_TAG)
        if play is not None:
            play.rect = Rect(menu_rect.x, menu_rect.y - menu_rect.h * 0.3, menu_rect.w * 0.8, BUTTON_HEIGHT)
        if back is not None:
            back.rect = Rect(menu_rect.x, menu_rect.y + menu_rect.h * 0.3, menu_rect.w * 0.8, BUTTON_HEIGHT)
        self._song_buttons_created = False

    def update(self, mouse: Point, mouse_pressed: bool, keys: Iterable[str] = ()) -> None:
        self._handle_keys({key.upper() for key in keys})

        if self.showing_song_select and not self._song_buttons_created:
            self.create_song_buttons()

        self._sync_visibility()
        play_button = self.get_button(PLAY_TAG)
        if play_button is not None:
            play_button.set_label("PAUSE" if self.is_playing else "PLAY")

        if mouse_pressed and not self._was_mouse_pressed:
            button = self.button_at(mouse)
            if button is not None:
                self._activate(button)
        self._was_mouse_pressed = mouse_pressed

    def button_at(self, point: Point) -> Optional[Button]:
        for button in self.buttons:
            if button.contains(point):
                return button
        return None

    def get_button(self, tag: str) -> Optional[Button]:
        for button in self.buttons:
            if button.tag == tag:
                return button
        return None

    def song_buttons(self) -> list[Button]:
        return [button for button in self.buttons if button.tag.startswith(SONG_TAG_PREFIX)]

    def create_song_buttons(self) -> None:
        self._remove_song_buttons()
        self._songs = self.controller.songs()
        width = self.menu_rect.w * 0.7
        start_y = self.menu_rect.top + SONG_LIST_OFFSET
        for index, song in enumerate(self._songs):
            rect = Rect(self.menu_rect.x, start_y + SONG_SPACING * index, width, BUTTON_HEIGHT)
            self.buttons.append(Button(song.title, f"{SONG_TAG_PREFIX}{index}", rect))
        self._song_buttons_created = True
        self._sync_visibility()
        logger.debug("Created %d song buttons", len(self._songs))

    def draw_commands(self) -> list[Shape]:
        shapes: list[Shape] = [RectShape(self.menu_rect, DARK_GRAY)]
        if self.showing_song_select:
            shapes.extend(self._song_select_shapes())
        else:
            shapes.extend(self._playback_shapes())
        return shapes

    def _activate(self, button: Button) -> None:
        if button.tag == PLAY_TAG:
            self.controller.toggle_play()
        elif button.tag == BACK_TAG:
            self.controller.unload()
            self._song_buttons_created = False
        elif button.tag.startswith(SONG_TAG_PREFIX):
            song = self._song_for(button)
            if song is None:
                return
            self.controller.select(song)
            self._remove_song_buttons()
            self._song_buttons_created = False
        self._sync_visibility()

    def _handle_keys(self, keys: set[str]) -> None:
        pressed = keys - self._keys_down
        self._keys_down = keys
        if "D" in pressed:
            for line in self.controller.device.describe():
                logger.info("%s", line)
        if "SPACE" in pressed and not self.showing_song_select:
            self.controller.toggle_play()
        if "RIGHT" in pressed:
            self.controller.next_track()
        if "LEFT" in pressed:
            self.controller.previous_track()

    def _song_for(self, button: Button) -> Optional[Song]:
        try:
            index = int(button.tag[len(SONG_TAG_PREFIX):])
        except ValueError:
            return None
        if 0 <= index < len(self._songs):
            return self._songs[index]
        return None

    def _remove_song_buttons(self) -> None:
        self.buttons = [b for b in self.buttons if not b.tag.startswith(SONG_TAG_PREFIX)]

    def _sync_visibility(self) -> None:
        select = self.showing_song_select
        for button in self.buttons:
            if button.tag.startswith(SONG_TAG_PREFIX):
                button.is_visible = select
            else:
                button.is_visible = not select

    def _song_select_shapes(self) -> list[Shape]:
        title_rect = Rect(self.menu_rect.x, self.menu_rect.top + 30.0, self.menu_rect.w, 30.0)
        shapes: list[Shape] = [TextShape("SELECT A SONG", title_rect, WHITE, 24)]
        for button in self.song_buttons():
            if not button.is_visible:
                continue
            shapes.append(RectShape(button.rect, SLATE, LIGHT_BLUE, 2.0))
            shapes.append(TextShape(button.label, _text_rect(button.rect), WHITE, 20))
        return shapes

    def _playback_shapes(self) -> list[Shape]:
        shapes: list[Shape] = []
        play = self.get_button(PLAY_TAG)
        if play is not None and play.is_visible:
            shapes.append(RectShape(play.rect, GREEN if self.is_playing else RED))
            shapes.append(TextShape(play.label, _text_rect(play.rect), BLACK, 20))
        back = self.get_button(BACK_TAG)
        if back is not None and back.is_visible:
            shapes.append(RectShape(back.rect, BLUE))
            shapes.append(TextShape(back.label, _text_rect(back.rect), BLACK, 20))
        current = self.controller.current
        if current is not None:
            text_rect = Rect(self.menu_rect.x, self.menu_rect.top + 60.0, self.menu_rect.w, 30.0)
            shapes.append(TextShape(f"Now Playing: {current.title}", text_rect, WHITE, 20))
        return shapes


def _text_rect(rect: Rect) -> Rect:
    return Rect(rect.x, rect.y, max(0.0, rect.w - 20.0), rect.h)
