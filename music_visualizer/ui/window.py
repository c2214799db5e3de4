"""
Qt window hosting the menu panel and the spectrum visual.

The render loop is a QTimer at the configured frame rate. Each tick polls the
player for the samples behind the playhead; the audio callback thread never
talks to Qt directly.
"""

from __future__ import annotations

import logging
import queue
import sys
from pathlib import Path
from typing import Optional

import numpy as np
from PyQt6.QtCore import QPointF, QRectF, Qt, QTimer
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPen
from PyQt6.QtWidgets import QApplication, QWidget

from ..analysis import SpectrumAnalyzer, SpectrumFrame
from ..app import VisualizerApp
from ..visuals import Renderer, VisualFrame
from ..watcher import drain
from .button import Rect
from .colors import RGB, to_rgb255
from .draw import CircleShape, RectShape, Shape, TextShape
from .menu import Menu

logger = logging.getLogger(__name__)

KEY_NAMES = {
    Qt.Key.Key_D: "D",
    Qt.Key.Key_Space: "SPACE",
    Qt.Key.Key_Right: "RIGHT",
    Qt.Key.Key_Left: "LEFT",
}


class VisualizerWindow(QWidget):
    def __init__(
        self,
        app: VisualizerApp,
        changes: Optional["queue.Queue[Path]"] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.app = app
        self.changes = changes
        settings = app.settings

        self.setWindowTitle(settings.window.title)
        self.resize(settings.window.width, settings.window.height)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self.menu = Menu(self._menu_rect(), app.controller)
        self.analyzer = SpectrumAnalyzer(settings.visual, app.player.clip.sample_rate)
        self.renderer = Renderer(settings.visual)
        self._visual: Optional[VisualFrame] = None

        self._mouse = (0.0, 0.0)
        self._mouse_down = False
        self._press_latched = False
        self._keys: set[str] = set()

        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(1000 / settings.visual.fps)))
        self._timer.timeout.connect(self._on_tick)
        self._timer.start()

    def _menu_rect(self) -> Rect:
        width = self.width() * self.app.settings.window.menu_fraction
        return Rect.from_corners(0.0, 0.0, width, float(self.height()))

    def _visual_rect(self) -> Rect:
        menu_width = self.width() * self.app.settings.window.menu_fraction
        return Rect.from_corners(menu_width, 0.0, float(self.width()), float(self.height()))

    def _on_tick(self) -> None:
        if self.changes is not None and drain(self.changes):
            logger.info("Music library changed; refreshing song list")
            self.menu.invalidate_songs()

        pressed = self._mouse_down or self._press_latched
        self._press_latched = False
        self.menu.update(self._mouse, pressed, self._keys)
        self.app.controller.tick()

        player = self.app.player
        self.analyzer.set_sample_rate(player.clip.sample_rate)
        if player.is_playing:
            samples = player.window(self.app.settings.visual.fft_size)
        else:
            samples = np.zeros(self.app.settings.visual.fft_size, dtype=np.float32)
        frame: SpectrumFrame = self.analyzer.analyze(samples)
        self._visual = self.renderer.render(frame, self._visual_rect())
        self.update()

    def paintEvent(self, event) -> None:  # noqa: N802 - Qt override
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        try:
            shapes: list[Shape] = []
            if self._visual is not None:
                shapes.extend(self._visual.shapes())
            shapes.extend(self.menu.draw_commands())
            for shape in shapes:
                _paint_shape(painter, shape)
        finally:
            painter.end()

    def resizeEvent(self, event) -> None:  # noqa: N802 - Qt override
        super().resizeEvent(event)
        self.menu.resize(self._menu_rect())

    def mouseMoveEvent(self, event) -> None:  # noqa: N802 - Qt override
        pos = event.position()
        self._mouse = (pos.x(), pos.y())

    def mousePressEvent(self, event) -> None:  # noqa: N802 - Qt override
        pos = event.position()
        self._mouse = (pos.x(), pos.y())
        self._mouse_down = True
        self._press_latched = True

    def mouseReleaseEvent(self, event) -> None:  # noqa: N802 - Qt override
        self._mouse_down = False

    def keyPressEvent(self, event) -> None:  # noqa: N802 - Qt override
        name = KEY_NAMES.get(event.key())
        if name is None:
            super().keyPressEvent(event)
            return
        if not event.isAutoRepeat():
            self._keys.add(name)

    def keyReleaseEvent(self, event) -> None:  # noqa: N802 - Qt override
        name = KEY_NAMES.get(event.key())
        if name is None:
            super().keyReleaseEvent(event)
            return
        if not event.isAutoRepeat():
            self._keys.discard(name)

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        self._timer.stop()
        self.app.player.pause()
        super().closeEvent(event)


def _qcolor(color: RGB) -> QColor:
    r, g, b = to_rgb255(color)
    return QColor(r, g, b)


def _qrect(rect: Rect) -> QRectF:
    return QRectF(rect.left, rect.top, rect.w, rect.h)


def _apply_style(painter: QPainter, fill: Optional[RGB], stroke: Optional[RGB], width: float) -> None:
    if fill is None:
        painter.setBrush(Qt.BrushStyle.NoBrush)
    else:
        painter.setBrush(QBrush(_qcolor(fill)))
    if stroke is None or width <= 0:
        painter.setPen(Qt.PenStyle.NoPen)
    else:
        painter.setPen(QPen(_qcolor(stroke), width))


def _paint_shape(painter: QPainter, shape: Shape) -> None:
    if isinstance(shape, RectShape):
        _apply_style(painter, shape.fill, shape.stroke, shape.stroke_width)
        painter.drawRect(_qrect(shape.rect))
    elif isinstance(shape, CircleShape):
        _apply_style(painter, shape.fill, shape.stroke, shape.stroke_width)
        painter.drawEllipse(QPointF(*shape.center), shape.radius, shape.radius)
    elif isinstance(shape, TextShape):
        font = QFont()
        font.setPixelSize(shape.font_size)
        painter.setFont(font)
        painter.setPen(QPen(_qcolor(shape.color)))
        painter.drawText(
            _qrect(shape.rect),
            Qt.AlignmentFlag.AlignCenter.value | Qt.TextFlag.TextWordWrap.value,
            shape.text,
        )


def run_window(app: VisualizerApp, changes: Optional["queue.Queue[Path]"] = None) -> int:
    qt_app = QApplication.instance() or QApplication(sys.argv)
    window = VisualizerWindow(app, changes)
    window.show()
    return qt_app.exec()
