from __future__ import annotations

from dataclasses import dataclass, field

from .analysis import SpectrumFrame
from .config import VisualSettings
from .ui.button import Rect
from .ui.colors import RGB, hsv_color
from .ui.draw import CircleShape, RectShape, Shape

BACKGROUND: RGB = (0.02, 0.02, 0.05)
BAR_GAP = 0.2
MIN_BRIGHTNESS = 0.35
PULSE_BASE = 0.08
PULSE_RMS_GAIN = 0.6
BEAT_KICK = 0.12
BEAT_DECAY = 0.85


@dataclass(slots=True)
class VisualFrame:
    background: RectShape
    bars: list[RectShape] = field(default_factory=list)
    pulse: CircleShape | None = None

    def shapes(self) -> list[Shape]:
        shapes: list[Shape] = [self.background]
        if self.pulse is not None:
            shapes.append(self.pulse)
        shapes.extend(self.bars)
        return shapes


class Renderer:
    """Lays out spectrum bars along the bottom of ``area`` and a pulsing disc in its centre."""

    def __init__(self, settings: VisualSettings) -> None:
        self.settings = settings
        self._beat_boost = 0.0
        self._hue_offset = 0.0

    def render(self, frame: SpectrumFrame, area: Rect) -> VisualFrame:
        if frame.beat:
            self._beat_boost = min(1.0, self._beat_boost + BEAT_KICK)
        else:
            self._beat_boost *= BEAT_DECAY
        self._hue_offset = (self._hue_offset + 0.05 * frame.rms) % 1.0

        visual = VisualFrame(background=RectShape(area, BACKGROUND))
        visual.pulse = self._pulse(frame, area)
        visual.bars = self._bars(frame, area)
        return visual

    def _bars(self, frame: SpectrumFrame, area: Rect) -> list[RectShape]:
        count = len(frame.bars)
        if count == 0:
            return []
        slot = area.w / count
        width = slot * (1.0 - BAR_GAP)
        max_height = area.h * 0.9
        bars = []
        for index, level in enumerate(frame.bars):
            level = float(min(1.0, max(0.0, level)))
            height = max(1.0, level * max_height)
            x = area.left + slot * (index + 0.5)
            y = area.bottom - height / 2.0
            color = hsv_color(
                self._hue_offset + index / count * 0.8,
                0.85,
                MIN_BRIGHTNESS + (1.0 - MIN_BRIGHTNESS) * level,
            )
            bars.append(RectShape(Rect(x, y, width, height), color))
        return bars

    def _pulse(self, frame: SpectrumFrame, area: Rect) -> CircleShape:
        base = min(area.w, area.h)
        radius = base * (PULSE_BASE + PULSE_RMS_GAIN * frame.rms + self._beat_boost * 0.25)
        radius = min(radius, base * 0.45)
        color = hsv_color(self._hue_offset + 0.5, 0.6, 0.4 + 0.6 * min(1.0, self._beat_boost * 2))
        return CircleShape((area.x, area.y - area.h * 0.1), radius, color)
