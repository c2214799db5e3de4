from __future__ import annotations

import colorsys

RGB = tuple[float, float, float]

BLACK: RGB = (0.0, 0.0, 0.0)
WHITE: RGB = (1.0, 1.0, 1.0)
RED: RGB = (1.0, 0.0, 0.0)
GREEN: RGB = (0.0, 1.0, 0.0)
BLUE: RGB = (0.0, 0.0, 1.0)
DARK_GRAY: RGB = (0.1, 0.1, 0.1)  # menu background
SLATE: RGB = (0.3, 0.3, 0.5)  # song buttons
LIGHT_BLUE: RGB = (0.8, 0.8, 1.0)  # song button border


def hsv_color(hue: float, saturation: float = 1.0, value: float = 1.0) -> RGB:
    return colorsys.hsv_to_rgb(hue % 1.0, _unit(saturation), _unit(value))


def to_rgb255(color: RGB) -> tuple[int, int, int]:
    return tuple(int(round(_unit(channel) * 255)) for channel in color)  # type: ignore[return-value]


def _unit(value: float) -> float:
    return min(1.0, max(0.0, float(value)))
