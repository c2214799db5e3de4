from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .button import Point, Rect
from .colors import RGB


@dataclass(frozen=True, slots=True)
class RectShape:
    rect: Rect
    fill: Optional[RGB]
    stroke: Optional[RGB] = None
    stroke_width: float = 0.0


@dataclass(frozen=True, slots=True)
class CircleShape:
    center: Point
    radius: float
    fill: Optional[RGB]
    stroke: Optional[RGB] = None
    stroke_width: float = 0.0


@dataclass(frozen=True, slots=True)
class TextShape:
    text: str
    rect: Rect
    color: RGB
    font_size: int = 20


Shape = Union[RectShape, CircleShape, TextShape]
