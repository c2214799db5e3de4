from __future__ import annotations

from dataclasses import dataclass

Point = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle described by its centre, in screen coordinates (y grows downwards)."""

    x: float
    y: float
    w: float
    h: float

    @classmethod
    def from_corners(cls, left: float, top: float, right: float, bottom: float) -> "Rect":
        return cls((left + right) / 2.0, (top + bottom) / 2.0, right - left, bottom - top)

    @property
    def left(self) -> float:
        return self.x - self.w / 2.0

    @property
    def right(self) -> float:
        return self.x + self.w / 2.0

    @property
    def top(self) -> float:
        return self.y - self.h / 2.0

    @property
    def bottom(self) -> float:
        return self.y + self.h / 2.0

    def contains(self, point: Point) -> bool:
        px, py = point
        return self.left <= px <= self.right and self.top <= py <= self.bottom


class Button:
    """A labelled, tagged hit area."""

    def __init__(self, label: str, tag: str, rect: Rect) -> None:
        self.label = label
        self.tag = tag
        self.rect = rect
        self.is_visible = True

    def contains(self, point: Point) -> bool:
        return self.is_visible and self.rect.contains(point)

    def set_label(self, label: str) -> None:
        self.label = label

    def __repr__(self) -> str:
        return f"Button(label={self.label!r}, tag={self.tag!r})"
