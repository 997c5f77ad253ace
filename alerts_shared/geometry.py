"""
Screen geometry records shared by the layout code and the drawing backends.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Size:
    w: float
    h: float


@dataclass(frozen=True, slots=True)
class Frame:
    """Rectangle in screen coordinates; y grows downward."""

    x: float
    y: float
    w: float
    h: float

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def overlaps_vertically(self, other: "Frame") -> bool:
        return self.y < other.bottom and other.y < self.bottom


@dataclass(frozen=True)
class Display:
    """A monitor alerts can be drawn on."""

    identifier: str
    name: str
    frame: Frame

    def same_as(self, other: "Display | None") -> bool:
        return other is not None and other.identifier == self.identifier
