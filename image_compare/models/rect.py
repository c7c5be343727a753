from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """
    Offset + size of a rectangular region, in pixels.
    """
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Rect offset must be non-negative, got ({self.x}, {self.y})")
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Rect size must be non-negative, got {self.width}x{self.height}")

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height
