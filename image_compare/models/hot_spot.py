from __future__ import annotations
from dataclasses import dataclass
from .color import Color
from .rect import Rect


@dataclass(frozen=True)
class HotSpot:
    """
    One sampling tile of an image: its rectangle and the average colour inside it.
    """
    rect: Rect
    average: Color
