from .color import Color
from .rect import Rect
from .image import RasterImage
from .hot_spot import HotSpot

__all__ = ["Color", "Rect", "RasterImage", "HotSpot"]
