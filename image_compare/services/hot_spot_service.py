from __future__ import annotations
from typing import List
from ..models.color import Color, white_mask
from ..models.hot_spot import HotSpot
from ..models.image import RasterImage
from ..models.rect import Rect


class HotSpotService:
    """
    Splits an image into a grid of hot spots and measures each one's average colour.
    """

    @staticmethod
    def _spans(extent: int, parts: int) -> List[tuple]:
        # Equal spans of extent // parts; the last span absorbs the remainder.
        step = extent // parts
        spans = [(i * step, step) for i in range(parts - 1)]
        spans.append(((parts - 1) * step, extent - (parts - 1) * step))
        return spans

    def partition(self, image: RasterImage, grid_size: int) -> List[Rect]:
        """
        Tile the image into grid_size x grid_size rectangles, row-major.

        The tiles cover every pixel exactly once. If the image is narrower (or shorter)
        than the grid, the leading tiles on that axis are empty and the last one holds
        the full extent.
        """
        if grid_size < 1:
            raise ValueError(f"grid_size must be >= 1, got {grid_size}")
        columns = self._spans(image.width, grid_size)
        rows = self._spans(image.height, grid_size)
        return [
            Rect(x, y, w, h)
            for y, h in rows
            for x, w in columns
        ]

    @staticmethod
    def average_color(image: RasterImage, rect: Rect) -> Color:
        """
        Mean colour inside `rect`, ignoring pure-white (background) pixels.
        Empty or all-white regions return white.
        """
        region = image.buffer()[rect.y:rect.bottom, rect.x:rect.right]
        signal = region[~white_mask(region)]
        if signal.size == 0:
            return Color.white()
        return Color.mean_of(signal)

    def sample(self, image: RasterImage, grid_size: int) -> List[HotSpot]:
        return [
            HotSpot(rect=rect, average=self.average_color(image, rect))
            for rect in self.partition(image, grid_size)
        ]
