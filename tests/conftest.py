import numpy as np
import pytest

from image_compare.models.image import RasterImage

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


def make_pixels(width, height, color=WHITE):
    return np.full((height, width, 3), color, dtype=np.uint8)


@pytest.fixture
def solid():
    """Factory for single-colour RasterImages: solid(width, height, color)."""
    def _solid(width, height, color=WHITE):
        return RasterImage(make_pixels(width, height, color))
    return _solid
