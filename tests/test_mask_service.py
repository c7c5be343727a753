import numpy as np
import pytest

from image_compare.models.color import Color
from image_compare.models.image import RasterImage
from image_compare.services.mask_service import MaskService

RED = (255, 0, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


@pytest.fixture
def mask_service():
    return MaskService()


def is_solid(img, color):
    return bool((img.buffer() == np.array(color, dtype=np.uint8)).all())


def test_subtracting_an_image_from_itself_is_white(mask_service):
    rng = np.random.default_rng(1234)
    img = RasterImage(rng.integers(0, 256, size=(16, 24, 3), dtype=np.uint8))
    result = mask_service.subtract(img, img, 0)
    assert result.size() == (24, 16)
    assert is_solid(result, WHITE)


def test_white_minus_white(mask_service, solid):
    result = mask_service.subtract(solid(50, 50), solid(50, 50), 0)
    assert result.size() == (50, 50)
    assert is_solid(result, WHITE)


def test_mask_is_resized_to_target(mask_service, solid):
    result = mask_service.subtract(solid(50, 50, RED), solid(20, 20, RED), 0)
    assert result.size() == (50, 50)
    assert is_solid(result, WHITE)


def test_non_matching_pixels_keep_target_colour(mask_service, solid):
    pixels = np.full((10, 10, 3), RED, dtype=np.uint8)
    pixels[2:4, 5:8] = BLUE
    target = RasterImage(pixels)
    result = mask_service.subtract(target, solid(10, 10, RED), 0)

    assert result.pixel_at(5, 2) == Color(*BLUE)
    assert result.pixel_at(0, 0) == Color.white()
    assert result is not target
    assert target.pixel_at(0, 0) == Color(*RED)


def test_tolerance_in_percent(mask_service, solid):
    target = solid(5, 5, (100, 100, 100))
    mask = solid(5, 5, (110, 100, 100))  # deviation 10 / 765 ≈ 1.3 %
    assert is_solid(mask_service.subtract(target, mask, 1), (100, 100, 100))
    assert is_solid(mask_service.subtract(target, mask, 2), WHITE)


def test_default_tolerance_from_env(monkeypatch):
    monkeypatch.setenv("SUBTRACT_TOLERANCE", "5")
    assert MaskService().DEFAULT_TOLERANCE == 5
