import numpy as np
import pytest

from image_compare.models.image import RasterImage
from image_compare.services.difference_service import DifferenceService
from image_compare.services.image_service import ImageService

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


@pytest.fixture
def difference_service():
    return DifferenceService()


def striped(width, height, even, odd):
    """Vertical one-pixel stripes alternating between two colours."""
    pixels = np.empty((height, width, 3), dtype=np.uint8)
    pixels[:, 0::2] = even
    pixels[:, 1::2] = odd
    return RasterImage(pixels)


class TestDifference:

    def test_identical_images_score_one(self, difference_service, solid):
        assert difference_service.difference(solid(100, 100, RED), solid(100, 100, RED)) == 1.0

    def test_score_shrinks_as_colours_diverge(self, difference_service, solid):
        score = difference_service.difference(solid(100, 100, RED), solid(100, 100, BLUE))
        assert score == pytest.approx(1 / 3)

    def test_white_background_is_ignored(self, difference_service, solid):
        pixels = np.full((100, 100, 3), RED, dtype=np.uint8)
        pixels[::2] = (255, 255, 255)
        assert difference_service.difference(RasterImage(pixels), solid(100, 100, RED)) == 1.0

    def test_only_comparand_is_resized(self, solid):
        image_service = ImageService()
        resized = []
        original_resize = image_service.resize

        def recording_resize(img, width, height):
            resized.append((img, (width, height)))
            return original_resize(img, width, height)

        image_service.resize = recording_resize
        service = DifferenceService(image_service)
        reference, comparand = solid(30, 20, RED), solid(60, 10, RED)

        service.difference(reference, comparand)

        assert len(resized) == 1
        assert resized[0][0] is comparand
        assert resized[0][1] == (30, 20)

    def test_difference_is_not_symmetric(self, difference_service, solid):
        small = solid(10, 10, RED)
        stripes = striped(20, 20, RED, GREEN)

        # 2x2 tiles of the stripes average to (128, 128, 0)
        assert difference_service.difference(stripes, small) == pytest.approx(2 / 3)
        # nearest-neighbour downsampling keeps a single stripe colour
        assert difference_service.difference(small, stripes) != pytest.approx(2 / 3)

    def test_inputs_are_not_mutated(self, difference_service, solid):
        reference, comparand = solid(10, 10, RED), solid(25, 5, BLUE)
        before = comparand.buffer().copy()
        difference_service.difference(reference, comparand)
        assert comparand.size() == (25, 5)
        assert np.array_equal(comparand.buffer(), before)

    @pytest.mark.parametrize("reference_count, comparand_count, expected", [
        (100, 100, 1.0),
        (100, 81, 0.81),
        (0, 100, 1.0),
        (100, 0, 1.0),
    ])
    def test_count_factor(self, reference_count, comparand_count, expected):
        assert DifferenceService._count_factor(reference_count, comparand_count) == pytest.approx(expected)


class TestCompare:

    def test_same_red_images_match(self, difference_service, solid):
        assert difference_service.compare(solid(100, 100, RED), solid(100, 100, RED), 20)

    def test_red_and_blue_do_not_match(self, difference_service, solid):
        assert not difference_service.compare(solid(100, 100, RED), solid(100, 100, BLUE), 20)

    def test_tolerance_is_a_percentage(self, difference_service, solid):
        a = solid(50, 50, (100, 100, 100))
        b = solid(50, 50, (130, 100, 100))  # divergence 30 / 765 ≈ 3.9 %
        assert not difference_service.compare(a, b, 3)
        assert difference_service.compare(a, b, 5)

    def test_is_match_gates_on_divergence(self, difference_service):
        assert difference_service.is_match(1.0, 20)
        assert difference_service.is_match(0.85, 20)
        assert not difference_service.is_match(0.1, 20)
        assert not difference_service.is_match(1 / 3, 20)

    def test_default_tolerance_from_env(self, monkeypatch, solid):
        monkeypatch.setenv("COMPARE_TOLERANCE", "50")
        service = DifferenceService()
        assert service.DEFAULT_TOLERANCE == 50
        # red vs blue diverges by 2/3, still too far even at 50 %
        assert not service.compare(solid(20, 20, RED), solid(20, 20, BLUE))

    def test_grid_size_from_env(self, monkeypatch):
        monkeypatch.setenv("HOT_SPOT_GRID_SIZE", "4")
        assert DifferenceService().GRID_SIZE == 4
