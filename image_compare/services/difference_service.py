from __future__ import annotations
import logging
import os
from dotenv import load_dotenv
from ..models.color import Color
from ..models.image import RasterImage
from .hot_spot_service import HotSpotService
from .image_service import ImageService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class DifferenceService:
    """
    Scores how close two images are by comparing the average colour of their hot spots.
    *   The reference image's size is authoritative: only the comparand is resized,
        so difference(a, b) and difference(b, a) can disagree.
    *   Never mutates its inputs.
    """
    def __init__(self, image_service: ImageService | None = None,
                 hot_spot_service: HotSpotService | None = None):
        self.image_service = image_service or ImageService()
        self.hot_spot_service = hot_spot_service or HotSpotService()
        self.GRID_SIZE = int(os.getenv("HOT_SPOT_GRID_SIZE", "10"))
        self.DEFAULT_TOLERANCE = float(os.getenv("COMPARE_TOLERANCE", "20"))

    @staticmethod
    def _count_factor(reference_count: int, comparand_count: int) -> float:
        if not reference_count or not comparand_count:
            return 1.0
        factor = comparand_count / reference_count
        return 1 / factor if factor < 0 else factor

    def _tile_colors(self, image: RasterImage) -> list:
        return [spot.average for spot in self.hot_spot_service.sample(image, self.GRID_SIZE)]

    def difference(self, reference: RasterImage, comparand: RasterImage) -> float:
        """
        Args:
            reference (RasterImage): The image whose dimensions are kept.
            comparand (RasterImage): The image resized to match `reference` when needed.

        Returns:
            (float): (1 - deviation of the mean hot-spot colours) * tile-count factor.
            1.0 for images whose hot spots average to the same colour.
        """
        if comparand.size() != reference.size():
            logger.debug(f"Resizing comparand {comparand.size()} to reference {reference.size()}")
            comparand = self.image_service.resize(comparand, *reference.size())

        reference_colors = self._tile_colors(reference)
        comparand_colors = self._tile_colors(comparand)

        factor = self._count_factor(len(reference_colors), len(comparand_colors))
        deviation = Color.average(reference_colors).deviation(Color.average(comparand_colors))
        score = (1 - deviation) * factor
        logger.debug(f"deviation={deviation:.4f} factor={factor:.4f} score={score:.4f}")
        return score

    def compare(self, reference: RasterImage, comparand: RasterImage,
                tolerance: float | None = None) -> bool:
        """
        Checks whether two images match.

        Args:
            reference (RasterImage): The reference image.
            comparand (RasterImage): The image under test.
            tolerance (float): Allowed divergence in percent (default COMPARE_TOLERANCE, 20).

        Returns:
            True if 1 - difference(reference, comparand) is below tolerance / 100.
        """
        return self.is_match(self.difference(reference, comparand), tolerance)

    def is_match(self, score: float, tolerance: float | None = None) -> bool:
        """Gate a difference score: its divergence (1 - score) must stay below tolerance percent."""
        if tolerance is None:
            tolerance = self.DEFAULT_TOLERANCE
        # score is a closeness (1.0 = identical); gate on its divergence, not the raw score
        return 1 - score < tolerance / 100
