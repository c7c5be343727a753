from __future__ import annotations
import logging
import os
import numpy as np
from dotenv import load_dotenv
from ..models.color import deviation_map
from ..models.image import RasterImage
from .image_service import ImageService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class MaskService:
    """Whitens the parts of an image that match a mask image."""
    def __init__(self, image_service: ImageService | None = None):
        self.image_service = image_service or ImageService()
        self.DEFAULT_TOLERANCE = float(os.getenv("SUBTRACT_TOLERANCE", "0"))

    def subtract(self, target: RasterImage, mask: RasterImage,
                 tolerance: float | None = None) -> RasterImage:
        """
        Subtract `mask` from `target`.

        The mask is resized to the target's size, then every pixel whose colour lies
        within `tolerance` percent of the mask pixel at the same coordinate turns white.
        All other pixels keep the target's colour.

        Returns:
            RasterImage: a new image the size of `target`.
        """
        if tolerance is None:
            tolerance = self.DEFAULT_TOLERANCE
        if mask.size() != target.size():
            mask = self.image_service.resize(mask, *target.size())

        pixels = target.buffer()
        matches = deviation_map(pixels, mask.buffer()) <= tolerance / 100
        result = np.where(matches[..., None], np.uint8(255), pixels).astype(np.uint8)
        logger.debug(f"Subtracted mask: {int(matches.sum())}/{matches.size} pixels whitened")
        return self.image_service.create_image(result)
