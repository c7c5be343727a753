from __future__ import annotations
from pathlib import Path
from typing import Iterable, Iterator, Union
import logging
import os
import cv2
import httpx
import numpy as np
from dotenv import load_dotenv
from ..errors import BoundsError
from ..models.color import Color, white_mask
from ..models.image import RasterImage
from ..models.rect import Rect
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageService:
    """Pixel-level transforms on RasterImage plus thin I/O delegation to the repository."""
    def __init__(self):
        self.AVG_SIZE = int(os.getenv("IMAGE_AVG_SIZE", "10"))
        self.image_repository = ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> RasterImage:
        return self.image_repository.create_image(pixels, path)

    # ─── I/O ──────────────────────────────────────────────────────────
    def load(self, path: str | Path) -> RasterImage:
        """Load a single image from disk into a RasterImage object."""
        return self.image_repository.load(path)

    def from_bytes(self, data: bytes) -> RasterImage:
        return self.image_repository.from_bytes(data)

    def load_url(self, url: str, client: httpx.Client = None) -> RasterImage:
        return self.image_repository.load_url(url, client=client)

    def gallery_paths(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Path]:
        """
        Image files in a folder, so callers can load (and report on) each one themselves.
        """
        return self.image_repository.iter_paths(folder,
                                                recursive=recursive,
                                                exts=exts)

    def save(self, image: RasterImage, name: str = None, directory: Union[str, Path] = ".") -> Path:
        return self.image_repository.save(image, name=name, directory=directory)

    def hash(self, image: RasterImage, salt: str = "") -> str:
        return self.image_repository.hash(image, salt)

    def to_png_bytes(self, image: RasterImage) -> bytes:
        return self.image_repository.to_png_bytes(image)

    # ─── Geometry ─────────────────────────────────────────────────────
    def resize(self, img: RasterImage, width: int, height: int) -> RasterImage:
        """
        Nearest-neighbour resample to (width, height).

        Target pixel (dx, dy) takes source pixel (floor(dx * W / width), floor(dy * H / height)),
        the same mapping GD's imagecopyresized uses. Deterministic for a given input.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Resize target must be positive, got {width}x{height}")
        if img.size() == (width, height):
            return self.create_image(img.buffer())
        resized = cv2.resize(img.buffer(), (width, height), interpolation=cv2.INTER_NEAREST)
        logger.debug(f"Resized {img.width}x{img.height} → {width}x{height}")
        return self.create_image(resized)

    def crop(self, img: RasterImage, rect: Rect) -> RasterImage:
        """
        Copy the pixels inside `rect`. Rectangles leaving the image are rejected, not clamped.
        """
        if rect.area == 0 or rect.right > img.width or rect.bottom > img.height:
            raise BoundsError(
                f"Crop {rect.width}x{rect.height}+{rect.x}+{rect.y} "
                f"invalid for image of size {img.width}x{img.height}"
            )
        return self.create_image(img.buffer()[rect.y:rect.bottom, rect.x:rect.right])

    # ─── Colour ───────────────────────────────────────────────────────
    def _compute_average(self, img: RasterImage) -> Color:
        sample = self.resize(img, self.AVG_SIZE, self.AVG_SIZE).buffer()
        signal = sample[~white_mask(sample)]
        if signal.size == 0:
            return Color.white()
        return Color.mean_of(signal)

    def average(self, img: RasterImage) -> Color:
        """
        Average colour of the image sampled on an AVG_SIZE x AVG_SIZE grid, white pixels skipped.
        Memoised on the image instance.
        """
        return img.cached_average(self._compute_average)
