"""
Module-level call surface backed by shared service instances.
"""
from __future__ import annotations
from pathlib import Path
from typing import Union
from .models.color import Color
from .models.image import RasterImage
from .models.rect import Rect
from .services.difference_service import DifferenceService
from .services.hot_spot_service import HotSpotService
from .services.image_service import ImageService
from .services.mask_service import MaskService

image_service = ImageService()
hot_spot_service = HotSpotService()
difference_service = DifferenceService(image_service, hot_spot_service)
mask_service = MaskService(image_service)


def difference(reference: RasterImage, comparand: RasterImage) -> float:
    return difference_service.difference(reference, comparand)


def compare(reference: RasterImage, comparand: RasterImage, tolerance: float | None = None) -> bool:
    """True if the images match within `tolerance` percent (COMPARE_TOLERANCE, default 20)."""
    return difference_service.compare(reference, comparand, tolerance)


def subtract(target: RasterImage, mask: RasterImage, tolerance: float | None = None) -> RasterImage:
    """Whiten pixels of `target` within `tolerance` percent of `mask` (SUBTRACT_TOLERANCE, default 0)."""
    return mask_service.subtract(target, mask, tolerance)


def avg(image: RasterImage) -> Color:
    return image_service.average(image)


def resize(image: RasterImage, width: int, height: int) -> RasterImage:
    return image_service.resize(image, width, height)


def crop(image: RasterImage, rect: Rect) -> RasterImage:
    return image_service.crop(image, rect)


# ─── codec adapters ──────────────────────────────────────────────────
def from_bytes(data: bytes) -> RasterImage:
    return image_service.from_bytes(data)


def load(path: Union[str, Path]) -> RasterImage:
    return image_service.load(path)


def load_url(url: str) -> RasterImage:
    return image_service.load_url(url)


def to_png_bytes(image: RasterImage) -> bytes:
    return image_service.to_png_bytes(image)


def hash_image(image: RasterImage, salt: str = "") -> str:
    return image_service.hash(image, salt)


def save(image: RasterImage, name: str = None, directory: Union[str, Path] = ".") -> Path:
    return image_service.save(image, name=name, directory=directory)
