from .image_service import ImageService
from .hot_spot_service import HotSpotService
from .difference_service import DifferenceService
from .mask_service import MaskService

__all__ = ["ImageService", "HotSpotService", "DifferenceService", "MaskService"]
