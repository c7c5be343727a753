from .errors import BoundsError, DecodeError
from .models import Color, HotSpot, RasterImage, Rect
from .api import (
    avg,
    compare,
    crop,
    difference,
    from_bytes,
    hash_image,
    load,
    load_url,
    resize,
    save,
    subtract,
    to_png_bytes,
)

__version__ = "1.0.0"

__all__ = [
    "BoundsError",
    "DecodeError",
    "Color",
    "HotSpot",
    "RasterImage",
    "Rect",
    "avg",
    "compare",
    "crop",
    "difference",
    "from_bytes",
    "hash_image",
    "load",
    "load_url",
    "resize",
    "save",
    "subtract",
    "to_png_bytes",
]
