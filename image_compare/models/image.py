from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import threading
import numpy as np
from .color import Color
from ..errors import BoundsError


@dataclass(eq=False)
class RasterImage:
    """
    Simple data object: RGB pixels (+ optional source path for bookkeeping).
    The buffer is owned exclusively and read-only; transforms live in the services
    and always return a new RasterImage.
    """
    pixels: np.ndarray | None  # Shape (H, W, 3), dtype uint8, RGB order.
    path: Path | None = None  # Source of the image.
    _average: Color | None = field(default=None, init=False, repr=False)
    _average_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self):
        if self.pixels is None:
            raise ValueError("RasterImage needs a pixel buffer")
        pixels = np.ascontiguousarray(self.pixels, dtype=np.uint8)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Expected an (H, W, 3) RGB buffer, got shape {pixels.shape}")
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise ValueError(f"Image dimensions must be positive, got shape {pixels.shape}")
        if pixels is self.pixels:
            pixels = pixels.copy()
        pixels.setflags(write=False)
        self.pixels = pixels
        self._width = pixels.shape[1]
        self._height = pixels.shape[0]
        if self.path is not None:
            self.path = Path(self.path)

    # ── Dimensions ───────────────────────────────────────────────────
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def size(self) -> tuple[int, int]:
        return self._width, self._height

    # ── Pixel access ─────────────────────────────────────────────────
    def buffer(self) -> np.ndarray:
        """The live pixel buffer. Raises once the image has been released."""
        if self.pixels is None:
            raise ValueError("Image buffer has been released")
        return self.pixels

    def pixel_at(self, x: int, y: int) -> Color:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise BoundsError(
                f"Pixel ({x}, {y}) outside image of size {self._width}x{self._height}"
            )
        return Color.from_array(self.buffer()[y, x])

    # ── Average colour cache ─────────────────────────────────────────
    def cached_average(self, compute) -> Color:
        """
        Return the memoised whole-image average, calling `compute(self)` the first time.
        """
        if self._average is None:
            with self._average_lock:
                if self._average is None:
                    self._average = compute(self)
        return self._average

    # ── Lifetime ─────────────────────────────────────────────────────
    @property
    def released(self) -> bool:
        return self.pixels is None

    def release(self) -> None:
        """Drop the pixel buffer. Only the first call has any effect."""
        if self.pixels is not None:
            self.pixels = None

    def __enter__(self) -> RasterImage:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
