from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable
import numpy as np

_CHANNEL_MAX = 255
_MAX_DISTANCE = 3 * _CHANNEL_MAX  # sum of absolute channel differences, black vs white


@dataclass(frozen=True)
class Color:
    """
    Immutable RGB value. Each channel is an int in [0, 255].
    """
    r: int
    g: int
    b: int

    def __post_init__(self):
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if not 0 <= value <= _CHANNEL_MAX:
                raise ValueError(f"Channel {name}={value} outside [0, {_CHANNEL_MAX}]")

    # ── Constructors ─────────────────────────────────────────────────
    @classmethod
    def white(cls) -> Color:
        return cls(_CHANNEL_MAX, _CHANNEL_MAX, _CHANNEL_MAX)

    @classmethod
    def from_int(cls, value: int) -> Color:
        """Unpack 0xRRGGBB. Anything above the low 24 bits (e.g. alpha) is ignored."""
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    @classmethod
    def from_array(cls, rgb) -> Color:
        return cls(int(rgb[0]), int(rgb[1]), int(rgb[2]))

    @classmethod
    def average(cls, colors: Iterable[Color]) -> Color:
        """
        Componentwise mean of `colors`, each channel rounded half-up.

        Returns white for an empty sequence.
        """
        channels = np.array([c.as_tuple() for c in colors], dtype=np.float64)
        if channels.size == 0:
            return cls.white()
        return cls.mean_of(channels)

    @classmethod
    def mean_of(cls, rgb_rows: np.ndarray) -> Color:
        """Mean of an (N, 3) channel array, rounded half-up. N must be > 0."""
        mean = np.floor(rgb_rows.reshape(-1, 3).mean(axis=0) + 0.5)
        return cls.from_array(np.clip(mean, 0, _CHANNEL_MAX))

    # ── Conversions ──────────────────────────────────────────────────
    def to_int(self) -> int:
        return (self.r << 16) | (self.g << 8) | self.b

    def as_tuple(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b

    # ── Comparison ───────────────────────────────────────────────────
    def is_white(self) -> bool:
        return self == Color.white()

    def deviation(self, other: Color) -> float:
        """
        Normalised distance in [0, 1]: mean absolute channel difference / 255.
        """
        total = abs(self.r - other.r) + abs(self.g - other.g) + abs(self.b - other.b)
        return total / _MAX_DISTANCE

    def within_tolerance(self, other: Color, tolerance: float = 0.0) -> bool:
        """True iff deviation(other) <= tolerance (a fraction, not a percentage)."""
        return self.deviation(other) <= tolerance


def deviation_map(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Per-pixel Color.deviation for two (H, W, 3) uint8 arrays of equal shape.
    """
    diff = np.abs(a.astype(np.int16) - b.astype(np.int16)).sum(axis=-1)
    return diff / _MAX_DISTANCE


def white_mask(pixels: np.ndarray) -> np.ndarray:
    """Boolean (H, W) mask of pixels exactly equal to white."""
    return np.all(pixels == _CHANNEL_MAX, axis=-1)
