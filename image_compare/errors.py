class BoundsError(IndexError):
    """Raised when a pixel coordinate or crop rectangle falls outside an image."""


class DecodeError(ValueError):
    """Raised when encoded image data cannot be turned into an RGB buffer."""
