from __future__ import annotations


class UpscaleError(ValueError):
    """Base class for input validation failures raised before any pixel work."""


class InvalidDimensions(UpscaleError):
    """Width/height not positive, or scale not an integer >= 1."""


class EmptyBuffer(UpscaleError):
    """Pixel data length does not match width * height * 4."""


class UnsupportedMethod(UpscaleError):
    """Resampling method is not one of the known engines."""


class InvalidSharpening(UpscaleError):
    """Sharpening amount is negative or not a finite number."""
