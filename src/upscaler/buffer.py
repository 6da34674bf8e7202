from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from .errors import EmptyBuffer, InvalidDimensions

CHANNELS = 4  # R, G, B, A


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Store real values as 8-bit samples: clamp to [0, 255], round half to even, NaN -> 0."""
    out = np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0)
    return np.rint(np.clip(out, 0, 255)).astype(np.uint8)


@dataclass(eq=False)
class PixelBuffer:
    """Fixed-size RGBA grid. Sample (x, y, c) lives at ``(y * width + x) * 4 + c``."""

    width: int
    height: int
    pixels: np.ndarray  # flat uint8, length width * height * 4

    def __post_init__(self) -> None:
        self.pixels = np.asarray(self.pixels, dtype=np.uint8).ravel()

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelBuffer":
        if rgba.ndim != 3 or rgba.shape[2] != CHANNELS:
            raise InvalidDimensions(f"expected an (h, w, 4) array, got shape {rgba.shape}")
        h, w = rgba.shape[:2]
        return cls(width=w, height=h, pixels=np.ascontiguousarray(rgba, dtype=np.uint8).ravel().copy())

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        return cls(width=width, height=height, pixels=np.zeros(width * height * CHANNELS, np.uint8))

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimensions(f"buffer dimensions must be positive, got {self.width}x{self.height}")
        expected = self.width * self.height * CHANNELS
        if self.pixels.size != expected:
            raise EmptyBuffer(
                f"pixel data has {self.pixels.size} samples, expected {expected} "
                f"for {self.width}x{self.height}"
            )

    def as_array(self) -> np.ndarray:
        """(height, width, 4) view; writes go straight into ``pixels``."""
        return self.pixels.reshape(self.height, self.width, CHANNELS)

    def index(self, x: int, y: int, channel: int = 0) -> int:
        return (y * self.width + x) * CHANNELS + channel

    def pixel(self, x: int, y: int) -> tuple:
        i = self.index(x, y)
        return tuple(int(v) for v in self.pixels[i:i + CHANNELS])

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.pixels.copy())

    @property
    def shape(self) -> tuple:
        return (self.height, self.width, CHANNELS)
