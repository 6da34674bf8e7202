from __future__ import annotations
from typing import Tuple

import numpy as np

from .buffer import PixelBuffer, to_uint8

SATURATION_BOOST = 1.15
CLIP_FRACTION = 0.01  # share of pixels ignored at each end of the histogram
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def enhance_colors(buffer: PixelBuffer, boost: float = SATURATION_BOOST) -> None:
    """Multiply HSV saturation by ``boost`` (capped at 1) in place.

    Achromatic pixels (saturation 0) are skipped entirely. Hue and value are
    kept, so V never decreases. Alpha is untouched.
    """
    img = buffer.as_array()
    rgb = img[..., :3].astype(np.float64)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    mx = rgb.max(axis=-1)
    mn = rgb.min(axis=-1)
    delta = mx - mn
    chromatic = delta > 0
    if not chromatic.any():
        return

    with np.errstate(divide="ignore", invalid="ignore"):
        s = np.where(mx > 0, delta / mx, 0.0)
        h = np.where(
            r == mx,
            (g - b) / delta,
            np.where(g == mx, 2 + (b - r) / delta, 4 + (r - g) / delta),
        )
    h = h * 60
    h = np.where(h < 0, h + 360, h)

    v = mx / 255.0
    c = v * np.minimum(1.0, s * boost)
    x = c * (1 - np.abs(np.mod(h / 60, 2) - 1))
    m = v - c
    zero = np.zeros_like(c)

    sectors = [h < 60, h < 120, h < 180, h < 240, h < 300]
    rp = np.select(sectors, [c, x, zero, zero, x], default=c)
    gp = np.select(sectors, [x, c, c, x, zero], default=zero)
    bp = np.select(sectors, [zero, zero, x, c, c], default=x)

    boosted = to_uint8(np.stack([rp + m, gp + m, bp + m], axis=-1) * 255)
    img[..., :3] = np.where(chromatic[..., None], boosted, img[..., :3])


def luminance(rgba: np.ndarray) -> np.ndarray:
    """Integer luminance bucket 0-255 per pixel: floor(0.299 R + 0.587 G + 0.114 B)."""
    wr, wg, wb = LUMA_WEIGHTS
    rgb = rgba[..., :3].astype(np.float64)
    gray = np.floor(wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2])
    return np.clip(gray, 0, 255).astype(np.intp)


def luminance_histogram(buffer: PixelBuffer) -> np.ndarray:
    """256 bucket counts; they sum to width * height."""
    return np.bincount(luminance(buffer.as_array()).ravel(), minlength=256)


def percentile_bounds(histogram: np.ndarray, clip_fraction: float = CLIP_FRACTION) -> Tuple[int, int]:
    """Lowest/highest bucket whose cumulative count (from each end) exceeds ``clip_fraction`` of all pixels.

    Falls back to 0 / 255 when no bucket crosses the threshold.
    """
    histogram = np.asarray(histogram)
    threshold = histogram.sum() * clip_fraction

    low_hits = np.flatnonzero(np.cumsum(histogram) > threshold)
    high_hits = np.flatnonzero(np.cumsum(histogram[::-1]) > threshold)
    lo = int(low_hits[0]) if low_hits.size else 0
    hi = len(histogram) - 1 - int(high_hits[0]) if high_hits.size else len(histogram) - 1
    return lo, hi


def normalize_contrast(buffer: PixelBuffer, clip_fraction: float = CLIP_FRACTION) -> Tuple[int, int]:
    """Stretch RGB linearly so the clipped luminance range maps onto 0-255.

    Returns the (min, max) buckets used. When max <= min (e.g. a flat image)
    the buffer is left unchanged.
    """
    lo, hi = percentile_bounds(luminance_histogram(buffer), clip_fraction)
    if hi > lo:
        img = buffer.as_array()
        rgb = img[..., :3].astype(np.float64)
        img[..., :3] = to_uint8(255 * (rgb - lo) / (hi - lo))
    return lo, hi
