"""Spatial filters applied in place to an upscaled PixelBuffer.

Each filter reads from a float snapshot of the RGB planes and writes a freshly
computed array back only after the whole pass is done, so no output pixel ever
sees an already-filtered neighbour. Alpha is never touched.
"""
from __future__ import annotations
import math

import numpy as np
from skimage.util import view_as_windows

from .buffer import PixelBuffer, to_uint8
from .errors import InvalidSharpening

BLUR_KERNEL = (1, 4, 6, 4, 1)
BLUR_KERNEL_SUM = 16

SMOOTH_RANGE = 30.0     # intensity falloff for edge-preserving smoothing
BILATERAL_SIGMA_S = 2   # spatial sigma, pixels
BILATERAL_SIGMA_R = 30  # range sigma, intensity levels


def validate_amount(amount: float) -> float:
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise InvalidSharpening(f"sharpening must be a number, got {amount!r}") from None
    if not math.isfinite(amount) or amount < 0:
        raise InvalidSharpening(f"sharpening must be a finite value >= 0, got {amount}")
    return amount


def _blur_pass(rgb: np.ndarray, axis: int) -> np.ndarray:
    n = rgb.shape[axis]
    positions = np.arange(n)
    acc = np.zeros(rgb.shape, dtype=np.float64)
    for k, w in zip(range(-2, 3), BLUR_KERNEL):
        taps = np.clip(positions + k, 0, n - 1)
        acc += np.take(rgb, taps, axis=axis) * w
    return to_uint8(acc / BLUR_KERNEL_SUM)


def binomial_blur(rgba: np.ndarray) -> np.ndarray:
    """5-tap [1,4,6,4,1]/16 blur, horizontal then vertical, edge-clamped.

    Takes an (h, w, 4) array and returns the blurred (h, w, 3) RGB planes as
    uint8; each pass is stored as 8-bit before the next one reads it.
    """
    rgb = rgba[..., :3].astype(np.float64)
    horizontal = _blur_pass(rgb, axis=1)
    return _blur_pass(horizontal.astype(np.float64), axis=0)


def unsharp_mask(buffer: PixelBuffer, amount: float) -> None:
    """out = clamp(orig + amount * (orig - blurred)) on RGB. amount == 0 leaves the buffer as is."""
    amount = validate_amount(amount)
    if amount == 0:
        return
    img = buffer.as_array()
    original = img[..., :3].astype(np.float64)
    blurred = binomial_blur(img).astype(np.float64)
    img[..., :3] = to_uint8(original + amount * (original - blurred))


def _neighbourhoods(rgb: np.ndarray, size: int) -> np.ndarray:
    # (h - size + 1, w - size + 1, size, size, 3): window [.., dy, dx, c] around each interior pixel
    return view_as_windows(rgb, (size, size, 3))[:, :, 0]


def edge_preserving_smooth(buffer: PixelBuffer) -> None:
    """3x3 average weighted by exp(-|neighbour - centre| / 30). 1-pixel border untouched."""
    if buffer.width < 3 or buffer.height < 3:
        return
    img = buffer.as_array()
    snapshot = img[..., :3].astype(np.float64)
    windows = _neighbourhoods(snapshot, 3)
    center = snapshot[1:-1, 1:-1]

    total = np.zeros(center.shape, dtype=np.float64)
    weight_sum = np.zeros(center.shape, dtype=np.float64)
    for dy in range(3):
        for dx in range(3):
            neighbour = windows[:, :, dy, dx]
            weight = np.exp(-np.abs(neighbour - center) / SMOOTH_RANGE)
            total += neighbour * weight
            weight_sum += weight

    img[1:-1, 1:-1, :3] = to_uint8(total / weight_sum)


def bilateral_filter(buffer: PixelBuffer) -> None:
    """5x5 bilateral filter (sigma_s = 2, sigma_r = 30). 2-pixel border untouched."""
    if buffer.width < 5 or buffer.height < 5:
        return
    img = buffer.as_array()
    snapshot = img[..., :3].astype(np.float64)
    windows = _neighbourhoods(snapshot, 5)
    center = snapshot[2:-2, 2:-2]

    spatial_denom = 2 * BILATERAL_SIGMA_S * BILATERAL_SIGMA_S
    range_denom = 2 * BILATERAL_SIGMA_R * BILATERAL_SIGMA_R
    total = np.zeros(center.shape, dtype=np.float64)
    weight_sum = np.zeros(center.shape, dtype=np.float64)
    for dy in range(-2, 3):
        for dx in range(-2, 3):
            neighbour = windows[:, :, dy + 2, dx + 2]
            spatial = math.exp(-(dx * dx + dy * dy) / spatial_denom)
            diff = center - neighbour
            weight = spatial * np.exp(-(diff * diff) / range_denom)
            total += neighbour * weight
            weight_sum += weight

    img[2:-2, 2:-2, :3] = to_uint8(total / weight_sum)
