"""Resampling engines: map a source PixelBuffer onto a larger destination grid.

Every engine uses the same forward mapping from destination pixel to source
coordinate, ``src = d * (src_len / dst_len)``. There is no half-pixel centre
offset, so destination (0, 0) lands exactly on source (0, 0).

Edge handling differs per engine:
  - bilinear / bicubic replicate edge pixels (indices are clamped)
  - lanczos drops out-of-bounds taps and renormalises by the weights it used
"""
from __future__ import annotations
from enum import Enum
from numbers import Integral
from typing import Callable, Dict, Tuple, Union
import logging

import numpy as np

from .buffer import PixelBuffer, to_uint8
from .errors import InvalidDimensions, UnsupportedMethod

logger = logging.getLogger(__name__)

LANCZOS_A = 3  # window radius


class ResampleMethod(str, Enum):
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    LANCZOS = "lanczos"

    @classmethod
    def parse(cls, value: Union[str, "ResampleMethod"]) -> "ResampleMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            known = ", ".join(m.value for m in cls)
            raise UnsupportedMethod(f"Unknown resampling method: {value!r} (expected one of {known})") from None


def validate_scale(scale) -> int:
    if isinstance(scale, bool) or not isinstance(scale, Integral):
        raise InvalidDimensions(f"scale must be an integer, got {scale!r}")
    if scale < 1:
        raise InvalidDimensions(f"scale must be >= 1, got {scale}")
    return int(scale)


# Kernels

def cubic_weight(t):
    """Catmull-Rom style cubic (a = -0.5), support |t| < 2."""
    a = np.abs(np.asarray(t, dtype=np.float64))
    near = 1.5 * a * a * a - 2.5 * a * a + 1
    far = -0.5 * a * a * a + 2.5 * a * a - 4 * a + 2
    w = np.where(a <= 1, near, np.where(a < 2, far, 0.0))
    return float(w) if w.ndim == 0 else w


def lanczos_kernel(x, a: int = LANCZOS_A):
    """Windowed sinc: 1 at x == 0, 0 for |x| >= a, else a*sin(pi x)*sin(pi x / a) / (pi x)^2."""
    x = np.asarray(x, dtype=np.float64)
    pi_x = np.pi * x
    with np.errstate(divide="ignore", invalid="ignore"):
        body = (a * np.sin(pi_x) * np.sin(pi_x / a)) / (pi_x * pi_x)
    w = np.where(x == 0, 1.0, np.where(np.abs(x) >= a, 0.0, body))
    return float(w) if w.ndim == 0 else w


# Engines

def _source_coords(src_len: int, dst_len: int) -> np.ndarray:
    ratio = src_len / dst_len
    return np.arange(dst_len, dtype=np.float64) * ratio


def bilinear_resample(source: PixelBuffer, dest_width: int, dest_height: int) -> PixelBuffer:
    sw, sh = source.width, source.height
    src = source.as_array().astype(np.float64)

    xs = _source_coords(sw, dest_width)
    ys = _source_coords(sh, dest_height)
    x1 = np.floor(xs).astype(np.intp)
    y1 = np.floor(ys).astype(np.intp)
    x2 = np.minimum(x1 + 1, sw - 1)
    y2 = np.minimum(y1 + 1, sh - 1)
    xw = (xs - x1)[None, :, None]
    yw = (ys - y1)[:, None, None]

    top = src[y1[:, None], x1[None, :]] * (1 - xw) + src[y1[:, None], x2[None, :]] * xw
    bottom = src[y2[:, None], x1[None, :]] * (1 - xw) + src[y2[:, None], x2[None, :]] * xw
    out = top * (1 - yw) + bottom * yw
    return PixelBuffer.from_array(to_uint8(out))


def bicubic_resample(source: PixelBuffer, dest_width: int, dest_height: int) -> PixelBuffer:
    sw, sh = source.width, source.height
    src = source.as_array().astype(np.float64)

    xs = _source_coords(sw, dest_width)
    ys = _source_coords(sh, dest_height)
    x_int = np.floor(xs).astype(np.intp)
    y_int = np.floor(ys).astype(np.intp)
    x_frac = xs - x_int
    y_frac = ys - y_int

    acc = np.zeros((dest_height, dest_width, 4), dtype=np.float64)
    for m in range(-1, 3):
        sy = np.clip(y_int + m, 0, sh - 1)
        wy = cubic_weight(m - y_frac)
        for n in range(-1, 3):
            sx = np.clip(x_int + n, 0, sw - 1)
            wx = cubic_weight(n - x_frac)
            weight = wx[None, :] * wy[:, None]
            acc += src[sy[:, None], sx[None, :]] * weight[..., None]
    return PixelBuffer.from_array(to_uint8(acc))


def _lanczos_taps(coords: np.ndarray, src_len: int, a: int) -> Tuple[np.ndarray, np.ndarray]:
    """Per destination sample: (tap indices, tap weights), shape (n, 2a + 2).

    Taps span floor(c - a) .. ceil(c + a). Taps past that span or outside the
    source get weight 0 (their index is clamped only so it can be gathered).
    """
    start = np.floor(coords - a).astype(np.intp)
    end = np.ceil(coords + a).astype(np.intp)
    idx = start[:, None] + np.arange(2 * a + 2)[None, :]
    used = (idx <= end[:, None]) & (idx >= 0) & (idx < src_len)
    weights = np.where(used, lanczos_kernel(coords[:, None] - idx, a), 0.0)
    return np.clip(idx, 0, src_len - 1), weights


def lanczos_resample(source: PixelBuffer, dest_width: int, dest_height: int, a: int = LANCZOS_A) -> PixelBuffer:
    sw, sh = source.width, source.height
    src = source.as_array().astype(np.float64)

    ix, wx = _lanczos_taps(_source_coords(sw, dest_width), sw, a)
    iy, wy = _lanczos_taps(_source_coords(sh, dest_height), sh, a)

    acc = np.zeros((dest_height, dest_width, 4), dtype=np.float64)
    weight_sum = np.zeros((dest_height, dest_width), dtype=np.float64)
    for ty in range(iy.shape[1]):
        rows = iy[:, ty]
        for tx in range(ix.shape[1]):
            weight = wx[None, :, tx] * wy[:, ty, None]
            acc += src[rows[:, None], ix[None, :, tx]] * weight[..., None]
            weight_sum += weight

    # 0/0 -> NaN stores as 0, matching the 8-bit store rule
    with np.errstate(divide="ignore", invalid="ignore"):
        out = acc / weight_sum[..., None]
    return PixelBuffer.from_array(to_uint8(out))


Resampler = Callable[[PixelBuffer, int, int], PixelBuffer]

RESAMPLERS: Dict[ResampleMethod, Resampler] = {
    ResampleMethod.BILINEAR: bilinear_resample,
    ResampleMethod.BICUBIC: bicubic_resample,
    ResampleMethod.LANCZOS: lanczos_resample,
}


def resample(source: PixelBuffer, method: Union[str, ResampleMethod], scale: int) -> PixelBuffer:
    """Upscale ``source`` by an integer factor. Returns a new buffer; the source is never modified."""
    method = ResampleMethod.parse(method)
    scale = validate_scale(scale)
    source.validate()

    dw, dh = source.width * scale, source.height * scale
    logger.debug("Resampling %dx%d -> %dx%d (%s)", source.width, source.height, dw, dh, method.value)
    return RESAMPLERS[method](source, dw, dh)
