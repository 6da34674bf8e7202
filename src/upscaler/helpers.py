from __future__ import annotations
from pathlib import Path
from typing import List

import cv2
import numpy as np
import os

from .buffer import PixelBuffer

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".webp", ".tif", ".tiff")


# I/O & filesystem helpers


def load_image_rgba(path: str | os.PathLike) -> PixelBuffer:
    """Load an image file as an RGBA PixelBuffer. Raises on failure."""
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise FileNotFoundError(f"Could not read image: {path}")
    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)

    if img.ndim == 2:
        rgba = cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    elif img.shape[2] == 3:
        rgba = cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    else:
        rgba = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    return PixelBuffer.from_array(rgba)


def save_image_rgba(path: str | os.PathLike, buffer: PixelBuffer) -> None:
    """Write a PixelBuffer (alpha kept). Format follows the file extension."""
    bgra = cv2.cvtColor(buffer.as_array(), cv2.COLOR_RGBA2BGRA)
    if not cv2.imwrite(str(path), bgra):
        raise OSError(f"Could not write image: {path}")


def output_path(save_dir: str | os.PathLike, source_path: str | os.PathLike, scale: int) -> Path:
    """``<save_dir>/<stem>_upscaled_x<scale>.png``; creates ``save_dir`` if needed."""
    out_dir = Path(save_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir / f"{Path(source_path).stem}_upscaled_x{scale}.png"


def find_images(dir_path: str | os.PathLike) -> List[Path]:
    """Image files directly inside ``dir_path`` (extension match is case-insensitive), sorted by name."""
    candidates = (p for p in Path(dir_path).iterdir() if p.is_file())
    return sorted((p for p in candidates if p.suffix.lower() in IMAGE_EXTENSIONS), key=lambda p: p.name)
