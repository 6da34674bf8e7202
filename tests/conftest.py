"""
Pytest configuration and fixtures for upscaler tests.
"""
import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from upscaler import PixelBuffer


def solid(width, height, rgba):
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[:] = rgba
    return PixelBuffer.from_array(arr)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def gray_2x2():
    """2x2 mid-gray, fully opaque."""
    return solid(2, 2, (128, 128, 128, 255))


@pytest.fixture
def black_1x1():
    return solid(1, 1, (0, 0, 0, 255))


@pytest.fixture
def random_buffer(rng):
    """9x7 noisy colour image with varied alpha."""
    return PixelBuffer.from_array(rng.integers(0, 256, size=(7, 9, 4), dtype=np.uint8))


@pytest.fixture
def step_buffer():
    """8x8 image: left half dark (100), right half bright (150)."""
    arr = np.full((8, 8, 4), 255, dtype=np.uint8)
    arr[:, :4, :3] = 100
    arr[:, 4:, :3] = 150
    return PixelBuffer.from_array(arr)
