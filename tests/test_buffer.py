"""
Tests for PixelBuffer layout and validation.
"""
import numpy as np
import pytest

from upscaler import EmptyBuffer, InvalidDimensions, PixelBuffer
from upscaler.buffer import to_uint8


class TestLayout:
    """Sample addressing and array views."""

    def test_index_matches_row_major_rgba(self):
        arr = np.arange(3 * 2 * 4, dtype=np.uint8).reshape(2, 3, 4)
        buf = PixelBuffer.from_array(arr)
        assert (buf.width, buf.height) == (3, 2)
        for y in range(2):
            for x in range(3):
                for c in range(4):
                    assert buf.index(x, y, c) == (y * 3 + x) * 4 + c
                    assert buf.pixels[buf.index(x, y, c)] == arr[y, x, c]

    def test_as_array_writes_through(self):
        buf = PixelBuffer.blank(2, 2)
        buf.as_array()[1, 0] = (1, 2, 3, 4)
        assert buf.pixel(0, 1) == (1, 2, 3, 4)

    def test_from_array_copies(self):
        arr = np.zeros((2, 2, 4), dtype=np.uint8)
        buf = PixelBuffer.from_array(arr)
        arr[0, 0, 0] = 9
        assert buf.pixel(0, 0)[0] == 0

    def test_copy_is_independent(self):
        buf = PixelBuffer.blank(1, 1)
        other = buf.copy()
        other.pixels[0] = 200
        assert buf.pixels[0] == 0

    def test_from_array_rejects_rgb(self):
        with pytest.raises(InvalidDimensions):
            PixelBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))


class TestValidation:
    """Buffer validation errors."""

    def test_wrong_length_is_empty_buffer(self):
        with pytest.raises(EmptyBuffer):
            PixelBuffer(2, 2, np.zeros(15, dtype=np.uint8)).validate()

    @pytest.mark.parametrize("width,height", [(0, 2), (2, 0), (-1, 3)])
    def test_non_positive_dimensions(self, width, height):
        with pytest.raises(InvalidDimensions):
            PixelBuffer(width, height, []).validate()

    def test_valid_buffer_passes(self):
        PixelBuffer.blank(3, 5).validate()


class TestStoreRule:
    """Real values stored as 8-bit samples."""

    def test_clamps_rounds_half_even_and_zeroes_nan(self):
        out = to_uint8([-3.0, 0.5, 1.5, 2.5, 254.6, 300.0, np.nan])
        assert out.tolist() == [0, 0, 2, 2, 255, 255, 0]
        assert out.dtype == np.uint8
