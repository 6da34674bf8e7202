"""
Tests for the orchestrator and the enhance() entry point.
"""
import logging

import numpy as np
import pytest

import upscaler.pipeline as pipeline_mod
from upscaler import (
    EmptyBuffer, EnhanceConfig, InvalidDimensions, InvalidSharpening, PixelBuffer, UnsupportedMethod,
    UpscalePipeline, bilateral_filter, edge_preserving_smooth, enhance, enhance_colors, normalize_contrast,
    resample, unsharp_mask,
)

METHODS = ["bilinear", "bicubic", "lanczos"]


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, percent, label):
        self.calls.append((percent, label))

    @property
    def percents(self):
        return [p for p, _ in self.calls]


class TestEndToEnd:
    """Whole-pipeline scenarios."""

    def test_gray_2x2_bilinear(self, gray_2x2):
        out = enhance(gray_2x2, "bilinear", 2, 0)
        assert (out.width, out.height) == (4, 4)
        np.testing.assert_array_equal(out.as_array(), np.broadcast_to((128, 128, 128, 255), (4, 4, 4)))

    @pytest.mark.parametrize("method", METHODS)
    @pytest.mark.parametrize("sharpening", [0, 1.5])
    def test_black_pixel_x3(self, black_1x1, method, sharpening):
        out = enhance(black_1x1, method, 3, sharpening)
        assert (out.width, out.height) == (3, 3)
        np.testing.assert_array_equal(out.as_array(), np.broadcast_to((0, 0, 0, 255), (3, 3, 4)))

    @pytest.mark.parametrize("method", METHODS)
    def test_dimensions_and_source_untouched(self, random_buffer, method):
        before = random_buffer.pixels.copy()
        out = enhance(random_buffer, method, 2, 0.7)
        assert (out.width, out.height) == (18, 14)
        assert out.pixels.dtype == np.uint8
        np.testing.assert_array_equal(random_buffer.pixels, before)

    def test_deterministic(self, random_buffer):
        a = enhance(random_buffer, "bicubic", 2, 0.5)
        b = enhance(random_buffer, "bicubic", 2, 0.5)
        np.testing.assert_array_equal(a.pixels, b.pixels)


class TestStageOrder:
    """The pipeline output equals the stages applied by hand in order."""

    @pytest.mark.parametrize("method", METHODS)
    def test_matches_manual_composition(self, random_buffer, method):
        out = enhance(random_buffer, method, 2, 0.7)

        expected = resample(random_buffer.copy(), method, 2)
        edge_preserving_smooth(expected)
        unsharp_mask(expected, 0.7)
        bilateral_filter(expected)
        enhance_colors(expected)
        normalize_contrast(expected)

        np.testing.assert_array_equal(out.as_array(), expected.as_array())

    def test_colour_boost_runs_before_contrast(self):
        # 2x1 is too small for either neighbourhood filter, so only the tone stages act.
        source = PixelBuffer.from_array(np.array([[[200, 100, 100, 255], [0, 0, 0, 255]]], dtype=np.uint8))
        out = enhance(source, "bilinear", 1, 0)
        expected = np.array([[[255, 182, 182, 255], [0, 0, 0, 255]]], dtype=np.uint8)
        np.testing.assert_array_equal(out.as_array(), expected)


class TestProgress:
    """Progress milestones and callback isolation."""

    def test_milestones_with_sharpening(self, random_buffer):
        rec = Recorder()
        enhance(random_buffer, "bilinear", 2, 0.5, progress=rec)
        assert rec.percents == [0, 10, 40, 60, 75, 85, 95, 100]
        assert rec.calls[-1] == (100, "Complete!")

    def test_sharpening_milestone_skipped_when_zero(self, random_buffer):
        rec = Recorder()
        enhance(random_buffer, "bilinear", 2, 0, progress=rec)
        assert rec.percents == [0, 10, 40, 75, 85, 95, 100]

    def test_failing_callback_does_not_abort(self, gray_2x2, caplog):
        def boom(percent, label):
            raise RuntimeError("display gone")

        with caplog.at_level(logging.WARNING, logger="upscaler.pipeline"):
            out = enhance(gray_2x2, "bicubic", 2, 0, progress=boom)
        assert (out.width, out.height) == (4, 4)
        assert "Progress callback failed" in caplog.text

    def test_stage_failure_reported_and_raised(self, random_buffer, monkeypatch):
        def broken(buffer):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(pipeline_mod, "bilateral_filter", broken)
        rec = Recorder()
        with pytest.raises(RuntimeError, match="kaboom"):
            enhance(random_buffer, "bilinear", 2, 0, progress=rec)
        assert rec.calls[-1] == (0, "Error processing image")


class TestValidation:
    """Inputs are rejected before any pixel work or progress report."""

    @pytest.mark.parametrize("kwargs,error", [
        (dict(method="nearest", scale=2, sharpening=0), UnsupportedMethod),
        (dict(method="bilinear", scale=0, sharpening=0), InvalidDimensions),
        (dict(method="bilinear", scale=2.5, sharpening=0), InvalidDimensions),
        (dict(method="bilinear", scale=2, sharpening=-1), InvalidSharpening),
    ])
    def test_bad_parameters(self, random_buffer, kwargs, error):
        rec = Recorder()
        before = random_buffer.pixels.copy()
        with pytest.raises(error):
            enhance(random_buffer, progress=rec, **kwargs)
        assert rec.calls == []
        np.testing.assert_array_equal(random_buffer.pixels, before)

    def test_bad_buffer(self):
        rec = Recorder()
        with pytest.raises(EmptyBuffer):
            enhance(PixelBuffer(3, 3, np.zeros(10, dtype=np.uint8)), "lanczos", 2, 0, progress=rec)
        assert rec.calls == []

    def test_errors_are_value_errors(self, gray_2x2):
        with pytest.raises(ValueError):
            enhance(gray_2x2, "bilinear", -1, 0)


class TestStats:
    """ProcessingStats returned by UpscalePipeline.run()."""

    def test_stats_fields(self, random_buffer):
        result = UpscalePipeline(EnhanceConfig(method="lanczos", scale=2, sharpening=0.5)).run(random_buffer)
        stats = result.stats
        assert (stats.source_width, stats.source_height) == (9, 7)
        assert (stats.result_width, stats.result_height) == (18, 14)
        assert stats.pixel_increase == 4
        assert stats.result_size_mb == pytest.approx(18 * 14 * 4 / 1024 / 1024)
        assert set(stats.stage_times) == {"resample", "smooth", "sharpen", "denoise", "colors", "contrast"}
        assert stats.processing_time >= 0

    def test_summary_text(self, gray_2x2):
        stats = UpscalePipeline(EnhanceConfig(method="bilinear", scale=2, sharpening=0)).run(gray_2x2).stats
        summary = stats.summary()
        assert summary["resolution_increase"] == "2× (4× pixels)"
        assert summary["result"] == "4 × 4 pixels"
        assert summary["file_size"] == "0.00 MB"
        assert "sharpen" not in stats.stage_times
