"""Pipeline orchestrator: resample, filter, tone, with progress milestones.

Stage order is fixed:
  1) resample (new buffer, source untouched)
  2) edge-preserving smoothing
  3) unsharp mask (only when sharpening > 0)
  4) bilateral denoise
  5) saturation boost
  6) contrast normalisation
Stages 2-6 work in place on the upscaled buffer.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional
import logging
import time

from .buffer import PixelBuffer
from .config import EnhanceConfig
from .filters import bilateral_filter, edge_preserving_smooth, unsharp_mask
from .resample import ResampleMethod, resample
from .tone import enhance_colors, normalize_contrast

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


@dataclass
class ProcessingStats:
    """Timing and size figures for one pipeline run."""
    source_width: int = 0
    source_height: int = 0
    result_width: int = 0
    result_height: int = 0
    scale: int = 1
    processing_time: float = 0.0
    stage_times: Dict[str, float] = field(default_factory=dict)

    @property
    def pixel_increase(self) -> int:
        return self.scale * self.scale

    @property
    def result_size_mb(self) -> float:
        return self.result_width * self.result_height * 4 / 1024 / 1024

    def summary(self) -> Dict[str, str]:
        return {
            "processing_time": f"{self.processing_time:.2f}s",
            "resolution_increase": f"{self.scale}× ({self.pixel_increase}× pixels)",
            "file_size": f"{self.result_size_mb:.2f} MB",
            "original": f"{self.source_width} × {self.source_height} pixels",
            "result": f"{self.result_width} × {self.result_height} pixels",
        }


@dataclass
class EnhanceResult:
    buffer: PixelBuffer
    stats: ProcessingStats


class UpscalePipeline:
    """Upscale + enhance a PixelBuffer with a fixed stage order."""

    def __init__(
        self,
        config: Optional[EnhanceConfig] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.config = config or EnhanceConfig()
        self.progress = progress

    def _report(self, percent: float, label: str) -> None:
        # progress is fire-and-forget: a failing callback never stops the run
        if self.progress is None:
            return
        try:
            self.progress(percent, label)
        except Exception:
            logger.warning("Progress callback failed at %s%% (%s)", percent, label, exc_info=True)

    def _timed(self, stats: ProcessingStats, name: str, fn, *args):
        t0 = time.perf_counter()
        out = fn(*args)
        stats.stage_times[name] = time.perf_counter() - t0
        logger.debug("Stage %s took %.3fs", name, stats.stage_times[name])
        return out

    def run(self, source: PixelBuffer) -> EnhanceResult:
        """Validate inputs, then run every stage. Raises UpscaleError subclasses before any pixel work."""
        self.config.validate()
        source.validate()
        method = ResampleMethod.parse(self.config.method)
        scale = int(self.config.scale)
        sharpening = float(self.config.sharpening)

        stats = ProcessingStats(
            source_width=source.width,
            source_height=source.height,
            scale=scale,
        )
        logger.info(
            "Enhancing %dx%d image: method=%s scale=%d sharpening=%.2f",
            source.width, source.height, method.value, scale, sharpening,
        )
        start = time.perf_counter()
        self._report(0, "Starting upscaling process...")

        try:
            self._report(10, "Performing initial upscale...")
            buf = self._timed(stats, "resample", resample, source, method, scale)

            self._report(40, "Applying edge preservation...")
            self._timed(stats, "smooth", edge_preserving_smooth, buf)

            if sharpening > 0:
                self._report(60, "Enhancing details...")
                self._timed(stats, "sharpen", unsharp_mask, buf, sharpening)

            self._report(75, "Reducing noise...")
            self._timed(stats, "denoise", bilateral_filter, buf)

            self._report(85, "Enhancing colors...")
            self._timed(stats, "colors", enhance_colors, buf)

            self._report(95, "Normalizing contrast...")
            lo, hi = self._timed(stats, "contrast", normalize_contrast, buf)
            logger.debug("Contrast bounds: min=%d max=%d%s", lo, hi, "" if hi > lo else " (unchanged)")
        except Exception:
            logger.exception("Error processing image")
            self._report(0, "Error processing image")
            raise

        stats.result_width, stats.result_height = buf.width, buf.height
        stats.processing_time = time.perf_counter() - start
        self._report(100, "Complete!")
        logger.info(
            "Done in %.2fs: %dx%d -> %dx%d",
            stats.processing_time, source.width, source.height, buf.width, buf.height,
        )
        return EnhanceResult(buffer=buf, stats=stats)


def enhance(
    source: PixelBuffer,
    method: str,
    scale: int,
    sharpening: float,
    progress: Optional[ProgressCallback] = None,
) -> PixelBuffer:
    """Upscale ``source`` by ``scale`` with ``method`` and run the enhancement chain.

    Returns a new buffer of size (width * scale, height * scale); ``source`` is
    not modified.
    """
    config = EnhanceConfig(method=method, scale=scale, sharpening=sharpening)
    return UpscalePipeline(config, progress=progress).run(source).buffer
