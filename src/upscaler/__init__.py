from .buffer import PixelBuffer
from .errors import UpscaleError, InvalidDimensions, EmptyBuffer, UnsupportedMethod, InvalidSharpening
from .config import EnhanceConfig, PipelineConfig
from .resample import (
    ResampleMethod, RESAMPLERS, resample, cubic_weight, lanczos_kernel,
    bilinear_resample, bicubic_resample, lanczos_resample,
)
from .filters import binomial_blur, unsharp_mask, edge_preserving_smooth, bilateral_filter
from .tone import enhance_colors, luminance_histogram, percentile_bounds, normalize_contrast
from .pipeline import UpscalePipeline, EnhanceResult, ProcessingStats, enhance
from .helpers import find_images, load_image_rgba, output_path, save_image_rgba

__all__ = [
    "PixelBuffer",
    "UpscaleError", "InvalidDimensions", "EmptyBuffer", "UnsupportedMethod", "InvalidSharpening",
    "EnhanceConfig", "PipelineConfig",
    "ResampleMethod", "RESAMPLERS", "resample", "cubic_weight", "lanczos_kernel",
    "bilinear_resample", "bicubic_resample", "lanczos_resample",
    "binomial_blur", "unsharp_mask", "edge_preserving_smooth", "bilateral_filter",
    "enhance_colors", "luminance_histogram", "percentile_bounds", "normalize_contrast",
    "UpscalePipeline", "EnhanceResult", "ProcessingStats", "enhance",
    "find_images", "load_image_rgba", "output_path", "save_image_rgba",
]
