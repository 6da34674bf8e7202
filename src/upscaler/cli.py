from __future__ import annotations
import argparse
import logging
import os

from .config import EnhanceConfig, PipelineConfig
from .helpers import find_images, load_image_rgba, output_path, save_image_rgba
from .pipeline import UpscalePipeline
from .resample import ResampleMethod
from .viz import Visualizer

logger = logging.getLogger("upscaler")


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Upscale and enhance images")
    g_io = p.add_argument_group("I/O")
    g_io.add_argument("--image", type=str, help="Path to a single image")
    g_io.add_argument("--dir", type=str, help="Path to a directory of images")
    g_io.add_argument("--save_dir", type=str, default=None, help="Output folder")
    g_io.add_argument("--show", action="store_true", help="Display before/after figures")
    g_io.add_argument("-v", "--verbose", action="store_true", help="Log every stage")

    g_up = p.add_argument_group("Upscaling")
    g_up.add_argument("--method", type=str, default="lanczos",
                      choices=[m.value for m in ResampleMethod])
    g_up.add_argument("--scale", type=int, default=2)
    g_up.add_argument("--sharpening", type=float, default=0.5,
                      help="Unsharp mask amount (0 disables sharpening)")
    return p


def _log_progress(percent: float, label: str) -> None:
    logger.info("[%3d%%] %s", round(percent), label)


def _process_one(path: str | os.PathLike, pipe_cfg: PipelineConfig, pipeline: UpscalePipeline, viz: Visualizer) -> None:
    source = load_image_rgba(path)
    logger.info("Loaded %s (%d × %d pixels)", path, source.width, source.height)

    result = pipeline.run(source)
    for key, value in result.stats.summary().items():
        logger.info("  %s: %s", key.replace("_", " "), value)

    if pipe_cfg.show:
        viz.show_before_after(source, result.buffer)

    if pipe_cfg.save_dir:
        out_path = output_path(pipe_cfg.save_dir, path, pipe_cfg.enhance.scale)
        save_image_rgba(out_path, result.buffer)
        logger.info("Saved %s", out_path)


def main(argv=None) -> None:
    parser = build_argparser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    enhance_cfg = EnhanceConfig(method=args.method, scale=args.scale, sharpening=args.sharpening)
    try:
        enhance_cfg.validate()
    except ValueError as e:
        parser.error(str(e))
    pipe_cfg = PipelineConfig(enhance=enhance_cfg, save_dir=args.save_dir, show=args.show)

    pipeline = UpscalePipeline(enhance_cfg, progress=_log_progress)
    viz = Visualizer()

    if args.image:
        _process_one(args.image, pipe_cfg, pipeline, viz)
    elif args.dir:
        for path in find_images(args.dir):
            _process_one(path, pipe_cfg, pipeline, viz)
    else:
        parser.error("Provide either --image or --dir")


if __name__ == "__main__":
    main()
