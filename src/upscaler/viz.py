from __future__ import annotations

import matplotlib.pyplot as plt

from .buffer import PixelBuffer


class Visualizer:
    """Before/after preview for the CLI's --show flag. Library code never opens windows."""

    def __init__(self, figsize: tuple = (12, 6)) -> None:
        self.figsize = figsize

    def show_before_after(self, source: PixelBuffer, result: PixelBuffer, show: bool = True) -> plt.Figure:
        fig, (ax_src, ax_out) = plt.subplots(1, 2, figsize=self.figsize)
        panels = (
            (ax_src, source, "Original"),
            (ax_out, result, f"Upscaled ×{result.width // max(source.width, 1)}"),
        )
        for ax, buf, label in panels:
            # nearest keeps individual source pixels visible next to the resampled output
            ax.imshow(buf.as_array(), interpolation="nearest")
            ax.set_title(f"{label} ({buf.width} × {buf.height})")
            ax.axis("off")

        fig.tight_layout()
        if show:
            plt.show()
        return fig
