from __future__ import annotations
from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt

from .raster import Raster


def _draw(ax: plt.Axes, raster: Raster, title: str) -> None:
    ax.imshow(raster.pixels, interpolation="nearest")
    ax.set_title(f"{title} ({raster.width}x{raster.height})")
    ax.axis("off")


class Visualizer:
    """Preview windows for --show. Library code never opens a window by itself."""

    @staticmethod
    def show_raster(raster: Raster, title: str = "Image", show: bool = True) -> plt.Figure:
        fig, ax = plt.subplots(figsize=(6, 6))
        _draw(ax, raster, title)
        if show:
            plt.show()
        return fig

    @staticmethod
    def show_side_by_side(
        rasters: Sequence[Raster],
        titles: Optional[Sequence[str]] = None,
        figsize: Tuple[int, int] = (12, 6),
        show: bool = True,
    ) -> plt.Figure:
        titles = titles or [f"Image {i + 1}" for i in range(len(rasters))]
        fig, axes = plt.subplots(1, len(rasters), figsize=figsize, squeeze=False)
        for ax, raster, title in zip(axes[0], rasters, titles):
            _draw(ax, raster, title)
        fig.tight_layout()
        if show:
            plt.show()
        return fig
