"""
Matplotlib surface - rasterizes draw primitives to an image with the Agg backend.

The axes cover the whole figure and use pixel coordinates with y pointing
down, so primitives can be added exactly as the renderer emits them.
"""

from pathlib import Path
from typing import Sequence, Tuple

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import FancyBboxPatch, Polygon as MplPolygon, Rectangle as MplRectangle

from chipview.backends.base import Color, Surface
from chipview.layout.transform import Rectangle


class MatplotlibSurface(Surface):
    """
    Off-screen surface of *width* x *height* pixels.

    Example:
        surface = MatplotlibSurface(420, 420)
        viewer.draw(surface.viewport, surface)
        surface.save('layout.png')
    """

    def __init__(self, width: int, height: int, dpi: int = 100):
        self.width = int(width)
        self.height = int(height)
        self.dpi = dpi

        self.figure = Figure(figsize=(self.width / dpi, self.height / dpi), dpi=dpi)
        self.canvas = FigureCanvasAgg(self.figure)
        self.ax = self.figure.add_axes((0, 0, 1, 1))
        self.ax.set_xlim(0, self.width)
        self.ax.set_ylim(self.height, 0)
        self.ax.set_axis_off()

    @property
    def viewport(self) -> Rectangle:
        return Rectangle(0.0, 0.0, float(self.width), float(self.height))

    # ------------------------------------------------------------------
    # Surface primitives
    # ------------------------------------------------------------------

    def fill_rounded_rect(self, bounds: Rectangle, corner_radius: float,
                          color: Color) -> None:
        radius = max(0.0, min(corner_radius, bounds.width / 2, bounds.height / 2))
        self.ax.add_patch(FancyBboxPatch(
            (bounds.x, bounds.y), bounds.width, bounds.height,
            boxstyle=f'round,pad=0,rounding_size={radius}',
            linewidth=0, facecolor=color, antialiased=False,
        ))

    def fill_rect(self, bounds: Rectangle, color: Color) -> None:
        self.ax.add_patch(MplRectangle(
            (bounds.x, bounds.y), bounds.width, bounds.height,
            linewidth=0, facecolor=color, antialiased=False,
        ))

    def fill_path(self, vertices: Sequence[Tuple[float, float]],
                  color: Color) -> None:
        self.ax.add_patch(MplPolygon(
            np.asarray(vertices, dtype=float), closed=True,
            linewidth=0, facecolor=color, antialiased=False,
        ))

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_array(self) -> np.ndarray:
        """Render and return the image as an (H, W, 4) uint8 RGBA array."""
        self.canvas.draw()
        return np.asarray(self.canvas.buffer_rgba()).copy()

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        self.figure.savefig(path, dpi=self.dpi)
        return path
