"""
Transform - world to screen mapping for the viewport.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from chipview.layout.bounds import BoundingBox


@dataclass(frozen=True)
class Rectangle:
    """Pixel-space rectangle. ``(x, y)`` is the top-left corner."""
    x: float
    y: float
    width: float
    height: float

    def inset(self, margin: float) -> 'Rectangle':
        return Rectangle(self.x + margin, self.y + margin,
                         self.width - 2 * margin, self.height - 2 * margin)


# The drawing area handed in by the host for one redraw
Viewport = Rectangle


@dataclass(frozen=True)
class ScaleTransform:
    """
    Uniform scale plus translation, with the y axis flipped.

    World y grows upward, screen y grows downward, so ``map_y`` subtracts.

    Attributes:
        scale: Pixels per world unit
        offset_x: Screen x of world ``origin_x``
        offset_y: Screen y of world ``origin_y``
        origin_x, origin_y: World point pinned to the offsets
    """
    scale: float
    offset_x: float
    offset_y: float
    origin_x: float
    origin_y: float
    flip_y: bool = True

    def map_x(self, x: float) -> float:
        return self.offset_x + (x - self.origin_x) * self.scale

    def map_y(self, y: float) -> float:
        return self.offset_y - (y - self.origin_y) * self.scale

    def map_point(self, x: float, y: float) -> Tuple[float, float]:
        return self.map_x(x), self.map_y(y)

    def map_points(self, points: Sequence[Sequence[float]]) -> np.ndarray:
        """Map an (N, 2) array of world points to screen points."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        out = np.empty_like(pts)
        out[:, 0] = self.offset_x + (pts[:, 0] - self.origin_x) * self.scale
        out[:, 1] = self.offset_y - (pts[:, 1] - self.origin_y) * self.scale
        return out


def build(bounds: BoundingBox, viewport: Rectangle, margin: float) -> ScaleTransform:
    """
    Fit *bounds* into *viewport* minus *margin* on every side.

    The scale is the smaller of the two axis fits so the whole layout stays
    visible. Both the world extent and the available pixel extent are
    floored at 1 so degenerate layouts and tiny viewports never divide
    by zero.
    """
    world_w = max(bounds.max_x - bounds.min_x, 1.0)
    world_h = max(bounds.max_y - bounds.min_y, 1.0)
    avail_w = max(viewport.width - 2 * margin, 1.0)
    avail_h = max(viewport.height - 2 * margin, 1.0)
    scale = min(avail_w / world_w, avail_h / world_h)

    return ScaleTransform(
        scale=scale,
        offset_x=viewport.x + margin,
        offset_y=viewport.y + viewport.height - margin,
        origin_x=bounds.min_x,
        origin_y=bounds.min_y,
    )
