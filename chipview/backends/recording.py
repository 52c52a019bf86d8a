"""Surface that records draw calls instead of rasterizing them."""

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from chipview.backends.base import Color, Surface
from chipview.layout.transform import Rectangle


@dataclass(frozen=True)
class Primitive:
    """
    One recorded draw call.

    Attributes:
        kind: 'rounded_rect', 'rect' or 'path'
        color: Fill color
        bounds: Rectangle for rect kinds, None for paths
        vertices: Path vertices, empty for rect kinds
        corner_radius: Corner radius for 'rounded_rect'
    """
    kind: str
    color: Color
    bounds: Rectangle | None = None
    vertices: Tuple[Tuple[float, float], ...] = ()
    corner_radius: float = 0.0


@dataclass
class RecordingSurface(Surface):
    """Collects primitives in draw order. Used by tests and ``chipview inspect``."""
    primitives: List[Primitive] = field(default_factory=list)

    def fill_rounded_rect(self, bounds: Rectangle, corner_radius: float,
                          color: Color) -> None:
        self.primitives.append(Primitive('rounded_rect', tuple(color), bounds=bounds,
                                         corner_radius=corner_radius))

    def fill_rect(self, bounds: Rectangle, color: Color) -> None:
        self.primitives.append(Primitive('rect', tuple(color), bounds=bounds))

    def fill_path(self, vertices: Sequence[Tuple[float, float]],
                  color: Color) -> None:
        verts = tuple((float(x), float(y)) for x, y in vertices)
        self.primitives.append(Primitive('path', tuple(color), vertices=verts))

    def counts(self) -> Counter:
        return Counter(p.kind for p in self.primitives)

    def clear(self) -> None:
        self.primitives.clear()
