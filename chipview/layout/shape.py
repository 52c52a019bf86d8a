"""
Shape, Point and Layer classes for layout geometry.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Tuple, Union, Sequence
import shapely
from shapely import box


class Point(NamedTuple):
    """World-unit coordinate pair."""
    x: float
    y: float


@dataclass(frozen=True)
class Layer:
    """
    Layer definition.

    Attributes:
        name: Layer name (e.g., 'M1', or 'L68_20' for unnamed GDS layers)
        gds: GDS (layer, datatype) pair the layer was read from
    """
    name: str
    gds: Tuple[int, int] = (0, 0)

    @classmethod
    def from_gds(cls, layer: int, datatype: int) -> 'Layer':
        """Create a layer with the auto-generated name ``L<layer>_<datatype>``."""
        return cls(name=f'L{layer}_{datatype}', gds=(layer, datatype))

    def __str__(self):
        return f"{self.name} ({self.gds[0]}/{self.gds[1]})"


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle.

    Attributes:
        lower_left: Corner with the smallest x and y
        upper_right: Corner with the largest x and y
    """
    lower_left: Point
    upper_right: Point

    @classmethod
    def from_corners(cls, x0: float, y0: float, x1: float, y1: float) -> 'Rect':
        """Create a rectangle from two opposite corners in any order."""
        return cls(
            lower_left=Point(min(x0, x1), min(y0, y1)),
            upper_right=Point(max(x0, x1), max(y0, y1)),
        )

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Return bounding box as (x0, y0, x1, y1)."""
        return (self.lower_left.x, self.lower_left.y,
                self.upper_right.x, self.upper_right.y)

    @property
    def geometry(self) -> shapely.Polygon:
        return box(*self.bounds)

    def __repr__(self):
        return f"Rect({self.lower_left}, {self.upper_right})"


@dataclass(frozen=True)
class Polygon:
    """
    Simple polygon given by its exterior ring, with optional holes.

    Rings are stored open (the first vertex is not repeated). Holes are
    kept for completeness; rendering fills the exterior only.
    """
    exterior: Tuple[Point, ...]
    holes: Tuple[Tuple[Point, ...], ...] = field(default_factory=tuple)

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]],
                    holes: Sequence[Sequence[Sequence[float]]] = ()) -> 'Polygon':
        return cls(
            exterior=_open_ring(points),
            holes=tuple(_open_ring(hole) for hole in holes),
        )

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Return bounding box of the exterior as (x0, y0, x1, y1)."""
        xs = [p.x for p in self.exterior]
        ys = [p.y for p in self.exterior]
        return (min(xs), min(ys), max(xs), max(ys))

    @property
    def geometry(self) -> shapely.Geometry:
        if len(self.exterior) < 3:
            # Shapely refuses rings with fewer than 3 distinct coordinates
            return shapely.LineString(self.exterior) if len(self.exterior) > 1 \
                else shapely.Point(self.exterior[0])
        # A hole needs 3 points to be a ring; shorter ones cannot be built
        holes = [hole for hole in self.holes if len(hole) >= 3]
        return shapely.Polygon(self.exterior, holes=holes or None)

    def __repr__(self):
        return f"Polygon({len(self.exterior)} vertices, {len(self.holes)} holes)"


Shape = Union[Rect, Polygon]


def _open_ring(points: Sequence[Sequence[float]]) -> Tuple[Point, ...]:
    ring = tuple(Point(float(x), float(y)) for x, y in points)
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring = ring[:-1]
    return ring


def shape_from_points(points: Sequence[Sequence[float]]) -> Shape:
    """
    Build a shape from a ring of vertices.

    A four-vertex ring whose edges are all axis-aligned becomes a
    :class:`Rect`; anything else becomes a :class:`Polygon`.
    """
    ring = _open_ring(points)
    if len(ring) == 4:
        xs = {p.x for p in ring}
        ys = {p.y for p in ring}
        edges_aligned = all(
            a.x == b.x or a.y == b.y
            for a, b in zip(ring, ring[1:] + ring[:1])
        )
        if len(xs) == 2 and len(ys) == 2 and edges_aligned:
            return Rect.from_corners(min(xs), min(ys), max(xs), max(ys))
    return Polygon(exterior=ring)
