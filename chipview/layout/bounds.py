"""
BoundingBox and the aggregate over a whole layout database.
"""

from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from chipview.layout.database import LayoutDatabase


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned box in world units.

    Attributes:
        min_x, min_y: Lower-left corner
        max_x, max_y: Upper-right corner
    """
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self):
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(
                f"Inverted bounding box: ({self.min_x}, {self.min_y}, "
                f"{self.max_x}, {self.max_y})"
            )

    @classmethod
    def from_bounds(cls, bounds: Tuple[float, float, float, float]) -> 'BoundingBox':
        """Create from an (x0, y0, x1, y1) tuple as returned by shapely."""
        x0, y0, x1, y1 = bounds
        return cls(float(x0), float(y0), float(x1), float(y1))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def corners(self) -> Tuple[Tuple[float, float], ...]:
        """Return the four corners, counter-clockwise from lower-left."""
        return (
            (self.min_x, self.min_y),
            (self.max_x, self.min_y),
            (self.max_x, self.max_y),
            (self.min_x, self.max_y),
        )

    def merge(self, other: 'BoundingBox') -> 'BoundingBox':
        """Smallest box containing both boxes."""
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def __iter__(self):
        return iter((self.min_x, self.min_y, self.max_x, self.max_y))


def merge_all(boxes: Iterable[Optional[BoundingBox]]) -> Optional[BoundingBox]:
    """Merge boxes, ignoring absent ones. Returns None if nothing contributes."""
    present = [b for b in boxes if b is not None]
    if not present:
        return None
    return reduce(BoundingBox.merge, present)


def aggregate(db: 'LayoutDatabase') -> Optional[BoundingBox]:
    """
    Bounding box spanning every (cell, layer) pair of *db*.

    Returns None for a layout without shapes, which callers treat as
    "nothing to draw".
    """
    return merge_all(
        db.bounding_box(cell, layer)
        for cell in db.cells()
        for layer in db.layers()
    )
