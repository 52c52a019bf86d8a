"""
LayoutDatabase - hierarchical store of cells, layers and shapes.
"""

from typing import Dict, Iterator, List, Optional, Tuple

import shapely

from chipview.layout.bounds import BoundingBox
from chipview.layout.shape import Layer, Polygon, Shape


class LayoutCell:
    """
    A named group of shapes, organized by layer.

    Cell instances (references to other cells) are recorded by name only;
    the viewer iterates each cell's own shapes.
    """

    def __init__(self, name: str):
        self.name = name
        self.shapes: Dict[Layer, List[Shape]] = {}
        self.references: List[str] = []

    def __len__(self):
        return sum(len(shapes) for shapes in self.shapes.values())

    def __repr__(self):
        return f"LayoutCell({self.name}, shapes={len(self)})"


class LayoutDatabase:
    """
    Read-only view of a parsed layout, as consumed by the renderer.

    Readers populate it through :meth:`add_shape`; after it has been
    published to the render path it is never mutated.

    Attributes:
        name: Library name
        unit: Size of one database unit in meters (e.g. 1e-6 for GDS files
            written in micrometers)
    """

    def __init__(self, name: str = 'LIB', unit: float = 1e-6):
        self.name = name
        self.unit = unit
        self._cells: Dict[str, LayoutCell] = {}
        self._layers: Dict[Layer, None] = {}
        self._bbox_cache: Dict[Tuple[str, Layer], Optional[BoundingBox]] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_cell(self, name: str) -> LayoutCell:
        """Return the cell called *name*, creating it if needed."""
        if name not in self._cells:
            self._cells[name] = LayoutCell(name)
        return self._cells[name]

    def add_shape(self, cell: str, layer: Layer, shape: Shape) -> None:
        if isinstance(shape, Polygon) and not shape.exterior:
            raise ValueError(f"Empty polygon on layer {layer} in cell '{cell}'")
        self.add_cell(cell).shapes.setdefault(layer, []).append(shape)
        self._layers.setdefault(layer)
        self._bbox_cache.pop((cell, layer), None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def cells(self) -> List[str]:
        return list(self._cells)

    def cell(self, name: str) -> LayoutCell:
        return self._cells[name]

    def layers(self) -> List[Layer]:
        return list(self._layers)

    def bounding_box(self, cell: str, layer: Layer) -> Optional[BoundingBox]:
        """
        Bounding box of the shapes of *cell* on *layer*.

        Returns None when the cell has no shapes on that layer.
        """
        key = (cell, layer)
        if key not in self._bbox_cache:
            shapes = self._shapes_of(cell, layer)
            if shapes:
                bounds = shapely.total_bounds([s.geometry for s in shapes])
                self._bbox_cache[key] = BoundingBox.from_bounds(bounds)
            else:
                self._bbox_cache[key] = None
        return self._bbox_cache[key]

    def shapes(self, cell: str, layer: Layer) -> Iterator[Tuple[int, Shape]]:
        """Lazily yield ``(shape_id, shape)`` for *cell* on *layer*."""
        for shape_id, shape in enumerate(self._shapes_of(cell, layer)):
            yield shape_id, shape

    def shape_count(self) -> int:
        return sum(len(c) for c in self._cells.values())

    def _shapes_of(self, cell: str, layer: Layer) -> List[Shape]:
        c = self._cells.get(cell)
        if c is None:
            return []
        return c.shapes.get(layer, [])

    def __repr__(self):
        return (f"LayoutDatabase({self.name}, cells={len(self._cells)}, "
                f"layers={len(self._layers)}, shapes={self.shape_count()})")
