"""Layout data model: shapes, database, bounds and viewport transform."""

from chipview.layout.shape import Layer, Point, Polygon, Rect, Shape, shape_from_points
from chipview.layout.bounds import BoundingBox, aggregate, merge_all
from chipview.layout.database import LayoutCell, LayoutDatabase
from chipview.layout.transform import Rectangle, ScaleTransform, Viewport, build

__all__ = [
    'Layer',
    'Point',
    'Polygon',
    'Rect',
    'Shape',
    'shape_from_points',
    'BoundingBox',
    'aggregate',
    'merge_all',
    'LayoutCell',
    'LayoutDatabase',
    'Rectangle',
    'ScaleTransform',
    'Viewport',
    'build',
]
