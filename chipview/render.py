"""
ShapeRenderer - emits draw primitives for a layout database.
"""

from chipview.backends.base import Surface
from chipview.config import ViewerConfig
from chipview.coordinator import OutcomeStatus, ParseOutcome
from chipview.layout.database import LayoutDatabase
from chipview.layout.shape import Polygon, Rect
from chipview.layout.transform import Rectangle, ScaleTransform
from chipview.logging import logger


class ShapeRenderer:
    """
    Draws shapes and background tints onto a :class:`Surface`.

    Rectangles become one ``fill_rect`` each, polygons one ``fill_path``
    through their exterior ring. Polygon holes are not subtracted: the
    exterior is filled as a whole.
    """

    def __init__(self, config: ViewerConfig | None = None):
        self.config = config or ViewerConfig()

    def draw_background(self, outcome: ParseOutcome, bounds: Rectangle,
                        surface: Surface) -> None:
        """Draw exactly one background primitive for the parse state."""
        if outcome.status is OutcomeStatus.READY:
            surface.fill_rect(bounds, self.config.success_color)
        elif outcome.status is OutcomeStatus.ERROR:
            surface.fill_rect(bounds, self.config.error_color)
        else:
            surface.fill_rounded_rect(bounds, self.config.corner_radius,
                                      self.config.background_color)

    def render(self, db: LayoutDatabase, transform: ScaleTransform,
               surface: Surface) -> int:
        """Draw every shape of every (cell, layer) pair. Returns the number drawn."""
        drawn = 0
        for cell in db.cells():
            for layer in db.layers():
                for shape_id, shape in db.shapes(cell, layer):
                    if isinstance(shape, Rect):
                        self._draw_rect(shape, transform, surface)
                        drawn += 1
                    elif isinstance(shape, Polygon):
                        if len(shape.exterior) < 3:
                            logger.debug(f"Skipping degenerate polygon {shape_id} "
                                         f"in {cell} on {layer.name}")
                            continue
                        self._draw_polygon(shape, transform, surface)
                        drawn += 1
        return drawn

    def _draw_rect(self, rect: Rect, transform: ScaleTransform,
                   surface: Surface) -> None:
        x0 = transform.map_x(rect.lower_left.x)
        y0 = transform.map_y(rect.lower_left.y)
        x1 = transform.map_x(rect.upper_right.x)
        y1 = transform.map_y(rect.upper_right.y)
        # map_y flips, so the lower-left corner ends up at the larger pixel y
        bounds = Rectangle(
            x=min(x0, x1),
            y=min(y0, y1),
            width=abs(x1 - x0),
            height=abs(y1 - y0),
        )
        surface.fill_rect(bounds, self.config.rect_color)

    def _draw_polygon(self, polygon: Polygon, transform: ScaleTransform,
                      surface: Surface) -> None:
        vertices = transform.map_points(polygon.exterior)
        surface.fill_path([(float(x), float(y)) for x, y in vertices],
                          self.config.polygon_color)
