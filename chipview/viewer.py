"""
Viewer - one redraw of the layout viewport.

Hosts (the Qt window, the ``render`` command) call :meth:`Viewer.draw` with
the pixel rectangle they want filled and a surface to draw on.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from chipview.backends.base import Surface
from chipview.config import ViewerConfig
from chipview.coordinator import ParseCoordinator, ParseJob, ParseOutcome
from chipview.layout.bounds import BoundingBox, aggregate
from chipview.layout.transform import Rectangle, ScaleTransform, build
from chipview.render import ShapeRenderer


@dataclass(frozen=True)
class Frame:
    """What one redraw did."""
    outcome: ParseOutcome
    bounds: Optional[BoundingBox] = None
    transform: Optional[ScaleTransform] = None
    shapes_drawn: int = 0


class Viewer:
    """
    Layout viewport backed by a :class:`ParseCoordinator`.

    Example:
        viewer = Viewer()
        viewer.open('top.oas')
        ...
        viewer.draw(Rectangle(0, 0, 420, 420), surface)
    """

    def __init__(self, coordinator: Optional[ParseCoordinator] = None,
                 config: Optional[ViewerConfig] = None):
        self.coordinator = coordinator or ParseCoordinator()
        self.config = config or ViewerConfig()
        self.renderer = ShapeRenderer(self.config)

    def open(self, path: str | Path) -> ParseJob:
        return self.coordinator.open(path)

    def draw(self, viewport: Rectangle, surface: Surface) -> Frame:
        outcome = self.coordinator.poll()
        self.renderer.draw_background(outcome, viewport, surface)
        if not outcome.is_ready:
            return Frame(outcome)

        bounds = aggregate(outcome.database)
        if bounds is None:
            # Parsed, but nothing to draw
            return Frame(outcome)

        transform = build(bounds, viewport, self.config.margin)
        drawn = self.renderer.render(outcome.database, transform, surface)
        return Frame(outcome, bounds=bounds, transform=transform, shapes_drawn=drawn)
