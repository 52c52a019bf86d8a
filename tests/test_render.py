from pathlib import Path

import pytest

from chipview.backends.recording import RecordingSurface
from chipview.config import ViewerConfig
from chipview.coordinator import OutcomeStatus, ParseOutcome
from chipview.layout.bounds import BoundingBox
from chipview.layout.database import LayoutDatabase
from chipview.layout.shape import Layer, Polygon, Rect
from chipview.layout.transform import Rectangle, build
from chipview.render import ShapeRenderer
from chipview.viewer import Viewer

from conftest import make_db

CONFIG = ViewerConfig()
VIEWPORT = Rectangle(0, 0, 420, 420)


class StaticCoordinator:
    """Stands in for ParseCoordinator with a fixed outcome."""

    def __init__(self, outcome: ParseOutcome):
        self.outcome = outcome

    def poll(self) -> ParseOutcome:
        return self.outcome


def ready(db: LayoutDatabase) -> ParseOutcome:
    return ParseOutcome(OutcomeStatus.READY, path=Path('x.gds'), database=db)


def test_rect_is_drawn_top_left_with_positive_size():
    db = LayoutDatabase()
    db.add_shape('TOP', Layer.from_gds(1, 0), Rect.from_corners(0, 0, 100, 50))
    transform = build(BoundingBox(0, 0, 100, 100), VIEWPORT, 8)
    surface = RecordingSurface()

    assert ShapeRenderer(CONFIG).render(db, transform, surface) == 1

    (prim,) = surface.primitives
    assert prim.kind == 'rect'
    assert prim.color == CONFIG.rect_color
    # Lower-left (0, 0) maps to (8, 412), upper-right (100, 50) to (412, 210)
    assert prim.bounds.x == pytest.approx(8)
    assert prim.bounds.y == pytest.approx(210)
    assert prim.bounds.width == pytest.approx(404)
    assert prim.bounds.height == pytest.approx(202)


def test_polygon_is_drawn_as_closed_path():
    db = LayoutDatabase()
    db.add_shape('TOP', Layer.from_gds(2, 0),
                 Polygon.from_points([(0, 0), (100, 0), (50, 100)]))
    transform = build(BoundingBox(0, 0, 100, 100), VIEWPORT, 8)
    surface = RecordingSurface()

    ShapeRenderer(CONFIG).render(db, transform, surface)

    (prim,) = surface.primitives
    assert prim.kind == 'path'
    assert prim.color == CONFIG.polygon_color
    assert [c for v in prim.vertices for c in v] == pytest.approx([8, 412, 412, 412, 210, 8])


def test_polygon_holes_are_not_subtracted():
    db = LayoutDatabase()
    db.add_shape('TOP', Layer.from_gds(2, 0), Polygon.from_points(
        [(0, 0), (10, 0), (10, 10), (0, 10), (0, 5)],
        holes=[[(2, 2), (4, 2), (4, 4)]],
    ))
    surface = RecordingSurface()
    ShapeRenderer(CONFIG).render(db, build(BoundingBox(0, 0, 10, 10), VIEWPORT, 8), surface)
    (prim,) = surface.primitives
    assert len(prim.vertices) == 5


def test_degenerate_polygon_is_skipped():
    db = make_db()
    db.add_shape('TOP', Layer.from_gds(3, 0), Polygon.from_points([(10, 10), (20, 20)]))
    surface = RecordingSurface()

    drawn = ShapeRenderer(CONFIG).render(db, build(BoundingBox(0, 0, 100, 100), VIEWPORT, 8), surface)

    assert drawn == 2
    assert surface.counts() == {'rect': 1, 'path': 1}


@pytest.mark.parametrize('outcome, kind, color', [
    (ParseOutcome(OutcomeStatus.NOT_STARTED), 'rounded_rect', CONFIG.background_color),
    (ParseOutcome(OutcomeStatus.PENDING, path=Path('a.gds')), 'rounded_rect', CONFIG.background_color),
    (ParseOutcome(OutcomeStatus.ERROR, path=Path('a.gds'), error='boom'), 'rect', CONFIG.error_color),
    (ready(LayoutDatabase()), 'rect', CONFIG.success_color),
])
def test_background_matches_parse_state(outcome, kind, color):
    surface = RecordingSurface()
    ShapeRenderer(CONFIG).draw_background(outcome, VIEWPORT, surface)
    (prim,) = surface.primitives
    assert prim.kind == kind
    assert prim.color == color
    assert prim.bounds == VIEWPORT
    if kind == 'rounded_rect':
        assert prim.corner_radius == CONFIG.corner_radius


def test_viewer_draws_background_then_shapes():
    viewer = Viewer(StaticCoordinator(ready(make_db())), CONFIG)
    surface = RecordingSurface()

    frame = viewer.draw(VIEWPORT, surface)

    assert [p.kind for p in surface.primitives] == ['rect', 'rect', 'path']
    assert surface.primitives[0].color == CONFIG.success_color
    assert frame.bounds == BoundingBox(0, 0, 100, 100)
    assert frame.transform.scale == pytest.approx(4.04)
    assert frame.shapes_drawn == 2


def test_viewer_with_empty_layout_draws_only_success_tint():
    db = LayoutDatabase()
    db.add_cell('EMPTY')
    viewer = Viewer(StaticCoordinator(ready(db)), CONFIG)
    surface = RecordingSurface()

    frame = viewer.draw(VIEWPORT, surface)

    assert len(surface.primitives) == 1
    assert surface.primitives[0].color == CONFIG.success_color
    assert frame.bounds is None
    assert frame.shapes_drawn == 0


def test_viewer_error_draws_no_shapes():
    outcome = ParseOutcome(OutcomeStatus.ERROR, path=Path('a.gds'), error='bad')
    surface = RecordingSurface()
    frame = Viewer(StaticCoordinator(outcome), CONFIG).draw(VIEWPORT, surface)
    assert [p.color for p in surface.primitives] == [CONFIG.error_color]
    assert frame.outcome.is_error


def test_margin_comes_from_config():
    config = ViewerConfig(margin=20)
    viewer = Viewer(StaticCoordinator(ready(make_db())), config)
    frame = viewer.draw(VIEWPORT, RecordingSurface())
    assert frame.transform.scale == pytest.approx(3.8)
