import math

import numpy as np
import pytest

from chipview.layout.bounds import BoundingBox
from chipview.layout.transform import Rectangle, build


def test_square_layout_in_square_viewport():
    t = build(BoundingBox(0, 0, 100, 100), Rectangle(0, 0, 420, 420), margin=8)
    assert t.scale == pytest.approx(4.04)
    assert t.map_point(0, 0) == pytest.approx((8, 412))
    assert t.map_point(100, 100) == pytest.approx((412, 8))
    assert t.flip_y


def test_scale_uses_the_tighter_axis():
    t = build(BoundingBox(0, 0, 200, 50), Rectangle(0, 0, 416, 416), margin=8)
    assert t.scale == pytest.approx(2.0)
    # Height is not filled; layout sits on the bottom margin
    assert t.map_y(0) == pytest.approx(408)
    assert t.map_y(50) == pytest.approx(308)


def test_viewport_offset_is_applied():
    t = build(BoundingBox(-50, -50, 50, 50), Rectangle(100, 30, 220, 220), margin=10)
    assert t.scale == pytest.approx(2.0)
    assert t.map_point(-50, -50) == pytest.approx((110, 240))
    assert t.map_point(50, 50) == pytest.approx((310, 40))


def test_larger_world_y_is_higher_on_screen():
    t = build(BoundingBox(0, 0, 10, 10), Rectangle(0, 0, 100, 100), margin=0)
    for y1, y2 in [(1, 0), (10, 9.5), (5, -3)]:
        assert t.map_y(y1) < t.map_y(y2)


def test_degenerate_extents_are_floored():
    # Single point: world extent floors to 1
    t = build(BoundingBox(5, 5, 5, 5), Rectangle(0, 0, 100, 100), margin=10)
    assert t.scale == pytest.approx(80)
    assert t.map_point(5, 5) == pytest.approx((10, 90))

    # Viewport smaller than the margins: available extent floors to 1
    t = build(BoundingBox(0, 0, 10, 10), Rectangle(0, 0, 4, 4), margin=8)
    assert t.scale == pytest.approx(0.1)


@pytest.mark.parametrize('bounds', [
    BoundingBox(0, 0, 1, 1),
    BoundingBox(0, 0, 1e9, 1),
    BoundingBox(-1e6, -3, 1e6, 7),
    BoundingBox(0.5, 0.5, 1.5, 2e7),
])
@pytest.mark.parametrize('size', [(1, 1), (1, 5000), (420, 420), (3840, 7)])
def test_scale_is_finite_and_positive(bounds, size):
    width, height = size
    t = build(bounds, Rectangle(0, 0, width, height), margin=8)
    assert math.isfinite(t.scale)
    assert t.scale > 0


@pytest.mark.parametrize('bounds, viewport, margin', [
    (BoundingBox(0, 0, 100, 100), Rectangle(0, 0, 420, 420), 8),
    (BoundingBox(-3, 2, 17, 5), Rectangle(15, 40, 640, 200), 12),
    (BoundingBox(1000, 1000, 1001, 3000), Rectangle(0, 0, 300, 800), 0),
])
def test_corners_land_in_inset_viewport(bounds, viewport, margin):
    t = build(bounds, viewport, margin)
    inset = viewport.inset(margin)
    eps = 1e-6
    for x, y in bounds.corners():
        px, py = t.map_point(x, y)
        assert inset.x - eps <= px <= inset.x + inset.width + eps
        assert inset.y - eps <= py <= inset.y + inset.height + eps


def test_map_points_matches_scalar_mapping():
    t = build(BoundingBox(-3, 2, 17, 5), Rectangle(15, 40, 640, 200), 12)
    points = [(-3, 2), (0, 4.5), (17, 5), (8.25, 3.1)]
    mapped = t.map_points(points)
    assert mapped.shape == (4, 2)
    expected = np.array([t.map_point(x, y) for x, y in points])
    assert np.allclose(mapped, expected, rtol=0, atol=1e-9)
