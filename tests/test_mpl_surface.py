import numpy as np

from chipview.backends.mpl import MatplotlibSurface
from chipview.layout.transform import Rectangle

RED = (1.0, 0.0, 0.0, 1.0)
BLUE = (0.0, 0.0, 1.0, 1.0)


def test_rect_is_drawn_in_pixel_coordinates():
    surface = MatplotlibSurface(100, 100)
    surface.fill_rect(Rectangle(10, 20, 30, 40), RED)
    image = surface.to_array()

    assert image.shape == (100, 100, 4)
    # Row index is the screen y, growing downward
    assert tuple(image[40, 25]) == (255, 0, 0, 255)
    assert tuple(image[10, 25]) == (255, 255, 255, 255)
    assert tuple(image[70, 25]) == (255, 255, 255, 255)


def test_later_primitives_cover_earlier_ones():
    surface = MatplotlibSurface(100, 100)
    surface.fill_rounded_rect(surface.viewport, 8, RED)
    surface.fill_path([(0, 100), (100, 100), (50, 0)], BLUE)
    image = surface.to_array()

    assert tuple(image[90, 50]) == (0, 0, 255, 255)
    assert tuple(image[10, 5]) == (255, 0, 0, 255)
    # Rounded corner leaves the very corner pixel unpainted
    assert tuple(image[0, 0]) == (255, 255, 255, 255)


def test_save_writes_png(tmp_path):
    surface = MatplotlibSurface(64, 48)
    surface.fill_rect(Rectangle(0, 0, 64, 48), RED)
    path = surface.save(tmp_path / 'out.png')
    assert path.read_bytes()[:8] == b'\x89PNG\r\n\x1a\n'
    assert np.asarray(surface.to_array()).shape == (48, 64, 4)
