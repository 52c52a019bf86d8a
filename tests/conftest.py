import os
import threading
from pathlib import Path

import gdstk
import pytest

from chipview import set_log_level
from chipview.backends.base import LayoutReader
from chipview.errors import ParseError
from chipview.layout.database import LayoutDatabase
from chipview.layout.shape import Layer, Polygon, Rect

set_log_level('SILENT')


def build_library() -> gdstk.Library:
    """Small two-cell library: rectangle, triangle and path in TOP, one rect in SUB."""
    lib = gdstk.Library('TESTLIB', unit=1e-6, precision=1e-9)
    sub = lib.new_cell('SUB')
    sub.add(gdstk.rectangle((0, 0), (10, 10), layer=1, datatype=0))

    top = lib.new_cell('TOP')
    top.add(gdstk.rectangle((0, 0), (100, 50), layer=1, datatype=0))
    top.add(gdstk.Polygon([(0, 60), (40, 60), (20, 100)], layer=2, datatype=0))
    top.add(gdstk.FlexPath([(0, -20), (60, -20)], 4, layer=3, datatype=0))
    top.add(gdstk.Reference(sub, (200, 200)))
    return lib


@pytest.fixture
def gds_file(tmp_path) -> Path:
    path = tmp_path / 'test.gds'
    build_library().write_gds(str(path))
    return path


@pytest.fixture
def oas_file(tmp_path) -> Path:
    path = tmp_path / 'test.oas'
    build_library().write_oas(str(path))
    return path


def make_db(name='LIB') -> LayoutDatabase:
    """Database with one rect and one triangle, spanning (0, 0) - (100, 100)."""
    db = LayoutDatabase(name=name)
    db.add_shape('TOP', Layer.from_gds(1, 0), Rect.from_corners(0, 0, 100, 50))
    db.add_shape('TOP', Layer.from_gds(2, 0),
                 Polygon.from_points([(0, 60), (100, 60), (50, 100)]))
    return db


class BlockingReader(LayoutReader):
    """
    Reader whose result per file name is released by the test.

    ``outcomes`` maps a file name to a LayoutDatabase or an exception;
    the read blocks until ``release(name)`` is called.
    """

    def __init__(self, outcomes: dict):
        self.outcomes = outcomes
        self.gates = {name: threading.Event() for name in outcomes}
        self.started = {name: threading.Event() for name in outcomes}

    def release(self, name: str) -> None:
        self.gates[name].set()

    def read_layout(self, stream):
        name = Path(stream.name).name
        self.started[name].set()
        if not self.gates[name].wait(timeout=10):
            raise ParseError(f'{name} was never released')
        outcome = self.outcomes[name]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def layout_files(tmp_path):
    """Two placeholder files whose content is supplied by BlockingReader."""
    paths = {}
    for name in ('a.gds', 'b.gds'):
        paths[name] = tmp_path / name
        paths[name].write_bytes(b'placeholder')
    return paths


@pytest.fixture(scope='session')
def qapp():
    """One QApplication for every Qt test, on the offscreen platform."""
    os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
    QtWidgets = pytest.importorskip('PyQt5.QtWidgets')
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
