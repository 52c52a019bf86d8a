"""GDS/OASIS layout reader - imports layout files into a LayoutDatabase."""

import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional

import gdstk

from chipview.backends.base import LayoutReader
from chipview.errors import ParseError
from chipview.layout.database import LayoutDatabase
from chipview.layout.shape import Layer, shape_from_points
from chipview.logging import logger


class GDSReader(LayoutReader):
    """Read a GDSII or OASIS file into a :class:`LayoutDatabase`.

    The format is picked from the file suffix: ``.oas`` is read as OASIS,
    anything else as GDSII. Coordinates are kept in the file's user units
    (``lib.unit`` meters per unit, stored as ``LayoutDatabase.unit``).

    Every cell's own polygons and paths are imported; paths are expanded
    to polygons. References to other cells are recorded by name but not
    flattened. Four-vertex axis-aligned polygons become :class:`Rect`.

    Attributes:
        oas_unit: User unit OASIS geometry is converted to (OASIS files only
            store a precision, not a user unit)
        layer_names: Optional ``(layer, datatype) -> name`` mapping. Pairs
            not in the mapping get auto-generated names (``L<layer>_<datatype>``).
    """

    suffixes = ('.gds', '.gds2', '.gdsii', '.oas')

    def __init__(self, layer_names: Optional[dict[tuple[int, int], str]] = None,
                 oas_unit: float = 1e-6):
        self.layer_names = layer_names or {}
        self.oas_unit = oas_unit
        self._layers: dict[tuple[int, int], Layer] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read_layout(self, stream: BinaryIO) -> LayoutDatabase:
        """Parse an opened layout file.

        gdstk only reads from file names, so a stream backed by a file on
        disk is read through its name; any other stream is spilled to a
        temporary file first.
        """
        name = getattr(stream, 'name', None)
        if isinstance(name, (str, os.PathLike)) and Path(name).is_file():
            return self.read(name)

        suffix = Path(name).suffix if isinstance(name, str) else '.gds'
        fd, tmp_path = tempfile.mkstemp(suffix=suffix)
        try:
            with os.fdopen(fd, 'wb') as tmp:
                tmp.write(stream.read())
            return self.read(tmp_path)
        finally:
            os.unlink(tmp_path)

    def read(self, path: str | Path) -> LayoutDatabase:
        """Read the layout file at *path*.

        Raises:
            ParseError: If gdstk rejects the file or it contains no cells.
        """
        path = Path(path)
        is_oasis = path.suffix.lower() == '.oas'
        try:
            if is_oasis:
                lib = gdstk.read_oas(str(path), unit=self.oas_unit)
            else:
                lib = gdstk.read_gds(str(path))
        except (RuntimeError, OSError, ValueError, TypeError) as e:
            fmt = 'OASIS' if is_oasis else 'GDSII'
            raise ParseError(f"Invalid {fmt} file '{path.name}': {e}") from e

        if not lib.cells:
            raise ParseError(f"No cells found in '{path.name}'")

        db = LayoutDatabase(name=lib.name, unit=lib.unit)
        for gds_cell in lib.cells:
            self._import_cell(gds_cell, db)

        logger.debug(f"Read {db!r} from {path}")
        return db

    # ------------------------------------------------------------------
    # Cell import
    # ------------------------------------------------------------------

    def _import_cell(self, gds_cell, db: LayoutDatabase) -> None:
        cell = db.add_cell(gds_cell.name)

        # --- Polygons ---
        for poly in gds_cell.polygons:
            layer = self._layer(poly.layer, poly.datatype)
            db.add_shape(cell.name, layer, shape_from_points(poly.points))

        # --- Paths (expand to polygons) ---
        for path in gds_cell.paths:
            for i, gpoly in enumerate(path.to_polygons()):
                layer_idx = min(i, len(path.layers) - 1)
                layer = self._layer(path.layers[layer_idx], path.datatypes[layer_idx])
                db.add_shape(cell.name, layer, shape_from_points(gpoly.points))

        # --- Sub-cell references (by name only) ---
        for ref in gds_cell.references:
            target = ref.cell if isinstance(ref.cell, str) else ref.cell.name
            cell.references.append(target)

    # ------------------------------------------------------------------
    # Layer mapping
    # ------------------------------------------------------------------

    def _layer(self, gds_layer: int, gds_datatype: int) -> Layer:
        """Map a GDS layer/datatype pair to a Layer, reusing instances."""
        key = (int(gds_layer), int(gds_datatype))
        if key not in self._layers:
            if key in self.layer_names:
                self._layers[key] = Layer(name=self.layer_names[key], gds=key)
            else:
                self._layers[key] = Layer.from_gds(*key)
        return self._layers[key]
