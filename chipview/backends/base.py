"""
Abstract base classes for chipview backends.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from chipview.layout.database import LayoutDatabase
    from chipview.layout.transform import Rectangle

# RGBA, each component in [0, 1]
Color = Tuple[float, float, float, float]


class LayoutReader(ABC):
    """
    Abstract base class for layout file parsing.

    Each backend implements this to turn the bytes of a layout file
    (GDSII, OASIS, ...) into a :class:`LayoutDatabase`.
    """

    #: File suffixes the reader expects (advisory only)
    suffixes: Tuple[str, ...] = ()

    @abstractmethod
    def read_layout(self, stream: BinaryIO) -> 'LayoutDatabase':
        """
        Parse an opened layout file.

        Args:
            stream: Binary file object positioned at the start of the file

        Returns:
            LayoutDatabase with every cell, layer and shape of the file

        Raises:
            ParseError: If the content is not a valid layout
        """
        pass


class Surface(ABC):
    """
    Drawing target for the renderer.

    Coordinates are pixels with the origin at the top-left corner and y
    growing downward.
    """

    @abstractmethod
    def fill_rounded_rect(self, bounds: 'Rectangle', corner_radius: float,
                          color: Color) -> None:
        """Fill *bounds* with rounded corners of *corner_radius* pixels."""
        pass

    @abstractmethod
    def fill_rect(self, bounds: 'Rectangle', color: Color) -> None:
        """Fill *bounds*."""
        pass

    @abstractmethod
    def fill_path(self, vertices: Sequence[Tuple[float, float]],
                  color: Color) -> None:
        """Fill the closed path through *vertices* (last joins first)."""
        pass
