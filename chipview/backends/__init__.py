"""
Backend implementations for chipview.

Backends provide:
- LayoutReader: Parses layout files into a LayoutDatabase
- Surface: Drawing target the renderer emits primitives to
"""

from chipview.backends.base import Color, LayoutReader, Surface

__all__ = [
    'Color',
    'LayoutReader',
    'Surface',
]
