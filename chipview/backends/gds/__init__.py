"""GDSII/OASIS layout backend for chipview."""

from chipview.backends.gds.layout_reader import GDSReader

__all__ = ['GDSReader']
