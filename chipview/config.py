"""Viewer configuration (margin, colors, poll interval)."""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from chipview.backends.base import Color


def _to_color(key: str, value: Any) -> Color:
    """Validate a 3 or 4 component color; 3 components get alpha 1.0."""
    if not isinstance(value, (list, tuple)) or len(value) not in (3, 4):
        raise ValueError(f"'{key}' must be a list of 3 or 4 floats, got {value!r}")
    try:
        rgba = tuple(float(c) for c in value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must contain numbers, got {value!r}") from None
    if any(c < 0.0 or c > 1.0 for c in rgba):
        raise ValueError(f"'{key}' components must be in [0, 1], got {value!r}")
    if len(rgba) == 3:
        rgba = rgba + (1.0,)
    return rgba


@dataclass(frozen=True)
class ViewerConfig:
    """Rendering settings for the layout viewer.

    Attributes:
        margin: Pixel inset on every side of the viewport
        corner_radius: Radius of the neutral background's rounded corners
        poll_interval_ms: How often an interactive host polls the parse job
        background_color: Neutral fill while no layout is available
        success_color: Background tint once a layout is ready
        error_color: Background tint after a failed parse
        rect_color: Fill of rectangles
        polygon_color: Fill of polygons

    Example:
        config = ViewerConfig.from_yaml('chipview.yaml')

    with chipview.yaml::

        margin: 12
        rect_color: [0.1, 0.1, 0.8]
    """
    margin: float = 8.0
    corner_radius: float = 8.0
    poll_interval_ms: int = 100
    background_color: Color = (0.95, 0.95, 0.95, 1.0)
    success_color: Color = (0.90, 0.98, 0.90, 1.0)
    error_color: Color = (0.98, 0.90, 0.90, 1.0)
    rect_color: Color = (0.2, 0.4, 0.9, 1.0)
    polygon_color: Color = (0.2, 0.9, 0.4, 0.9)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'ViewerConfig':
        """Build a config from a mapping; missing keys keep their defaults.

        Raises:
            ValueError: On unknown keys or malformed values.
        """
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for key, value in data.items():
            if key.endswith('_color'):
                values[key] = _to_color(key, value)
            elif key == 'poll_interval_ms':
                values[key] = int(value)
                if values[key] <= 0:
                    raise ValueError(f"'{key}' must be positive, got {value!r}")
            else:
                values[key] = float(value)
                if values[key] < 0:
                    raise ValueError(f"'{key}' must not be negative, got {value!r}")
        return replace(cls(), **values)

    @classmethod
    def from_yaml(cls, path: str | Path) -> 'ViewerConfig':
        path = Path(path)
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: Optional[str | Path] = None) -> 'ViewerConfig':
        """Load *path*, else the file named by ``CHIPVIEW_CONFIG``, else defaults."""
        path = path or os.environ.get('CHIPVIEW_CONFIG')
        if path:
            return cls.from_yaml(path)
        return cls()
