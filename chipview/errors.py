"""Exceptions raised while loading layout files."""


class LayoutError(Exception):
    """Base class for layout loading failures."""


class OpenError(LayoutError):
    """The layout file could not be opened (missing, permissions, I/O)."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not open '{path}': {reason}")


class ParseError(LayoutError):
    """The file was read but its content is not a valid layout."""
