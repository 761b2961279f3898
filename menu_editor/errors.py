from __future__ import annotations


class MenuEditorError(Exception):
    """Base class for every recoverable error raised by the editor core."""


class ShapeError(MenuEditorError, ValueError):
    """The document is not shaped like ``{menu: {main: [...]}}``."""


class ParseError(MenuEditorError, ValueError):
    """The raw text could not be parsed as YAML at all."""


class ValidationError(MenuEditorError, ValueError):
    """A mutation was given data it cannot accept."""


class NotFoundError(MenuEditorError, LookupError):
    def __init__(self, uid: str) -> None:
        super().__init__(f"No menu entry with key {uid!r}.")
        self.uid = uid


class InvalidOperationError(MenuEditorError):
    """The operation is not valid for the given finding or state."""
