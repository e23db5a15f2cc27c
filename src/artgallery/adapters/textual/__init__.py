"""Textual host for the gallery; the controller itself has no Textual imports."""

from .controller import GalleryController, INVALID_COUNT_MESSAGE, TextualUIHooks, parse_row_count

__all__ = [
    "GalleryController",
    "INVALID_COUNT_MESSAGE",
    "TextualUIHooks",
    "parse_row_count",
]
