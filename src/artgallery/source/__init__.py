"""Paginated record sources the view layer pulls pages from."""

from .errors import PageFetchError, PagePayloadError, PageSourceError
from .models import Artwork, PageResult
from .page_source import ArticPageSource, InMemoryPageSource, PageSource, sample_artworks

__all__ = [
    "Artwork",
    "ArticPageSource",
    "InMemoryPageSource",
    "PageFetchError",
    "PagePayloadError",
    "PageResult",
    "PageSource",
    "PageSourceError",
    "sample_artworks",
]
