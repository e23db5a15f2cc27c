"""Paginated artwork browser with a persistent, page-spanning selection."""

__all__ = [
    "adapters",
    "config",
    "runtime",
    "selection",
    "source",
]

__version__ = "0.1.0"
