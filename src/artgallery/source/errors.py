"""Failures raised while loading pages."""

from __future__ import annotations


class PageSourceError(RuntimeError):
    """Base class for page loading failures."""


class PageFetchError(PageSourceError):
    """Raised when a page could not be retrieved from the remote collection."""

    def __init__(
        self,
        message: str,
        *,
        page_index: int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.page_index = page_index
        self.status_code = status_code


class PagePayloadError(PageSourceError):
    """Raised when a fetched page does not have the expected shape."""


__all__ = ["PageSourceError", "PageFetchError", "PagePayloadError"]
