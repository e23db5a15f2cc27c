"""Page sources: the remote Art Institute API and an in-memory stand-in."""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Protocol, Sequence

import httpx

from artgallery.config import GalleryConfig
from artgallery.runtime import telemetry

from .errors import PageFetchError
from .models import Artwork, PageResult


class PageSource(Protocol):
    """Supplies one page of records per 1-based page index."""

    page_size: int

    async def fetch_page(self, page_index: int) -> PageResult:
        """Return the records on ``page_index`` and the collection total."""
        ...


def _check_page_index(page_index: int) -> int:
    if isinstance(page_index, bool) or not isinstance(page_index, int) or page_index < 1:
        raise ValueError(f"page_index must be a positive integer, got {page_index!r}")
    return page_index


class ArticPageSource:
    """Fetches ``/artworks`` pages from the Art Institute of Chicago API."""

    def __init__(
        self,
        config: Optional[GalleryConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        logger_name: str = "artgallery.source",
    ) -> None:
        self.config = config or GalleryConfig()
        self.page_size = self.config.page_size
        self._client = client
        self._owns_client = client is None
        self._logger_name = logger_name

    async def __aenter__(self) -> "ArticPageSource":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
            self._owns_client = True
        return self._client

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/artworks"

    def _params(self, page_index: int) -> dict[str, Any]:
        return {
            "page": page_index,
            "limit": self.page_size,
            "fields": ",".join(self.config.fields),
        }

    async def fetch_page(self, page_index: int) -> PageResult:
        _check_page_index(page_index)
        client = self._ensure_client()
        with telemetry.span(
            "source::fetch_page",
            logger_name=self._logger_name,
            component="source",
            metadata={"page": page_index, "endpoint": self.endpoint},
        ) as handle:
            try:
                response = await client.get(
                    self.endpoint,
                    params=self._params(page_index),
                    timeout=self.config.timeout,
                )
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                self._record_failure(page_index, f"HTTP {status}")
                raise PageFetchError(
                    f"Page {page_index} request failed with HTTP {status}",
                    page_index=page_index,
                    status_code=status,
                ) from exc
            except httpx.HTTPError as exc:
                self._record_failure(page_index, type(exc).__name__)
                raise PageFetchError(
                    f"Page {page_index} request failed: {exc}",
                    page_index=page_index,
                ) from exc
            except ValueError as exc:
                self._record_failure(page_index, "invalid JSON")
                raise PageFetchError(
                    f"Page {page_index} response is not valid JSON",
                    page_index=page_index,
                    status_code=response.status_code,
                ) from exc

            result = PageResult.from_payload(
                payload, page_index=page_index, page_size=self.page_size
            )
            handle.add_metadata("records", len(result.records))
            handle.add_metadata("total", result.total_count)
            return result

    def _record_failure(self, page_index: int, reason: str) -> None:
        telemetry.record_event(
            "source.fetch_failed",
            level="warning",
            data={"page": page_index, "reason": reason},
            logger_name=self._logger_name,
        )


class InMemoryPageSource:
    """Serves pages sliced from a fixed list of artworks."""

    def __init__(
        self,
        artworks: Sequence[Artwork],
        *,
        page_size: int = 12,
        total_count: Optional[int] = None,
        latency: float = 0.0,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.artworks = list(artworks)
        self.page_size = page_size
        self.total_count = len(self.artworks) if total_count is None else total_count
        self.latency = latency
        self.requests: list[int] = []

    async def fetch_page(self, page_index: int) -> PageResult:
        _check_page_index(page_index)
        self.requests.append(page_index)
        if self.latency:
            await asyncio.sleep(self.latency)
        start = (page_index - 1) * self.page_size
        return PageResult(
            page_index=page_index,
            page_size=self.page_size,
            total_count=self.total_count,
            records=self.artworks[start : start + self.page_size],
        )


def sample_artworks(count: int = 120) -> list[Artwork]:
    """Placeholder catalogue for offline runs."""

    origins = ("France", "Japan", "United States", "Netherlands", "Italy", "Mexico")
    return [
        Artwork(
            id=1000 + index,
            title=f"Study No. {index}",
            place_of_origin=origins[index % len(origins)],
            artist_display=f"Unknown artist {index % 17}",
            inscriptions=None,
            date_start=1800 + index,
            date_end=1801 + index,
        )
        for index in range(1, count + 1)
    ]


__all__ = [
    "ArticPageSource",
    "InMemoryPageSource",
    "PageSource",
    "sample_artworks",
]
