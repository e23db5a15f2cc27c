from __future__ import annotations

import asyncio
from typing import Any, Dict, List

import httpx
import pytest

from artgallery.config import GalleryConfig
from artgallery.source import (
    ArticPageSource,
    Artwork,
    InMemoryPageSource,
    PageFetchError,
    PagePayloadError,
    PageResult,
    sample_artworks,
)


def make_payload(ids: List[int], *, total: int = 1000, page: int = 1) -> Dict[str, Any]:
    return {
        "pagination": {"total": total, "limit": 12, "current_page": page},
        "data": [
            {
                "id": record_id,
                "title": f"Work {record_id}",
                "place_of_origin": "France",
                "artist_display": "Claude Monet",
                "inscriptions": None,
                "date_start": 1890,
                "date_end": 1891,
                "thumbnail": {"alt_text": "ignored"},
            }
            for record_id in ids
        ],
    }


def make_source(handler) -> ArticPageSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ArticPageSource(GalleryConfig(base_url="https://example.test/api/v1"), client=client)


def test_artwork_from_payload_ignores_unknown_fields() -> None:
    artwork = Artwork.from_payload(
        {"id": 27992, "title": "A Sunday on La Grande Jatte", "date_start": "1884", "extra": 1}
    )

    assert artwork.id == 27992
    assert artwork.title == "A Sunday on La Grande Jatte"
    assert artwork.date_start == 1884
    assert artwork.place_of_origin is None


@pytest.mark.parametrize("raw_id", [None, "12", True, 3.0])
def test_artwork_requires_integer_id(raw_id: object) -> None:
    with pytest.raises(PagePayloadError):
        Artwork.from_payload({"id": raw_id})


def test_page_result_from_payload_reads_pagination() -> None:
    result = PageResult.from_payload(make_payload([1, 2, 3], total=30, page=2), page_index=2, page_size=12)

    assert [record.id for record in result.records] == [1, 2, 3]
    assert result.total_count == 30
    assert result.page_index == 2
    assert result.total_pages == 3
    assert result.first_position == 13
    assert result.last_position == 15


def test_page_result_rejects_missing_data() -> None:
    with pytest.raises(PagePayloadError):
        PageResult.from_payload({"pagination": {}}, page_index=1, page_size=12)
    with pytest.raises(PagePayloadError):
        PageResult.from_payload([], page_index=1, page_size=12)


def test_visible_page_carries_records_and_total() -> None:
    result = PageResult(page_index=4, page_size=2, total_count=9, records=sample_artworks(2))

    page = result.to_visible_page()

    assert page.ids == (1001, 1002)
    assert page.page_index == 4
    assert page.total_count == 9


def test_artic_source_requests_page_with_limit_and_fields() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=make_payload([10, 11], page=3))

    source = make_source(handler)
    result = asyncio.run(source.fetch_page(3))

    assert [record.id for record in result.records] == [10, 11]
    assert result.total_count == 1000
    request = seen[0]
    assert request.url.path == "/api/v1/artworks"
    assert request.url.params["page"] == "3"
    assert request.url.params["limit"] == "12"
    assert "artist_display" in request.url.params["fields"]


def test_artic_source_maps_http_status_errors() -> None:
    source = make_source(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(PageFetchError) as excinfo:
        asyncio.run(source.fetch_page(2))

    assert excinfo.value.status_code == 503
    assert excinfo.value.page_index == 2
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)


def test_artic_source_maps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    source = make_source(handler)

    with pytest.raises(PageFetchError) as excinfo:
        asyncio.run(source.fetch_page(1))

    assert excinfo.value.status_code is None


def test_artic_source_maps_invalid_json() -> None:
    source = make_source(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(PageFetchError) as excinfo:
        asyncio.run(source.fetch_page(1))

    assert excinfo.value.status_code == 200


@pytest.mark.parametrize("page_index", [0, -1, True])
def test_sources_reject_non_positive_page_index(page_index: object) -> None:
    source = InMemoryPageSource(sample_artworks(5))

    with pytest.raises(ValueError):
        asyncio.run(source.fetch_page(page_index))  # type: ignore[arg-type]


def test_in_memory_source_slices_pages() -> None:
    source = InMemoryPageSource(sample_artworks(30), page_size=12)

    last = asyncio.run(source.fetch_page(3))
    beyond = asyncio.run(source.fetch_page(4))

    assert [record.id for record in last.records] == list(range(1025, 1031))
    assert last.total_pages == 3
    assert beyond.records == []
    assert source.requests == [3, 4]
