"""Artwork records and page envelopes returned by a page source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from artgallery.selection import VisiblePage

from .errors import PagePayloadError


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class Artwork:
    """One collection record. Only ``id`` matters to selection."""

    id: int
    title: Optional[str] = None
    place_of_origin: Optional[str] = None
    artist_display: Optional[str] = None
    inscriptions: Optional[str] = None
    date_start: Optional[int] = None
    date_end: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Artwork":
        raw_id = payload.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            raise PagePayloadError(f"Artwork record has no integer id: {raw_id!r}")
        return cls(
            id=raw_id,
            title=_optional_text(payload.get("title")),
            place_of_origin=_optional_text(payload.get("place_of_origin")),
            artist_display=_optional_text(payload.get("artist_display")),
            inscriptions=_optional_text(payload.get("inscriptions")),
            date_start=_optional_int(payload.get("date_start")),
            date_end=_optional_int(payload.get("date_end")),
        )


@dataclass(slots=True)
class PageResult:
    """A fetched page plus the collection size the remote reported."""

    page_index: int
    page_size: int
    total_count: int
    records: List[Artwork] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0:
            return 1
        return -(-self.total_count // self.page_size)

    @property
    def first_position(self) -> int:
        """1-based position of the first row, 0 for an empty page."""

        if not self.records:
            return 0
        return (self.page_index - 1) * self.page_size + 1

    @property
    def last_position(self) -> int:
        if not self.records:
            return 0
        return self.first_position + len(self.records) - 1

    def to_visible_page(self) -> VisiblePage:
        return VisiblePage(
            records=tuple(self.records),
            page_index=self.page_index,
            total_count=self.total_count,
        )

    @classmethod
    def from_payload(
        cls, payload: Any, *, page_index: int, page_size: int
    ) -> "PageResult":
        """Parse the ``{"data": [...], "pagination": {...}}`` envelope."""

        if not isinstance(payload, Mapping):
            raise PagePayloadError("Page payload is not a JSON object")
        data = payload.get("data")
        if not isinstance(data, list):
            raise PagePayloadError("Page payload has no 'data' list")
        pagination = payload.get("pagination") or {}
        if not isinstance(pagination, Mapping):
            raise PagePayloadError("Page payload has a malformed 'pagination' block")

        records = [Artwork.from_payload(item) for item in data]
        total = _optional_int(pagination.get("total"))
        limit = _optional_int(pagination.get("limit"))
        current = _optional_int(pagination.get("current_page"))
        return cls(
            page_index=current or page_index,
            page_size=limit or page_size,
            total_count=total if total is not None else len(records),
            records=records,
        )


__all__ = ["Artwork", "PageResult"]
