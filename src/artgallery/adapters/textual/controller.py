"""UI-agnostic controller that wires page loads and checkbox edits to the tracker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence

from artgallery.selection import SelectionDelta, SelectionTracker, SelectionValidationError
from artgallery.selection.events import ALL_EVENTS
from artgallery.source import Artwork, PageResult, PageSource, PageSourceError

INVALID_COUNT_MESSAGE = "Enter a valid number of rows."


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the controller to update widgets."""

    update_rows: Callable[[Sequence[Artwork], frozenset[int]], None]
    update_status: Callable[[str], None] = _noop
    update_badge: Callable[[int], None] = _noop
    update_summary: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


def parse_row_count(raw: object) -> Optional[int]:
    """Return a positive row count, or None for anything else."""

    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    text = str(raw or "").strip()
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value > 0 else None


class GalleryController:
    """Loads pages on demand and keeps the checkbox column in sync.

    ``on_page_became_visible`` runs once per successful load. A failed or
    superseded load never reaches the tracker.
    """

    def __init__(
        self,
        source: PageSource,
        hooks: TextualUIHooks,
        *,
        tracker: Optional[SelectionTracker] = None,
    ) -> None:
        self.source = source
        self.hooks = hooks
        self.tracker = tracker or SelectionTracker()
        self.page: Optional[PageResult] = None
        self._request_token = 0
        self._subscribe_events()

    @property
    def page_index(self) -> int:
        return self.page.page_index if self.page else 0

    @property
    def total_pages(self) -> int:
        return self.page.total_pages if self.page else 1

    @property
    def visible_records(self) -> Sequence[Artwork]:
        return self.page.records if self.page else ()

    async def load_page(self, page_index: int) -> Optional[PageResult]:
        """Fetch ``page_index`` and make it the visible page."""

        self._request_token += 1
        token = self._request_token
        self.hooks.update_status(f"Loading page {page_index}...")
        self._log_state("load ->", target=page_index)
        try:
            result = await self.source.fetch_page(page_index)
        except PageSourceError as exc:
            if token == self._request_token:
                self.hooks.update_status(f"Could not load page {page_index}: {exc}")
            self._log_state("load failed <-", target=page_index, error=str(exc))
            return None

        if token != self._request_token:
            self._log_state("load superseded <-", target=page_index)
            return None

        self.page = result
        self.tracker.on_page_became_visible(result.to_visible_page())
        self.hooks.update_status(f"Page {result.page_index} of {result.total_pages}")
        self._refresh()
        self._log_state("load <-", records=len(result.records))
        return result

    async def next_page(self) -> Optional[PageResult]:
        if self.page is None or self.page_index >= self.total_pages:
            return None
        return await self.load_page(self.page_index + 1)

    async def previous_page(self) -> Optional[PageResult]:
        if self.page is None or self.page_index <= 1:
            return None
        return await self.load_page(self.page_index - 1)

    def checked_ids(self) -> frozenset[int]:
        return frozenset(
            record.id for record in self.tracker.effective_selection(self.visible_records)
        )

    def apply_checked(self, checked_ids: Iterable[int]) -> SelectionDelta:
        """Adopt ``checked_ids`` as the full checkbox set of the visible page."""

        delta = self.tracker.select_visible_ids(self.visible_records, checked_ids)
        self._refresh()
        return delta

    def toggle_row(self, record_id: int) -> Optional[SelectionDelta]:
        if all(record.id != record_id for record in self.visible_records):
            self._log_state("toggle ignored", record=record_id)
            return None
        return self.apply_checked(self.checked_ids() ^ {record_id})

    def toggle_all_visible(self) -> SelectionDelta:
        visible = {record.id for record in self.visible_records}
        if visible and visible <= self.checked_ids():
            return self.apply_checked(())
        return self.apply_checked(visible)

    def custom_select(self, raw: object) -> Optional[SelectionDelta]:
        """Handle the "select first N rows" input.

        Invalid input shows a validation message and goes no further.
        """

        count = parse_row_count(raw)
        if count is None:
            self.hooks.update_status(INVALID_COUNT_MESSAGE)
            return None
        try:
            delta = self.tracker.request_bulk_selection(count)
        except SelectionValidationError:
            self.hooks.update_status(INVALID_COUNT_MESSAGE)
            return None
        if delta.pending_count:
            status = (
                f"Selected {len(delta.added)} rows; "
                f"{delta.pending_count} more as pages load"
            )
        else:
            status = f"Selected {len(delta.added)} rows"
        self.hooks.update_status(status)
        self._refresh()
        return delta

    def summary_text(self) -> str:
        if self.page is None:
            return "No records loaded"
        return (
            f"Showing {self.page.first_position} to {self.page.last_position} "
            f"of {self.page.total_count} records"
        )

    def _subscribe_events(self) -> None:
        for event in ALL_EVENTS:
            self.tracker.bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _refresh(self) -> None:
        self.hooks.update_rows(self.visible_records, self.checked_ids())
        self.hooks.update_badge(self.tracker.selected_count())
        self.hooks.update_summary(self.summary_text())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        return {
            "page": self.page_index,
            "selected": self.tracker.selected_count(),
            "pending": self.tracker.pending_count,
        }


__all__ = [
    "GalleryController",
    "INVALID_COUNT_MESSAGE",
    "TextualUIHooks",
    "parse_row_count",
]
