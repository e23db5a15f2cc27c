from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Sequence

from artgallery.adapters.textual import INVALID_COUNT_MESSAGE, GalleryController, TextualUIHooks, parse_row_count
from artgallery.source import Artwork, InMemoryPageSource, PageFetchError, PageResult, sample_artworks


class Recorder:
    def __init__(self) -> None:
        self.rows: List[List[int]] = []
        self.checked: List[frozenset[int]] = []
        self.statuses: List[str] = []
        self.badges: List[int] = []
        self.summaries: List[str] = []
        self.events: List[Dict[str, Any]] = []
        self.logs: List[str] = []

    def hooks(self) -> TextualUIHooks:
        return TextualUIHooks(
            update_rows=self._rows,
            update_status=self.statuses.append,
            update_badge=self.badges.append,
            update_summary=self.summaries.append,
            handle_event=lambda name, payload: self.events.append(
                {"name": name, "payload": payload}
            ),
            log=self.logs.append,
        )

    def _rows(self, rows: Sequence[Artwork], checked: frozenset[int]) -> None:
        self.rows.append([row.id for row in rows])
        self.checked.append(checked)


class FlakySource(InMemoryPageSource):
    def __init__(self, *args: Any, failing: set[int], **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.failing = failing

    async def fetch_page(self, page_index: int) -> PageResult:
        if page_index in self.failing:
            raise PageFetchError("boom", page_index=page_index, status_code=500)
        return await super().fetch_page(page_index)


def make_controller(count: int = 40, **source_kwargs: Any) -> tuple[GalleryController, Recorder]:
    recorder = Recorder()
    source = InMemoryPageSource(sample_artworks(count), page_size=12, **source_kwargs)
    return GalleryController(source, recorder.hooks()), recorder


def test_initial_load_renders_rows_and_summary() -> None:
    controller, recorder = make_controller()

    result = asyncio.run(controller.load_page(1))

    assert result is not None
    assert recorder.rows[-1] == list(range(1001, 1013))
    assert recorder.checked[-1] == frozenset()
    assert recorder.summaries[-1] == "Showing 1 to 12 of 40 records"
    assert recorder.statuses[-1] == "Page 1 of 4"
    assert any(line.startswith("load ->") for line in recorder.logs)


def test_custom_select_spans_pages() -> None:
    controller, recorder = make_controller()
    asyncio.run(controller.load_page(1))

    delta = controller.custom_select("15")

    assert delta is not None
    assert delta.pending_count == 3
    assert recorder.checked[-1] == frozenset(range(1001, 1013))
    assert recorder.badges[-1] == 12
    assert "3 more as pages load" in recorder.statuses[-1]

    asyncio.run(controller.next_page())

    assert recorder.checked[-1] == frozenset({1013, 1014, 1015})
    assert recorder.badges[-1] == 15
    assert recorder.summaries[-1] == "Showing 13 to 24 of 40 records"
    assert controller.tracker.pending_count == 0


def test_custom_select_rejects_invalid_input() -> None:
    controller, recorder = make_controller()
    asyncio.run(controller.load_page(1))

    for raw in ("", "abc", "0", "-4", "²", 0, None):
        assert controller.custom_select(raw) is None
        assert recorder.statuses[-1] == INVALID_COUNT_MESSAGE

    assert controller.tracker.selected_count() == 0
    assert controller.tracker.pending_count == 0


def test_toggle_row_marks_other_visible_rows_deselected() -> None:
    controller, recorder = make_controller()
    asyncio.run(controller.load_page(1))

    controller.toggle_row(1003)
    controller.custom_select(2)

    view = controller.tracker.snapshot()
    assert view.selected_ids == {1003}
    assert 1001 in view.deselected_ids
    assert controller.tracker.pending_count == 2

    asyncio.run(controller.next_page())
    assert recorder.checked[-1] == frozenset({1013, 1014})


def test_toggle_row_outside_visible_page_is_ignored() -> None:
    controller, _ = make_controller()
    asyncio.run(controller.load_page(1))

    assert controller.toggle_row(9999) is None
    assert controller.tracker.selected_count() == 0


def test_toggle_all_visible_round_trip() -> None:
    controller, recorder = make_controller()
    asyncio.run(controller.load_page(1))

    controller.toggle_all_visible()
    assert recorder.badges[-1] == 12

    controller.toggle_all_visible()
    assert recorder.badges[-1] == 0
    assert recorder.checked[-1] == frozenset()


def test_selection_survives_returning_to_a_page() -> None:
    controller, recorder = make_controller()
    asyncio.run(controller.load_page(1))
    controller.toggle_row(1005)

    asyncio.run(controller.next_page())
    asyncio.run(controller.previous_page())

    assert recorder.checked[-1] == frozenset({1005})
    assert recorder.badges[-1] == 1


def test_failed_fetch_keeps_page_and_skips_reconcile() -> None:
    recorder = Recorder()
    source = FlakySource(sample_artworks(40), page_size=12, failing={2})
    controller = GalleryController(source, recorder.hooks())
    asyncio.run(controller.load_page(1))
    controller.custom_select(20)
    assert controller.tracker.pending_count == 8

    result = asyncio.run(controller.next_page())

    assert result is None
    assert controller.page_index == 1
    assert controller.tracker.pending_count == 8
    assert recorder.statuses[-1].startswith("Could not load page 2")


def test_navigation_stops_at_bounds() -> None:
    controller, _ = make_controller(count=20)
    asyncio.run(controller.load_page(1))

    assert asyncio.run(controller.previous_page()) is None
    asyncio.run(controller.next_page())
    assert asyncio.run(controller.next_page()) is None
    assert controller.page_index == 2


def test_superseded_load_does_not_reconcile() -> None:
    controller, _ = make_controller(latency=0.01)

    async def race() -> None:
        first = asyncio.create_task(controller.load_page(1))
        await asyncio.sleep(0)
        second = asyncio.create_task(controller.load_page(2))
        assert await first is None
        assert await second is not None

    controller.tracker.request_bulk_selection(3, visible=())
    asyncio.run(race())

    assert controller.page_index == 2
    assert controller.tracker.snapshot().selected_ids == {1013, 1014, 1015}


def test_tracker_events_are_relayed() -> None:
    controller, recorder = make_controller()
    asyncio.run(controller.load_page(1))

    controller.custom_select(1)

    names = [event["name"] for event in recorder.events]
    assert "selection.bulk" in names


def test_parse_row_count() -> None:
    assert parse_row_count("12") == 12
    assert parse_row_count(" 7 ") == 7
    assert parse_row_count(3) == 3
    assert parse_row_count(True) is None
    assert parse_row_count("1.5") is None
    assert parse_row_count("²") is None
    assert parse_row_count(-2) is None
