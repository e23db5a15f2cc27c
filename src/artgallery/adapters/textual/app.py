"""Executable Textual app for browsing the artwork collection."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual import on
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal
    from textual.widgets import DataTable, Footer, Header, Input, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use artgallery.adapters.textual.app"
    ) from exc

from artgallery.config import GalleryConfig
from artgallery.runtime import telemetry
from artgallery.source import (
    ArticPageSource,
    Artwork,
    InMemoryPageSource,
    PageSource,
    sample_artworks,
)

from .controller import GalleryController, TextualUIHooks

COLUMNS = ("", "Artwork", "Origin", "Artist", "Inscriptions", "Start", "End")
CHECKED = "[x]"
UNCHECKED = "[ ]"


def _cell(value: object) -> str:
    return "" if value is None else str(value)


def artwork_row(artwork: Artwork, checked: bool) -> tuple[str, ...]:
    return (
        CHECKED if checked else UNCHECKED,
        _cell(artwork.title),
        _cell(artwork.place_of_origin),
        _cell(artwork.artist_display),
        _cell(artwork.inscriptions),
        _cell(artwork.date_start),
        _cell(artwork.date_end),
    )


def create_source(config: GalleryConfig) -> PageSource:
    if config.offline:
        return InMemoryPageSource(sample_artworks(), page_size=config.page_size)
    return ArticPageSource(config)


@dataclass
class UIState:
    status_text: str = ""
    summary_text: str = ""
    selected_count: int = 0


class GalleryApp(App[None]):
    """Paginated artwork table with a selection that survives page changes."""

    TITLE = "Art Institute Gallery"
    SUB_TITLE = "Explore curated artworks with persistent selection"

    CSS = """
	Screen {
		layout: vertical;
	}

	#toolbar {
		height: 3;
		padding: 0 1;
	}

	#selected-badge {
		width: auto;
		min-width: 14;
		padding: 1 2 0 0;
		color: $accent;
		text-style: bold;
	}

	#custom-select {
		width: 24;
	}

	#artworks {
		height: 1fr;
		border: round $accent;
	}

	#summary-line {
		height: 1;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("space", "toggle_row", "Toggle"),
        ("a", "toggle_all", "Toggle page"),
        ("n", "next_page", "Next"),
        ("p", "previous_page", "Prev"),
        ("s", "focus_custom_select", "Custom select"),
        ("escape", "focus_table", "Table"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: Optional[GalleryConfig] = None,
        *,
        source: Optional[PageSource] = None,
    ) -> None:
        super().__init__()
        self.config = config or GalleryConfig()
        self._source = source
        self._state = UIState()
        self.controller: GalleryController | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="toolbar"):
            yield Static("", id="selected-badge")
            yield Input(placeholder="Rows", id="custom-select", type="integer")
        yield DataTable(id="artworks", cursor_type="row", zebra_stripes=True)
        yield Static("", id="summary-line")
        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#artworks", DataTable)
        table.add_columns(*COLUMNS)
        if self._source is None:
            self._source = create_source(self.config)
        hooks = TextualUIHooks(
            update_rows=self._update_rows,
            update_status=self._update_status,
            update_badge=self._update_badge,
            update_summary=self._update_summary,
            log=self._log_line,
        )
        self.controller = GalleryController(self._source, hooks)
        self._load(self.controller.load_page(1))
        table.focus()

    async def on_unmount(self) -> None:
        if isinstance(self._source, ArticPageSource):
            await self._source.aclose()

    def _load(self, awaitable) -> None:
        self.run_worker(awaitable, group="page-load", exclusive=True)

    def action_toggle_row(self) -> None:
        table = self.query_one("#artworks", DataTable)
        if self.controller is None or table.row_count == 0:
            return
        record = self.controller.visible_records[table.cursor_row]
        self.controller.toggle_row(record.id)

    def action_toggle_all(self) -> None:
        if self.controller:
            self.controller.toggle_all_visible()

    def action_next_page(self) -> None:
        if self.controller:
            self._load(self.controller.next_page())

    def action_previous_page(self) -> None:
        if self.controller:
            self._load(self.controller.previous_page())

    def action_focus_custom_select(self) -> None:
        self.query_one("#custom-select", Input).focus()

    def action_focus_table(self) -> None:
        self.query_one("#artworks", DataTable).focus()

    @on(DataTable.RowSelected, "#artworks")
    def _on_row_selected(self, event: DataTable.RowSelected) -> None:
        if self.controller and event.row_key.value is not None:
            self.controller.toggle_row(int(event.row_key.value))

    @on(Input.Submitted, "#custom-select")
    def _on_custom_select(self, event: Input.Submitted) -> None:
        if self.controller is None:
            return
        if self.controller.custom_select(event.value) is not None:
            event.input.value = ""
            self.action_focus_table()

    def _update_rows(self, rows: Sequence[Artwork], checked_ids: frozenset[int]) -> None:
        table = self.query_one("#artworks", DataTable)
        cursor = table.cursor_row
        table.clear()
        for artwork in rows:
            table.add_row(
                *artwork_row(artwork, artwork.id in checked_ids), key=str(artwork.id)
            )
        if rows:
            table.move_cursor(row=min(cursor, len(rows) - 1))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        self.query_one("#status-line", Static).update(status)

    def _update_badge(self, count: int) -> None:
        self._state.selected_count = count
        text = f"{count} selected" if count else ""
        self.query_one("#selected-badge", Static).update(text)

    def _update_summary(self, summary: str) -> None:
        self._state.summary_text = summary
        self.query_one("#summary-line", Static).update(summary)

    def _log_line(self, line: str) -> None:
        telemetry.get_logger("artgallery.ui").debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = GalleryConfig.from_env()
    parser = argparse.ArgumentParser(description="Browse the Art Institute collection.")
    parser.add_argument(
        "--base-url",
        default=defaults.base_url,
        help=f"API root (default: {defaults.base_url})",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=defaults.page_size,
        help=f"Rows per page (default: {defaults.page_size})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=defaults.timeout,
        help=f"HTTP timeout in seconds (default: {defaults.timeout})",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        default=defaults.offline,
        help="Browse a generated catalogue instead of the remote API",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=os.environ.get("ARTGALLERY_LOG_PRESET", "production"),
        help="Telemetry preset (default: production, which logs to a file)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    config = GalleryConfig(
        base_url=args.base_url.rstrip("/"),
        page_size=args.page_size,
        timeout=args.timeout,
        offline=args.offline,
    )
    GalleryApp(config).run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
