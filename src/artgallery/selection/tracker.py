"""Selection tracker that outlives the single page held in memory."""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Iterable, List, Optional, Tuple

from artgallery.runtime import telemetry

from .events import (
    SELECTION_BULK,
    SELECTION_RECONCILE,
    SELECTION_REJECTED,
    SELECTION_TOGGLE,
    SelectionBus,
)
from .state import (
    Decision,
    PageLike,
    Record,
    RecordId,
    SelectionState,
    SelectionView,
    as_records,
)
from .validation import SelectionValidationError, ensure_bulk_count


@dataclass(slots=True)
class SelectionDelta:
    """What a single mutating call changed."""

    label: str
    added: Tuple[RecordId, ...] = ()
    removed: Tuple[RecordId, ...] = ()
    pending_count: int = 0
    selected_count: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class SelectionTracker:
    """Owns ``selected``, ``deselected`` and ``pending_count`` for a session.

    A bulk request that outruns the visible page leaves a pending grant, which
    ``on_page_became_visible`` pays off from later pages. Reconciliation only
    claims ids with no prior decision. Every call holds one re-entrant lock.
    """

    def __init__(
        self,
        *,
        bus: Optional[SelectionBus] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        self.state = SelectionState()
        self.bus = bus or SelectionBus()
        self._logger_name = logger_name or "artgallery.selection"
        self._lock = threading.RLock()
        self._visible: Tuple[Record, ...] = ()

    @property
    def pending_count(self) -> int:
        with self._lock:
            return self.state.pending_count

    def toggle_visible_selection(self, decisions: Iterable[Decision]) -> SelectionDelta:
        """Apply explicit checkbox decisions for visible rows.

        Overwrites earlier decisions for the listed ids and leaves
        ``pending_count`` alone.
        """

        decisions = tuple(decisions)
        added: List[RecordId] = []
        removed: List[RecordId] = []
        with Mutation(self, "toggle", {"decisions": len(decisions)}):
            for record_id, is_selected in decisions:
                if is_selected:
                    if self.state.mark_selected(record_id):
                        added.append(record_id)
                elif self.state.mark_deselected(record_id):
                    removed.append(record_id)
            delta = self._delta("toggle", added, removed)
        self.bus.emit(SELECTION_TOGGLE, delta)
        return delta

    def select_visible_ids(
        self, page: PageLike, checked_ids: Iterable[RecordId]
    ) -> SelectionDelta:
        """Treat ``checked_ids`` as the complete checkbox set for ``page``.

        Visible rows missing from ``checked_ids`` become explicit deselections.
        """

        checked = set(checked_ids)
        return self.toggle_visible_selection(
            (record.id, record.id in checked) for record in as_records(page)
        )

    def request_bulk_selection(
        self, count: int, visible: Optional[PageLike] = None
    ) -> SelectionDelta:
        """Select the first ``count`` undecided records in collection order.

        Undecided rows of ``visible`` (default: the last page reported via
        ``on_page_became_visible``) are selected immediately. The shortfall
        replaces any outstanding pending grant.
        """

        try:
            ensure_bulk_count(count)
        except SelectionValidationError as exc:
            telemetry.record_event(
                "selection.rejected",
                level="warning",
                data={"count": count, "reason": str(exc)},
                logger_name=self._logger_name,
            )
            self.bus.emit(SELECTION_REJECTED, count)
            raise

        with Mutation(self, "bulk", {"count": count}) as mutation:
            records = self._visible if visible is None else as_records(visible)
            added = self._claim_undecided(records, count)
            self.state.pending_count = count - len(added)
            mutation.handle.add_metadata("pending", self.state.pending_count)
            delta = self._delta("bulk", added, ())
        self.bus.emit(SELECTION_BULK, delta)
        return delta

    def on_page_became_visible(self, page: PageLike) -> SelectionDelta:
        """Record ``page`` as visible and pay down the pending grant from it."""

        records = as_records(page)
        with Mutation(self, "reconcile", {"records": len(records)}) as mutation:
            self._visible = records
            added: List[RecordId] = []
            if self.state.pending_count > 0:
                added = self._claim_undecided(records, self.state.pending_count)
                self.state.pending_count -= len(added)
            mutation.handle.add_metadata("pending", self.state.pending_count)
            delta = self._delta("reconcile", added, ())
        if delta.changed:
            self.bus.emit(SELECTION_RECONCILE, delta)
        return delta

    def effective_selection(self, page: PageLike) -> List[Record]:
        with self._lock:
            selected = self.state.selected
            return [record for record in as_records(page) if record.id in selected]

    def selected_count(self) -> int:
        with self._lock:
            return len(self.state.selected)

    def is_selected(self, record_id: RecordId) -> bool:
        with self._lock:
            return record_id in self.state.selected

    def snapshot(self) -> SelectionView:
        with self._lock:
            return SelectionView(
                selected_ids=frozenset(self.state.selected),
                deselected_ids=frozenset(self.state.deselected),
                pending_count=self.state.pending_count,
            )

    def _claim_undecided(self, records: Iterable[Record], budget: int) -> List[RecordId]:
        claimed: List[RecordId] = []
        for record in records:
            if len(claimed) >= budget:
                break
            if self.state.is_decided(record.id):
                continue
            self.state.mark_selected(record.id)
            claimed.append(record.id)
        return claimed

    def _delta(
        self, label: str, added: Iterable[RecordId], removed: Iterable[RecordId]
    ) -> SelectionDelta:
        return SelectionDelta(
            label=label,
            added=tuple(added),
            removed=tuple(removed),
            pending_count=self.state.pending_count,
            selected_count=len(self.state.selected),
        )


class Mutation(AbstractContextManager["Mutation"]):
    """Holds the tracker lock and a telemetry span for one state change."""

    def __init__(
        self, tracker: SelectionTracker, label: str, metadata: dict[str, object]
    ) -> None:
        self.tracker = tracker
        self.label = label
        self.metadata = metadata
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self.handle: telemetry.SpanHandle

    def __enter__(self) -> "Mutation":
        self.tracker._lock.acquire()
        try:
            self._span_cm = telemetry.span(
                name=f"selection::{self.label}",
                logger_name=self.tracker._logger_name,
                component="selection",
                metadata=self.metadata,
            )
            self.handle = self._span_cm.__enter__()
        except BaseException:
            self.tracker._lock.release()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if self._span_cm is not None:
                self._span_cm.__exit__(exc_type, exc, tb)
        finally:
            self.tracker._lock.release()
        return False


__all__ = ["Mutation", "SelectionDelta", "SelectionTracker"]
