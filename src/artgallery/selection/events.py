"""Tiny event bus the tracker uses to announce selection changes."""

from __future__ import annotations

from typing import Callable, Dict

SELECTION_TOGGLE = "selection.toggle"
SELECTION_BULK = "selection.bulk"
SELECTION_RECONCILE = "selection.reconcile"
SELECTION_REJECTED = "selection.rejected"

ALL_EVENTS = (
    SELECTION_TOGGLE,
    SELECTION_BULK,
    SELECTION_RECONCILE,
    SELECTION_REJECTED,
)


class SelectionBus:
    """Minimal publish/subscribe hub keyed by event name."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)
