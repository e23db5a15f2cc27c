"""Selection state that spans pages the host never holds at once."""

from .events import (
    SELECTION_BULK,
    SELECTION_RECONCILE,
    SELECTION_REJECTED,
    SELECTION_TOGGLE,
    SelectionBus,
)
from .state import Decision, Record, RecordId, SelectionState, SelectionView, VisiblePage
from .tracker import SelectionDelta, SelectionTracker
from .validation import SelectionValidationError, ensure_bulk_count

__all__ = [
    "Decision",
    "Record",
    "RecordId",
    "SelectionBus",
    "SelectionDelta",
    "SelectionState",
    "SelectionTracker",
    "SelectionValidationError",
    "SelectionView",
    "VisiblePage",
    "SELECTION_BULK",
    "SELECTION_RECONCILE",
    "SELECTION_REJECTED",
    "SELECTION_TOGGLE",
    "ensure_bulk_count",
]
