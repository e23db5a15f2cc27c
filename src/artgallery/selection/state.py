"""Selection state and the page/record shapes the tracker consumes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

RecordId = int
Decision = Tuple[RecordId, bool]  # (id, is_selected_now)


@runtime_checkable
class Record(Protocol):
    """Anything with a stable, globally unique integer ``id``."""

    @property
    def id(self) -> int: ...


@dataclass(frozen=True, slots=True)
class VisiblePage:
    """Ordered batch of records that just became visible."""

    records: Tuple[Record, ...] = ()
    page_index: int = 1
    total_count: Optional[int] = None

    @classmethod
    def of(cls, records: Iterable[Record], *, page_index: int = 1) -> "VisiblePage":
        return cls(records=tuple(records), page_index=page_index)

    @property
    def ids(self) -> Tuple[RecordId, ...]:
        return tuple(record.id for record in self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


PageLike = Union[VisiblePage, Sequence[Record]]


def as_records(page: PageLike) -> Tuple[Record, ...]:
    if isinstance(page, VisiblePage):
        return page.records
    return tuple(page)


@dataclass(slots=True)
class SelectionState:
    """The tracker's three fields.

    ``selected`` and ``deselected`` are kept disjoint by routing every write
    through ``mark_selected``/``mark_deselected``.
    """

    selected: set[RecordId] = field(default_factory=set)
    deselected: set[RecordId] = field(default_factory=set)
    pending_count: int = 0

    def is_decided(self, record_id: RecordId) -> bool:
        return record_id in self.selected or record_id in self.deselected

    def mark_selected(self, record_id: RecordId) -> bool:
        """Return True when ``record_id`` was not selected before."""

        self.deselected.discard(record_id)
        if record_id in self.selected:
            return False
        self.selected.add(record_id)
        return True

    def mark_deselected(self, record_id: RecordId) -> bool:
        """Return True when ``record_id`` was not deselected before."""

        self.selected.discard(record_id)
        if record_id in self.deselected:
            return False
        self.deselected.add(record_id)
        return True


@dataclass(frozen=True, slots=True)
class SelectionView:
    """Read-only snapshot for hosts and tests."""

    selected_ids: frozenset[RecordId]
    deselected_ids: frozenset[RecordId]
    pending_count: int

    @property
    def selected_count(self) -> int:
        return len(self.selected_ids)
