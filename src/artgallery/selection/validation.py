"""Argument checks for selection requests."""

from __future__ import annotations


class SelectionValidationError(ValueError):
    """Raised when a bulk selection asks for a non-positive number of rows."""

    def __init__(self, message: str, *, count: object = None) -> None:
        super().__init__(message)
        self.count = count


def ensure_bulk_count(count: object) -> int:
    # bool is an int subclass; True is not a row count.
    if isinstance(count, bool) or not isinstance(count, int):
        raise SelectionValidationError(
            f"Bulk selection count must be an integer, got {count!r}", count=count
        )
    if count <= 0:
        raise SelectionValidationError(
            f"Bulk selection count must be >= 1, got {count}", count=count
        )
    return count
