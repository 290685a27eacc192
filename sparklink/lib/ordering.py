"""Dense zero-based ordering for per-owner collections (pages, gallery items).

A collection is valid when its ``order`` values are exactly ``0..n-1``.
Every function here is pure: inputs are never mutated, and the same code
runs in the dashboard client (optimistically) and in the API (authoritatively).
"""

from __future__ import annotations

import copy
import dataclasses
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from sparklink.lib.exceptions import OrderingError


class OrderableItem(Protocol):
    id: Any
    order: int


T = TypeVar("T", bound=OrderableItem)


@dataclass(frozen=True)
class OrderEntry:
    """The ``{id, order}`` pair submitted in a reorder batch."""

    id: Any
    order: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": str(self.id), "order": self.order}


def with_order(item: T, order: int) -> T:
    """Return a copy of ``item`` carrying a new ``order`` value."""
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return dataclasses.replace(item, order=order)
    if hasattr(item, "model_copy"):
        return item.model_copy(update={"order": order})
    clone = copy.copy(item)
    clone.order = order
    return clone


def sort_by_order(items: Iterable[T]) -> list[T]:
    return sorted(items, key=lambda item: item.order)


def validate(items: Sequence[OrderableItem]) -> bool:
    """True iff the orders form a permutation of ``0..n-1``."""
    return sorted(item.order for item in items) == list(range(len(items)))


def validate_entries(entries: Sequence[OrderEntry], expected_ids: Iterable[Any]) -> None:
    """Check a submitted reorder batch against the stored collection.

    Raises:
        OrderingError: If ids are duplicated, unknown or missing, or the
            orders are not dense.
    """
    expected = {str(i) for i in expected_ids}
    submitted = [str(entry.id) for entry in entries]

    duplicates = sorted(i for i, count in Counter(submitted).items() if count > 1)
    if duplicates:
        raise OrderingError(f"Duplicate ids in ordering: {', '.join(duplicates)}")

    unknown = sorted(set(submitted) - expected)
    if unknown:
        raise OrderingError(f"Unknown ids in ordering: {', '.join(unknown)}")

    missing = sorted(expected - set(submitted))
    if missing:
        raise OrderingError(f"Ordering is missing ids: {', '.join(missing)}")

    if not validate(entries):
        raise OrderingError(
            f"Order values must be exactly 0..{len(entries) - 1} with no gaps or repeats"
        )


def append_at_end(items: Sequence[T], new_item: T) -> list[T]:
    """Place ``new_item`` after every existing item."""
    return [*items, with_order(new_item, len(items))]


def reindex_after_removal(items: Sequence[T], removed_index: int) -> list[T]:
    """Remove the item at ``removed_index`` and close the gap it leaves."""
    if not 0 <= removed_index < len(items):
        raise IndexError(f"removed_index {removed_index} out of range for {len(items)} items")

    removed_order = items[removed_index].order
    remaining = []
    for position, item in enumerate(items):
        if position == removed_index:
            continue
        if item.order > removed_order:
            item = with_order(item, item.order - 1)
        remaining.append(item)
    return remaining


def move(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Array-move: take the item at ``from_index`` and reinsert it at ``to_index``.

    Items strictly between the two positions shift by one towards the gap.
    ``order`` fields are left untouched; call :func:`renumber` afterwards.
    """
    count = len(items)
    for name, index in (("from_index", from_index), ("to_index", to_index)):
        if not 0 <= index < count:
            raise IndexError(f"{name} {index} out of range for {count} items")

    moved = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


def renumber(items: Sequence[T]) -> list[T]:
    """Set each item's ``order`` to its list position."""
    return [
        item if item.order == position else with_order(item, position)
        for position, item in enumerate(items)
    ]


def order_entries(items: Sequence[OrderableItem]) -> list[OrderEntry]:
    """Full ``{id, order}`` list for the items in their current list positions."""
    return [OrderEntry(id=item.id, order=position) for position, item in enumerate(items)]


def changed_entries(
    before: Sequence[OrderableItem],
    after: Sequence[OrderableItem],
) -> list[OrderEntry]:
    """Minimal update set: entries whose position differs from their old order."""
    previous = {str(item.id): item.order for item in before}
    return [
        entry
        for entry in order_entries(after)
        if previous.get(str(entry.id)) != entry.order
    ]


def parse_entries(raw: Iterable[dict[str, Any]]) -> list[OrderEntry]:
    """Build entries from decoded JSON ``[{"id": ..., "order": ...}]``."""
    entries = []
    for row in raw:
        try:
            entries.append(OrderEntry(id=str(row["id"]), order=int(row["order"])))
        except (KeyError, TypeError, ValueError) as exc:
            raise OrderingError(f"Malformed ordering entry: {row!r}") from exc
    return entries
