"""Optimistic drag-and-drop reordering for the dashboard.

A gesture is applied locally first and submitted as one full ``{id, order}``
batch. On success the local list stays the source of truth. On any failure
the optimistic state is thrown away and the list is fetched again from the
server; failed submissions are never retried. Errors outside the API error
taxonomy are re-raised after the reload. There is no conflict merge: the
server applies whichever complete batch arrives last.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from sparklink.client.api import SparkLinkClient
from sparklink.client.notify import Notifier, error_message
from sparklink.lib import ordering
from sparklink.lib.exceptions import SparkLinkError
from sparklink.lib.ordering import OrderEntry

logger = logging.getLogger(__name__)


class ReorderInProgress(RuntimeError):
    """A gesture was attempted while another submission is still in flight."""


@dataclass(frozen=True)
class ListedItem:
    """One row of a dashboard list: identity, position and the raw API fields."""

    id: str
    order: int
    data: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_api(cls, row: dict[str, Any]) -> ListedItem:
        return cls(id=str(row["id"]), order=int(row["order"]), data=row)


@dataclass(frozen=True)
class Collection:
    """API operations and wording for one ordered collection."""

    noun: str
    fetch: Callable[[], Awaitable[list[dict]]]
    submit: Callable[[Sequence[OrderEntry]], Awaitable[Any]]
    remove: Callable[[str], Awaitable[None]]


def pages_collection(client: SparkLinkClient) -> Collection:
    return Collection("pages", client.list_pages, client.reorder_pages, client.delete_page)


def gallery_collection(client: SparkLinkClient) -> Collection:
    return Collection("gallery items", client.list_gallery, client.reorder_gallery, client.delete_gallery_item)


def social_links_collection(client: SparkLinkClient) -> Collection:
    return Collection(
        "social links", client.list_social_links, client.reorder_social_links, client.delete_social_link
    )


class OrderedListState:
    def __init__(
        self,
        collection: Collection,
        notifier: Notifier,
        confirm: Callable[[ListedItem], bool] | None = None,
    ) -> None:
        self.collection = collection
        self.notifier = notifier
        self.confirm = confirm
        self.items: list[ListedItem] = []
        self._confirmed: list[ListedItem] = []
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        """True while a submission is in flight; drags should be disabled."""
        return self._lock.locked()

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.items]

    async def load(self) -> list[ListedItem]:
        """Replace local state with the server's list."""
        rows = await self.collection.fetch()
        self.items = ordering.sort_by_order(ListedItem.from_api(row) for row in rows)
        self._confirmed = list(self.items)
        return self.items

    async def move(self, from_index: int, to_index: int) -> bool:
        """Move one item and persist the whole ordering.

        Returns True when the server accepted the new order. Raises
        IndexError for out-of-range indices and ReorderInProgress while
        another gesture is being submitted. Unexpected errors from the
        submission propagate once the list has been reloaded.
        """
        if self.busy:
            raise ReorderInProgress("A reorder is already being saved")
        moved = ordering.move(self.items, from_index, to_index)
        if from_index == to_index:
            return False

        async with self._lock:
            self.items = ordering.renumber(moved)
            entries = ordering.order_entries(self.items)
            try:
                await self.collection.submit(entries)
            except Exception as exc:
                logger.info("Reorder of %s rejected: %s", self.collection.noun, exc)
                await self._reload_after_failure(exc, f"Failed to reorder {self.collection.noun}")
                if not isinstance(exc, SparkLinkError):
                    raise
                return False

            self._confirmed = list(self.items)
            self.notifier.success(f"{self.collection.noun.capitalize()} reordered successfully")
            return True

    async def remove(self, item_id: str) -> bool:
        """Delete an item after confirmation and close the gap locally."""
        if self.busy:
            raise ReorderInProgress("A change is already being saved")
        index = self.ids.index(item_id)
        if self.confirm is not None and not self.confirm(self.items[index]):
            return False

        async with self._lock:
            try:
                await self.collection.remove(item_id)
            except Exception as exc:
                await self._reload_after_failure(exc, f"Failed to delete from {self.collection.noun}")
                if not isinstance(exc, SparkLinkError):
                    raise
                return False

            self.items = ordering.reindex_after_removal(self.items, index)
            self._confirmed = list(self.items)
            self.notifier.success("Deleted successfully")
            return True

    async def _reload_after_failure(self, exc: Exception, fallback: str) -> None:
        self.items = list(self._confirmed)
        try:
            await self.load()
        except SparkLinkError:
            logger.warning("Reload of %s after a failed change also failed", self.collection.noun)
        self.notifier.error(error_message(exc, fallback))
