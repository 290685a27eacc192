"""Authoritative ordering for a profile's pages, gallery items and social links."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.db.models import GalleryItem, Page, SocialLink
from sparklink.lib.hooks import hooks, AFTER_COLLECTION_REORDER
from sparklink.lib.observability import span
from sparklink.lib.ordering import OrderEntry, validate_entries

logger = logging.getLogger(__name__)

OrderedModel = TypeVar("OrderedModel", Page, GalleryItem, SocialLink)


async def list_ordered(
    db_session: AsyncSession,
    model: type[OrderedModel],
    profile_id: UUID,
) -> list[OrderedModel]:
    """All of a profile's items, ascending by order."""
    result = await db_session.execute(
        select(model)
        .where(model.profile_id == profile_id)
        .order_by(model.order.asc(), model.created_at.asc())
    )
    return list(result.scalars().all())


async def count_items(db_session: AsyncSession, model: type[OrderedModel], profile_id: UUID) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(model).where(model.profile_id == profile_id)
    )
    return result.scalar_one()


async def next_order(db_session: AsyncSession, model: type[OrderedModel], profile_id: UUID) -> int:
    """Order value for an item appended at the end of the collection."""
    return await count_items(db_session, model, profile_id)


def renumber_rows(items: Sequence[OrderedModel]) -> int:
    """Renumber already-sorted rows to ``0..n-1``. Returns how many changed."""
    changed = 0
    for position, item in enumerate(items):
        if item.order != position:
            item.order = position
            changed += 1
    return changed


async def close_gap(db_session: AsyncSession, model: type[OrderedModel], profile_id: UUID) -> int:
    """Re-read the collection and renumber it densely. Does not commit."""
    items = await list_ordered(db_session, model, profile_id)
    return renumber_rows(items)


async def apply_reorder(
    db_session: AsyncSession,
    model: type[OrderedModel],
    profile_id: UUID,
    entries: Sequence[OrderEntry],
) -> list[OrderedModel]:
    """Apply a full ``{id, order}`` batch in a single transaction.

    The batch must cover exactly the stored collection with dense orders;
    otherwise nothing is written and OrderingError is raised. Concurrent
    sessions resolve as last write wins.
    """
    collection = model.__tablename__
    with span("ordering.apply_reorder", collection=collection, size=len(entries)):
        items = await list_ordered(db_session, model, profile_id)
        validate_entries(entries, [item.id for item in items])

        new_orders = {str(entry.id): entry.order for entry in entries}
        try:
            for item in items:
                item.order = new_orders[str(item.id)]
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            logger.warning("Reorder of %s for profile %s rolled back", collection, profile_id, exc_info=True)
            raise

    await hooks.do_action(AFTER_COLLECTION_REORDER, collection, profile_id, list(entries))
    logger.info("Reordered %d %s for profile %s", len(entries), collection, profile_id)

    return await list_ordered(db_session, model, profile_id)
