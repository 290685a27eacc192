"""Gallery item CRUD backed by a media store."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.db.models import GalleryItem, Profile
from sparklink.db.services import ordering_service
from sparklink.lib.exceptions import NotFoundError, ValidationError
from sparklink.lib.hooks import hooks, AFTER_GALLERY_ITEM_DELETE, AFTER_GALLERY_ITEM_SAVE
from sparklink.lib.media import MediaStore, check_image_upload, remove_stored_file
from sparklink.lib.ordering import OrderEntry

logger = logging.getLogger(__name__)

GALLERY_FOLDER = "gallery"


@dataclass
class GalleryListing:
    items: list[GalleryItem]
    total: int
    categories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "categories": self.categories,
        }


def parse_tags(raw) -> list[str]:
    """Accept a list, a JSON-encoded list, or a comma separated string."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raw = raw.split(",")
    if not isinstance(raw, list):
        return []
    return [str(tag).strip() for tag in raw if str(tag).strip()]


async def list_items(
    db_session: AsyncSession,
    profile_id: UUID,
    category: str | None = None,
    visible_only: bool = False,
    limit: int = 50,
    offset: int = 0,
) -> GalleryListing:
    """A profile's gallery, ascending by order, optionally filtered and paged.

    ``total`` counts the filtered items before paging.
    """
    items = await ordering_service.list_ordered(db_session, GalleryItem, profile_id)
    categories = sorted({item.category for item in items if item.category})

    if visible_only:
        items = [item for item in items if item.is_visible]
    if category:
        items = [item for item in items if item.category == category]

    total = len(items)
    return GalleryListing(items=items[offset:offset + limit], total=total, categories=categories)


async def get_item(db_session: AsyncSession, profile_id: UUID, item_id: UUID) -> GalleryItem:
    result = await db_session.execute(
        select(GalleryItem).where(GalleryItem.id == item_id, GalleryItem.profile_id == profile_id)
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("Gallery item not found")
    return item


async def create_item(
    db_session: AsyncSession,
    profile: Profile,
    store: MediaStore,
    *,
    data: bytes,
    content_type: str | None,
    max_bytes: int,
    title: str,
    description: str | None = None,
    category: str | None = None,
    tags=None,
) -> GalleryItem:
    """Store the uploaded image and append an item at the end of the gallery."""
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")
    content_type = check_image_upload(content_type, len(data), max_bytes)

    stored = await store.put(f"{GALLERY_FOLDER}/{profile.id}", data, content_type)
    order = await ordering_service.next_order(db_session, GalleryItem, profile.id)

    item = GalleryItem(
        profile_id=profile.id,
        title=title,
        description=description or None,
        category=(category or "").strip() or None,
        tags=parse_tags(tags),
        image_url=stored.url,
        storage_key=stored.key,
        is_visible=True,
        order=order,
    )
    db_session.add(item)
    await db_session.commit()
    await db_session.refresh(item)

    logger.info("Created gallery item %s for profile %s", item.id, profile.id)
    await hooks.do_action(AFTER_GALLERY_ITEM_SAVE, item, is_new=True)
    return item


async def update_item(
    db_session: AsyncSession,
    profile_id: UUID,
    item_id: UUID,
    *,
    title: str | None = None,
    description: str | None = None,
    category: str | None = None,
    tags=None,
    is_visible: bool | None = None,
) -> GalleryItem:
    """Edit metadata only; the image and ``order`` are left alone."""
    item = await get_item(db_session, profile_id, item_id)

    if title is not None:
        title = title.strip()
        if not title:
            raise ValidationError("Title cannot be empty")
        item.title = title
    if description is not None:
        item.description = description or None
    if category is not None:
        item.category = category.strip() or None
    if tags is not None:
        item.tags = parse_tags(tags)
    if is_visible is not None:
        item.is_visible = is_visible

    await db_session.commit()
    await db_session.refresh(item)

    await hooks.do_action(AFTER_GALLERY_ITEM_SAVE, item, is_new=False)
    return item


async def count_key_references(db_session: AsyncSession, storage_key: str) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(GalleryItem).where(GalleryItem.storage_key == storage_key)
    )
    return result.scalar_one()


async def delete_item(
    db_session: AsyncSession,
    profile_id: UUID,
    item_id: UUID,
    store: MediaStore | None = None,
) -> None:
    """Delete an item, close the order gap, then remove the stored image.

    Identical uploads share a storage key, so the file is kept while any
    other item still references it.
    """
    item = await get_item(db_session, profile_id, item_id)
    storage_key = item.storage_key

    await db_session.delete(item)
    await db_session.flush()
    await ordering_service.close_gap(db_session, GalleryItem, profile_id)
    await db_session.commit()

    if store is not None and storage_key and not await count_key_references(db_session, storage_key):
        await remove_stored_file(store, storage_key)

    logger.info("Deleted gallery item %s for profile %s", item_id, profile_id)
    await hooks.do_action(AFTER_GALLERY_ITEM_DELETE, item)


async def reorder_items(
    db_session: AsyncSession,
    profile_id: UUID,
    entries: Sequence[OrderEntry],
) -> list[GalleryItem]:
    return await ordering_service.apply_reorder(db_session, GalleryItem, profile_id, entries)
