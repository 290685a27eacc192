"""Page CRUD with server-side tier enforcement and dense ordering."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from sparklink.db.models import Page, PageType, Profile
from sparklink.db.services import ordering_service
from sparklink.lib.exceptions import NotFoundError, SlugConflictError, ValidationError
from sparklink.lib.hooks import hooks, AFTER_PAGE_DELETE, AFTER_PAGE_SAVE
from sparklink.lib.ordering import OrderEntry
from sparklink.lib.tiers import SubscriptionTier, check_can_create_page, check_password_protection

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_UNSET = object()  # Sentinel for distinguishing None from "not provided"


def validate_slug(slug: str) -> str:
    slug = (slug or "").strip()
    if not SLUG_PATTERN.match(slug) or len(slug) > 100:
        raise ValidationError(
            "Slug may only contain lowercase letters, numbers and single hyphens"
        )
    return slug


def parse_page_type(value: str | PageType | None) -> PageType:
    try:
        return PageType(str(value).upper())
    except ValueError:
        raise ValidationError("Invalid page type") from None


def _apply_field_updates(page: Page, updates: dict) -> None:
    """Set attributes on a page, skipping fields that were not provided."""
    for field_name, value in updates.items():
        if value is not _UNSET:
            setattr(page, field_name, value)


async def list_pages(
    db_session: AsyncSession,
    profile_id: UUID,
    published_only: bool = False,
) -> list[Page]:
    """A profile's pages, ascending by order."""
    pages = await ordering_service.list_ordered(db_session, Page, profile_id)
    if published_only:
        return [page for page in pages if page.is_published]
    return pages


async def get_page(db_session: AsyncSession, profile_id: UUID, page_id: UUID) -> Page:
    result = await db_session.execute(
        select(Page).where(Page.id == page_id, Page.profile_id == profile_id)
    )
    page = result.scalar_one_or_none()
    if page is None:
        raise NotFoundError("Page not found")
    return page


async def get_page_by_slug(
    db_session: AsyncSession,
    profile_id: UUID,
    slug: str,
    published_only: bool = False,
) -> Page | None:
    query = select(Page).where(Page.profile_id == profile_id, Page.slug == slug)
    if published_only:
        query = query.where(Page.is_published == True)  # noqa: E712
    result = await db_session.execute(query)
    return result.scalar_one_or_none()


async def _ensure_slug_available(
    db_session: AsyncSession,
    profile_id: UUID,
    slug: str,
    exclude_id: UUID | None = None,
) -> None:
    query = select(Page.id).where(Page.profile_id == profile_id, Page.slug == slug)
    if exclude_id is not None:
        query = query.where(Page.id != exclude_id)
    result = await db_session.execute(query)
    if result.scalar_one_or_none() is not None:
        raise SlugConflictError("A page with this slug already exists")


def _password_fields(
    tier: SubscriptionTier,
    protected: bool,
    password: str | None,
    existing_hash: str | None = None,
) -> dict:
    """Resolve the stored protection columns from the requested state."""
    check_password_protection(tier, protected)
    password = password or None

    if not protected:
        if password:
            raise ValidationError("A password can only be set on password-protected pages")
        return {"is_password_protected": False, "password_hash": None}

    if password:
        return {"is_password_protected": True, "password_hash": generate_password_hash(password)}
    if existing_hash:
        return {"is_password_protected": True, "password_hash": existing_hash}
    raise ValidationError("A password is required for password-protected pages")


async def create_page(
    db_session: AsyncSession,
    profile: Profile,
    tier: SubscriptionTier,
    *,
    page_type: str | PageType,
    title: str,
    slug: str,
    content: dict | None = None,
    is_published: bool = False,
    is_password_protected: bool = False,
    password: str | None = None,
) -> Page:
    """Create a page at the end of the profile's collection.

    Raises:
        TierLimitError: Page count or password protection exceeds the tier.
        SlugConflictError: The slug is already used by this profile.
        ValidationError: Missing title, bad slug or type, missing password.
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("Type, title, and slug are required")
    page_type = parse_page_type(page_type)
    slug = validate_slug(slug)

    count = await ordering_service.count_items(db_session, Page, profile.id)
    check_can_create_page(tier, count)
    protection = _password_fields(tier, is_password_protected, password)
    await _ensure_slug_available(db_session, profile.id, slug)

    page = Page(
        profile_id=profile.id,
        type=page_type.value,
        title=title,
        slug=slug,
        content=content or {},
        is_published=is_published,
        order=count,
        **protection,
    )
    db_session.add(page)
    await db_session.commit()
    await db_session.refresh(page)

    logger.info("Created page %s (%s) for profile %s", page.id, slug, profile.id)
    await hooks.do_action(AFTER_PAGE_SAVE, page, is_new=True)
    return page


async def update_page(
    db_session: AsyncSession,
    profile: Profile,
    tier: SubscriptionTier,
    page_id: UUID,
    *,
    page_type: str | PageType | object = _UNSET,
    title: str | object = _UNSET,
    slug: str | object = _UNSET,
    content: dict | object = _UNSET,
    is_published: bool | object = _UNSET,
    is_password_protected: bool | object = _UNSET,
    password: str | None | object = _UNSET,
) -> Page:
    """Edit a page's fields. The ``order`` column is never touched here."""
    page = await get_page(db_session, profile.id, page_id)

    updates: dict = {
        "content": content,
        "is_published": is_published,
    }
    if page_type is not _UNSET:
        updates["type"] = parse_page_type(page_type).value
    if title is not _UNSET:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title cannot be empty")
        updates["title"] = title
    if slug is not _UNSET:
        slug = validate_slug(slug)
        if slug != page.slug:
            await _ensure_slug_available(db_session, profile.id, slug, exclude_id=page.id)
        updates["slug"] = slug
    if is_password_protected is not _UNSET or password is not _UNSET:
        protected = page.is_password_protected if is_password_protected is _UNSET else bool(is_password_protected)
        new_password = None if password is _UNSET else password
        if protected != page.is_password_protected or new_password:
            updates.update(_password_fields(tier, protected, new_password, page.password_hash))

    _apply_field_updates(page, updates)
    await db_session.commit()
    await db_session.refresh(page)

    await hooks.do_action(AFTER_PAGE_SAVE, page, is_new=False)
    return page


async def delete_page(db_session: AsyncSession, profile_id: UUID, page_id: UUID) -> None:
    """Delete a page and close the order gap in the same transaction."""
    page = await get_page(db_session, profile_id, page_id)

    await db_session.delete(page)
    await db_session.flush()
    await ordering_service.close_gap(db_session, Page, profile_id)
    await db_session.commit()

    logger.info("Deleted page %s for profile %s", page_id, profile_id)
    await hooks.do_action(AFTER_PAGE_DELETE, page)


async def reorder_pages(
    db_session: AsyncSession,
    profile_id: UUID,
    entries: Sequence[OrderEntry],
) -> list[Page]:
    return await ordering_service.apply_reorder(db_session, Page, profile_id, entries)


async def verify_page_password(
    db_session: AsyncSession,
    profile_id: UUID,
    slug: str,
    password: str,
) -> bool:
    """Check a visitor's password against a published protected page."""
    page = await get_page_by_slug(db_session, profile_id, slug, published_only=True)
    if page is None:
        raise NotFoundError("Page not found")
    return check_page_password(page, password)


def check_page_password(page: Page, password: str | None) -> bool:
    if not page.is_password_protected:
        return True
    if not password or not page.password_hash:
        return False
    return check_password_hash(page.password_hash, password)
