"""Social links: a small ordered collection capped by the subscription tier."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from urllib.parse import urlparse
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.db.models import Profile, SocialLink
from sparklink.db.services import ordering_service
from sparklink.lib.exceptions import NotFoundError, ValidationError
from sparklink.lib.hooks import hooks, AFTER_SOCIAL_LINKS_SAVE
from sparklink.lib.ordering import OrderEntry
from sparklink.lib.tiers import SubscriptionTier, check_social_links

logger = logging.getLogger(__name__)

SOCIAL_PLATFORMS = (
    "twitter",
    "linkedin",
    "github",
    "instagram",
    "facebook",
    "youtube",
    "tiktok",
    "website",
)


def validate_link(platform: str | None, url: str | None) -> tuple[str, str]:
    platform = (platform or "").strip().lower()
    if platform not in SOCIAL_PLATFORMS:
        raise ValidationError(f"Unsupported social platform: {platform or '(empty)'}")

    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"A valid http(s) URL is required for {platform}")
    return platform, url


async def list_links(db_session: AsyncSession, profile_id: UUID) -> list[SocialLink]:
    return await ordering_service.list_ordered(db_session, SocialLink, profile_id)


async def replace_links(
    db_session: AsyncSession,
    profile: Profile,
    tier: SubscriptionTier,
    links: Iterable[dict],
) -> list[SocialLink]:
    """Replace every link on the profile; list position becomes ``order``.

    Raises:
        ValidationError: Unknown platform or malformed URL.
        TierLimitError: More links than the tier allows.
    """
    validated = [validate_link(link.get("platform"), link.get("url")) for link in links]
    check_social_links(tier, len(validated))

    await db_session.execute(delete(SocialLink).where(SocialLink.profile_id == profile.id))
    for position, (platform, url) in enumerate(validated):
        db_session.add(SocialLink(profile_id=profile.id, platform=platform, url=url, order=position))
    await db_session.commit()

    logger.info("Saved %d social links for profile %s", len(validated), profile.id)
    saved = await list_links(db_session, profile.id)
    await hooks.do_action(AFTER_SOCIAL_LINKS_SAVE, profile, saved)
    return saved


async def get_link(db_session: AsyncSession, profile_id: UUID, link_id: UUID) -> SocialLink:
    result = await db_session.execute(
        select(SocialLink).where(SocialLink.id == link_id, SocialLink.profile_id == profile_id)
    )
    link = result.scalar_one_or_none()
    if link is None:
        raise NotFoundError("Social link not found")
    return link


async def delete_link(db_session: AsyncSession, profile_id: UUID, link_id: UUID) -> None:
    link = await get_link(db_session, profile_id, link_id)
    await db_session.delete(link)
    await db_session.flush()
    await ordering_service.close_gap(db_session, SocialLink, profile_id)
    await db_session.commit()


async def reorder_links(
    db_session: AsyncSession,
    profile_id: UUID,
    entries: Sequence[OrderEntry],
) -> list[SocialLink]:
    return await ordering_service.apply_reorder(db_session, SocialLink, profile_id, entries)
