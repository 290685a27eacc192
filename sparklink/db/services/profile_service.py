"""Profile settings: template, colors, publication, portfolio images."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.db.models import Profile, User
from sparklink.lib.exceptions import NotFoundError, TierLimitError
from sparklink.lib.hooks import hooks, AFTER_PROFILE_MEDIA_SAVE, AFTER_TEMPLATE_APPLY
from sparklink.lib.media import MediaStore, check_image_upload, remove_stored_file
from sparklink.lib.templates import get_template, validate_color_scheme
from sparklink.lib.tiers import check_template_access

logger = logging.getLogger(__name__)


async def get_profile_by_user_id(db_session: AsyncSession, user_id: UUID) -> Profile | None:
    result = await db_session.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def get_or_create_profile(db_session: AsyncSession, user_id: UUID) -> Profile:
    """Profiles are created lazily the first time a user needs one."""
    profile = await get_profile_by_user_id(db_session, user_id)
    if profile is not None:
        return profile

    profile = Profile(user_id=user_id, is_published=False, show_powered_by=True)
    db_session.add(profile)
    await db_session.commit()
    await db_session.refresh(profile)
    logger.info("Created profile %s for user %s", profile.id, user_id)
    return profile


async def get_published_profile(db_session: AsyncSession, user: User) -> Profile:
    profile = await get_profile_by_user_id(db_session, user.id)
    if profile is None or not profile.is_published:
        raise NotFoundError("Portfolio not found")
    return profile


async def apply_template(
    db_session: AsyncSession,
    user: User,
    template_id: str,
    color_scheme: dict | None = None,
) -> Profile:
    """Switch the profile's template, enforcing the template's tier.

    Raises:
        NotFoundError: Unknown template.
        TierLimitError: The user's tier is below the template's tier.
    """
    template = get_template(template_id)
    access = check_template_access(user.tier, template.tier)
    if not access.can_access:
        raise TierLimitError(
            access.message,
            required_tier=access.required_tier,
            current_tier=user.tier,
        )

    profile = await get_or_create_profile(db_session, user.id)
    profile.template_id = template.id
    if color_scheme is not None:
        profile.color_scheme = validate_color_scheme(color_scheme)
    await db_session.commit()
    await db_session.refresh(profile)

    await hooks.do_action(AFTER_TEMPLATE_APPLY, profile, template)
    return profile


async def update_color_scheme(db_session: AsyncSession, user_id: UUID, color_scheme: dict) -> Profile:
    profile = await get_or_create_profile(db_session, user_id)
    profile.color_scheme = validate_color_scheme(color_scheme)
    await db_session.commit()
    await db_session.refresh(profile)
    return profile


async def set_published(db_session: AsyncSession, user_id: UUID, is_published: bool) -> Profile:
    profile = await get_or_create_profile(db_session, user_id)
    profile.is_published = is_published
    await db_session.commit()
    await db_session.refresh(profile)
    logger.info("Profile %s %s", profile.id, "published" if is_published else "unpublished")
    return profile


async def update_profile(
    db_session: AsyncSession,
    user_id: UUID,
    tagline: str | None = None,
    bio: str | None = None,
    country_flag: str | None = None,
) -> Profile:
    profile = await get_or_create_profile(db_session, user_id)
    if tagline is not None:
        profile.tagline = tagline.strip() or None
    if bio is not None:
        profile.bio = bio.strip() or None
    if country_flag is not None:
        profile.country_flag = country_flag.strip() or None
    await db_session.commit()
    await db_session.refresh(profile)
    return profile


PROFILE_PICTURE = "profile-picture"
BACKGROUND_IMAGE = "background-image"

# Image kind -> (folder, owner attribute, url column, key column)
_IMAGE_SLOTS = {
    PROFILE_PICTURE: ("avatars", "user", "profile_picture_url", "profile_picture_key"),
    BACKGROUND_IMAGE: ("backgrounds", "profile", "background_image_url", "background_image_key"),
}


async def set_profile_image(
    db_session: AsyncSession,
    user: User,
    profile: Profile,
    store: MediaStore,
    kind: str,
    *,
    data: bytes,
    content_type: str | None,
    max_bytes: int,
) -> str:
    """Store a profile picture or background image, replacing the previous one.

    Returns the public URL of the new image.
    """
    if kind not in _IMAGE_SLOTS:
        raise NotFoundError("Unknown image type")
    folder, owner_name, url_attr, key_attr = _IMAGE_SLOTS[kind]
    owner = user if owner_name == "user" else profile
    content_type = check_image_upload(content_type, len(data), max_bytes)

    stored = await store.put(f"{folder}/{owner.id}", data, content_type)
    previous_key = getattr(owner, key_attr)
    setattr(owner, url_attr, stored.url)
    setattr(owner, key_attr, stored.key)
    await db_session.commit()
    await db_session.refresh(owner)

    if previous_key != stored.key:
        await remove_stored_file(store, previous_key)

    logger.info("Updated %s for user %s", kind, user.id)
    await hooks.do_action(AFTER_PROFILE_MEDIA_SAVE, kind, owner)
    return stored.url
