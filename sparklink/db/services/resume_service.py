"""The portfolio owner's downloadable resume (one PDF per profile)."""

import logging
from datetime import datetime, timezone
from pathlib import PurePath

from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.db.models import Profile
from sparklink.lib.exceptions import ForbiddenError, NotFoundError
from sparklink.lib.hooks import hooks, AFTER_PROFILE_MEDIA_SAVE
from sparklink.lib.media import MediaStore, check_resume_upload, remove_stored_file

logger = logging.getLogger(__name__)

RESUME_FOLDER = "resumes"
RESUME = "resume"


def _display_name(file_name: str | None) -> str:
    name = PurePath(file_name or "").name.strip()
    return name[:255] or "resume.pdf"


async def upload_resume(
    db_session: AsyncSession,
    profile: Profile,
    store: MediaStore,
    *,
    data: bytes,
    content_type: str | None,
    file_name: str | None,
    max_bytes: int,
) -> Profile:
    """Store a PDF resume, replacing any previous one."""
    content_type = check_resume_upload(content_type, len(data), max_bytes)

    stored = await store.put(f"{RESUME_FOLDER}/{profile.id}", data, content_type)
    previous_key = profile.resume_key
    profile.resume_url = stored.url
    profile.resume_key = stored.key
    profile.resume_file_name = _display_name(file_name)
    profile.resume_uploaded_at = datetime.now(timezone.utc)
    await db_session.commit()
    await db_session.refresh(profile)

    if previous_key != stored.key:
        await remove_stored_file(store, previous_key)

    logger.info("Uploaded resume for profile %s", profile.id)
    await hooks.do_action(AFTER_PROFILE_MEDIA_SAVE, RESUME, profile)
    return profile


async def update_settings(db_session: AsyncSession, profile: Profile, allow_download: bool) -> Profile:
    profile.allow_resume_download = allow_download
    await db_session.commit()
    await db_session.refresh(profile)
    return profile


async def delete_resume(db_session: AsyncSession, profile: Profile, store: MediaStore) -> None:
    if not profile.has_resume:
        raise NotFoundError("No resume found")

    key = profile.resume_key
    profile.resume_url = None
    profile.resume_key = None
    profile.resume_file_name = None
    profile.resume_uploaded_at = None
    await db_session.commit()

    await remove_stored_file(store, key)
    logger.info("Deleted resume for profile %s", profile.id)


def public_resume_info(profile: Profile) -> dict:
    """What visitors see: the resume is advertised only when downloads are allowed."""
    available = profile.has_resume and profile.allow_resume_download
    return {
        "hasResume": available,
        "resumeFileName": profile.resume_file_name if available else None,
        "allowResumeDownload": profile.allow_resume_download,
    }


def download_url(profile: Profile) -> str:
    """The stored resume's URL for a visitor.

    Raises:
        NotFoundError: No resume uploaded.
        ForbiddenError: The owner turned downloads off.
    """
    if not profile.has_resume:
        raise NotFoundError("No resume available for download")
    if not profile.allow_resume_download:
        raise ForbiddenError("Resume download is not allowed")
    return profile.resume_url
