"""Storage for uploaded images and resume documents."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sparklink.lib.exceptions import ValidationError

if TYPE_CHECKING:
    from sparklink.config import MediaConfig

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

ALLOWED_DOCUMENT_TYPES = {
    "application/pdf": ".pdf",
}


@dataclass
class StoredFile:
    """Metadata for a file written to a media store."""

    key: str
    url: str
    content_type: str
    size: int


@runtime_checkable
class MediaStore(Protocol):
    async def put(self, folder: str, data: bytes, content_type: str) -> StoredFile:
        ...

    async def delete(self, key: str) -> None:
        ...

    def get_url(self, key: str) -> str:
        ...


class LocalMediaStore:
    """Writes files to ``<base_path>/<folder>/<sha256><ext>``.

    Identical uploads to one folder share a key; callers that delete must
    check the key is no longer referenced.
    """

    def __init__(self, base_path: Path, url_prefix: str = "/media") -> None:
        self._base_path = base_path
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def base_path(self) -> Path:
        return self._base_path

    async def put(self, folder: str, data: bytes, content_type: str) -> StoredFile:
        extension = (
            ALLOWED_IMAGE_TYPES.get(content_type)
            or ALLOWED_DOCUMENT_TYPES.get(content_type)
            or mimetypes.guess_extension(content_type)
            or ""
        )
        key = f"{folder}/{hashlib.sha256(data).hexdigest()}{extension}"
        await asyncio.to_thread(self._write_file, self._base_path / key, data)
        return StoredFile(key=key, url=self.get_url(key), content_type=content_type, size=len(data))

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._unlink, self._key_to_path(key))

    def get_url(self, key: str) -> str:
        return f"{self._url_prefix}/{key}"

    def _key_to_path(self, key: str) -> Path:
        path = (self._base_path / key).resolve()
        if not path.is_relative_to(self._base_path.resolve()):
            raise ValueError(f"Media key escapes the store: {key!r}")
        return path

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    @staticmethod
    def _unlink(path: Path) -> None:
        path.unlink(missing_ok=True)


def check_image_upload(content_type: str | None, size: int, max_bytes: int) -> str:
    """Validate an upload before it is stored. Returns the content type."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Only JPEG, PNG, GIF and WebP images can be uploaded")
    if size == 0:
        raise ValidationError("Image file is required")
    if size > max_bytes:
        raise ValidationError(f"Image exceeds the {max_bytes // (1024 * 1024)} MB upload limit")
    return content_type


def check_resume_upload(content_type: str | None, size: int, max_bytes: int) -> str:
    if content_type not in ALLOWED_DOCUMENT_TYPES:
        raise ValidationError("Only PDF files are allowed for resume upload")
    if size == 0:
        raise ValidationError("Resume file is required")
    if size > max_bytes:
        raise ValidationError(f"Resume exceeds the {max_bytes // (1024 * 1024)} MB upload limit")
    return content_type


async def remove_stored_file(store: MediaStore, key: str | None) -> None:
    """Delete a stored file after its row is gone. Failures are logged, not raised."""
    if not key:
        return
    try:
        await store.delete(key)
    except (OSError, ValueError):
        logger.warning("Could not remove stored file %s", key, exc_info=True)


def create_media_store(config: MediaConfig) -> LocalMediaStore:
    return LocalMediaStore(base_path=Path(config.local_path), url_prefix=config.url_prefix)
