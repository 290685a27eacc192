"""Dashboard actions: gate, call the API, then tell the user what happened.

Each action checks the tier gate first and reports a blocked action as an
error notice without sending a request. Completed actions post a success
notice; API errors post the server's message (or a generic fallback for
network failures) and return None.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Sequence
from typing import Any, TypeVar

from sparklink.client.api import SparkLinkClient
from sparklink.client.gating import PageGate
from sparklink.client.notify import Notifier, error_message
from sparklink.lib.exceptions import SparkLinkError, TierLimitError
from sparklink.lib.templates import TemplateDefinition
from sparklink.lib.tiers import check_password_protection, check_social_links

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _completed(call: Awaitable[Any]) -> bool:
    await call
    return True


class DashboardActions:
    def __init__(self, client: SparkLinkClient, notifier: Notifier, gate: PageGate) -> None:
        self.client = client
        self.notifier = notifier
        self.gate = gate

    async def _run(self, call: Awaitable[T], success: str, fallback: str) -> T | None:
        try:
            result = await call
        except SparkLinkError as exc:
            logger.info("%s: %s", fallback, exc)
            self.notifier.error(error_message(exc, fallback))
            return None
        self.notifier.success(success)
        return result

    def _blocked(self, exc: TierLimitError) -> None:
        self.notifier.error(exc.message)

    # --- pages ---

    async def create_page(self, payload: dict) -> dict | None:
        try:
            self.gate.ensure_can_create()
            check_password_protection(self.gate.tier, bool(payload.get("isPasswordProtected")))
        except TierLimitError as exc:
            self._blocked(exc)
            return None

        page = await self._run(
            self.client.create_page(payload), "Page created successfully", "Failed to create page"
        )
        if page is not None:
            self.gate.page_count += 1
        return page

    async def update_page(self, page_id: str, payload: dict) -> dict | None:
        try:
            check_password_protection(self.gate.tier, bool(payload.get("isPasswordProtected")))
        except TierLimitError as exc:
            self._blocked(exc)
            return None
        return await self._run(
            self.client.update_page(page_id, payload), "Page updated successfully", "Failed to update page"
        )

    async def delete_page(self, page_id: str) -> bool:
        deleted = await self._run(
            _completed(self.client.delete_page(page_id)), "Page deleted successfully", "Failed to delete page"
        )
        if not deleted:
            return False
        self.gate.page_count = max(self.gate.page_count - 1, 0)
        return True

    # --- templates ---

    async def apply_template(
        self, template: TemplateDefinition, color_scheme: dict | None = None
    ) -> dict | None:
        """Locked templates are refused here; the request is never sent."""
        try:
            self.gate.ensure_template(template)
        except TierLimitError as exc:
            self._blocked(exc)
            return None
        return await self._run(
            self.client.apply_template(template.id, color_scheme),
            f"{template.name} template applied successfully",
            "Failed to apply template",
        )

    # --- gallery ---

    async def upload_image(
        self, content: bytes, filename: str, content_type: str, title: str, **fields: Any
    ) -> dict | None:
        return await self._run(
            self.client.upload_gallery_item(content, filename, content_type, title, **fields),
            "Image uploaded successfully",
            "Failed to upload image",
        )

    async def update_gallery_item(self, item_id: str, payload: dict) -> dict | None:
        return await self._run(
            self.client.update_gallery_item(item_id, payload),
            "Image updated successfully",
            "Failed to update image",
        )

    async def delete_gallery_item(self, item_id: str) -> bool:
        deleted = await self._run(
            _completed(self.client.delete_gallery_item(item_id)),
            "Image deleted successfully",
            "Failed to delete image",
        )
        return bool(deleted)

    # --- profile ---

    async def update_profile(self, payload: dict) -> dict | None:
        return await self._run(
            self.client.update_profile(payload), "Profile updated successfully", "Failed to update profile"
        )

    async def set_published(self, is_published: bool) -> dict | None:
        message = "Portfolio published" if is_published else "Portfolio unpublished"
        return await self._run(
            self.client.set_published(is_published), message, "Failed to update publication status"
        )

    async def save_social_links(self, links: Sequence[dict]) -> list[dict] | None:
        try:
            check_social_links(self.gate.tier, len(links))
        except TierLimitError as exc:
            self._blocked(exc)
            return None
        return await self._run(
            self.client.replace_social_links(links),
            "Social links updated successfully",
            "Failed to update social links",
        )

    async def upload_profile_image(
        self, kind: str, content: bytes, filename: str, content_type: str
    ) -> str | None:
        return await self._run(
            self.client.upload_profile_image(kind, content, filename, content_type),
            "Image uploaded successfully",
            "Failed to upload image",
        )

    # --- resume ---

    async def upload_resume(self, content: bytes, filename: str) -> dict | None:
        return await self._run(
            self.client.upload_resume(content, filename), "Resume uploaded successfully", "Failed to upload resume"
        )

    async def set_resume_visibility(self, allow_download: bool) -> dict | None:
        state = "public" if allow_download else "private"
        return await self._run(
            self.client.update_resume_settings(allow_download),
            f"Resume is now {state}",
            "Failed to update resume visibility",
        )

    async def delete_resume(self) -> bool:
        deleted = await self._run(
            _completed(self.client.delete_resume()), "Resume deleted successfully", "Failed to delete resume"
        )
        return bool(deleted)
