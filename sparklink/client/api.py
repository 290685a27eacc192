"""Async HTTP client for the SparkLink API.

Every failure surfaces as one of two errors:

* :class:`NetworkError` when no usable response arrived (timeouts, refused
  connections, DNS failures, bodies that fail to decode);
* :class:`ServerRejection` when the server answered with a non-2xx status.
  The message is taken from the response envelope when present.

A 401 response also tears down the session.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from sparklink.client.session import AuthSession, SessionUser
from sparklink.lib.exceptions import NetworkError, ServerRejection
from sparklink.lib.ordering import OrderEntry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
GALLERY_PAGE_SIZE = 50
_IMAGE_RESPONSE_KEYS = {"profile-picture": "profilePicture", "background-image": "backgroundImage"}


def rejection_from_response(response: httpx.Response) -> ServerRejection:
    message = f"Request failed with status {response.status_code}"
    extra: dict[str, Any] = {}
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or body.get("detail") or message
        extra = {k: v for k, v in body.items() if k not in ("status", "message", "detail")}
    return ServerRejection(str(message), response.status_code, **extra)


class SparkLinkClient:
    def __init__(
        self,
        base_url: str,
        session: AuthSession,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """``http_client`` replaces the internally built client and is not closed by :meth:`aclose`."""
        self.session = session
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> SparkLinkClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Send a request and return the envelope's ``data`` object."""
        headers = {**self.session.auth_headers(), **kwargs.pop("headers", {})}
        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError("Unable to reach the server. Check your connection and try again.") from exc

        if response.status_code == 401 and self.session.is_authenticated:
            self.session.teardown()
        if response.is_error:
            raise rejection_from_response(response)

        try:
            body = response.json()
        except ValueError:
            return {}
        if not isinstance(body, dict):
            return {}
        return body.get("data") or {}

    # --- auth ---

    async def login(self, email: str, password: str) -> SessionUser:
        data = await self.request("POST", "/auth/login", json={"email": email, "password": password})
        self.session.login(data["token"], data["user"])
        return self.session.user

    async def me(self) -> SessionUser:
        data = await self.request("GET", "/auth/me")
        self.session.update_user(data["user"])
        return self.session.user

    # --- pages ---

    async def list_pages(self) -> list[dict]:
        data = await self.request("GET", "/pages")
        return data.get("pages", [])

    async def create_page(self, payload: dict) -> dict:
        data = await self.request("POST", "/pages", json=payload)
        return data["page"]

    async def update_page(self, page_id: str, payload: dict) -> dict:
        data = await self.request("PUT", f"/pages/{page_id}", json=payload)
        return data["page"]

    async def delete_page(self, page_id: str) -> None:
        await self.request("DELETE", f"/pages/{page_id}")

    async def reorder_pages(self, entries: Sequence[OrderEntry]) -> list[dict]:
        data = await self.request(
            "POST", "/pages/reorder", json={"pageOrders": [entry.to_dict() for entry in entries]}
        )
        return data.get("pages", [])

    # --- gallery ---

    async def list_gallery(self, category: str | None = None) -> list[dict]:
        """Every gallery item, following the server's pages until ``total`` is reached."""
        items: list[dict] = []
        while True:
            params: dict[str, Any] = {"limit": GALLERY_PAGE_SIZE, "offset": len(items)}
            if category:
                params["category"] = category
            data = await self.request("GET", "/gallery", params=params)
            batch = data.get("items", [])
            items.extend(batch)
            if not batch or len(items) >= data.get("total", 0):
                return items

    async def upload_gallery_item(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        title: str,
        description: str | None = None,
        category: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> dict:
        form = {"title": title}
        if description:
            form["description"] = description
        if category:
            form["category"] = category
        if tags:
            form["tags"] = ",".join(tags)
        data = await self.request(
            "POST", "/gallery/upload", data=form, files={"image": (filename, content, content_type)}
        )
        return data["item"]

    async def update_gallery_item(self, item_id: str, payload: dict) -> dict:
        data = await self.request("PUT", f"/gallery/{item_id}", json=payload)
        return data["item"]

    async def delete_gallery_item(self, item_id: str) -> None:
        await self.request("DELETE", f"/gallery/{item_id}")

    async def reorder_gallery(self, entries: Sequence[OrderEntry]) -> list[dict]:
        data = await self.request(
            "POST", "/gallery/reorder", json={"itemOrders": [entry.to_dict() for entry in entries]}
        )
        return data.get("items", [])

    # --- profile ---

    async def get_profile(self) -> dict:
        return await self.request("GET", "/profile")

    async def update_profile(self, payload: dict) -> dict:
        data = await self.request("PUT", "/profile", json=payload)
        if "user" in data:
            self.session.update_user(data["user"])
        return data

    async def set_published(self, is_published: bool) -> dict:
        data = await self.request("PUT", "/profile/publish", json={"isPublished": is_published})
        return data["profile"]

    async def check_username(self, username: str) -> bool:
        data = await self.request("GET", "/profile/check-username", params={"username": username})
        return bool(data.get("available"))

    async def upload_profile_image(self, kind: str, content: bytes, filename: str, content_type: str) -> str:
        """Upload a ``profile-picture`` or ``background-image``; returns its URL."""
        data = await self.request(
            "POST", f"/profile/upload/{kind}", files={"image": (filename, content, content_type)}
        )
        return data[_IMAGE_RESPONSE_KEYS[kind]]

    # --- social links ---

    async def list_social_links(self) -> list[dict]:
        data = await self.request("GET", "/profile/social-links")
        return data.get("socialLinks", [])

    async def replace_social_links(self, links: Sequence[dict]) -> list[dict]:
        data = await self.request("PUT", "/profile/social-links", json={"links": list(links)})
        return data.get("socialLinks", [])

    async def delete_social_link(self, link_id: str) -> None:
        await self.request("DELETE", f"/profile/social-links/{link_id}")

    async def reorder_social_links(self, entries: Sequence[OrderEntry]) -> list[dict]:
        data = await self.request(
            "POST",
            "/profile/social-links/reorder",
            json={"linkOrders": [entry.to_dict() for entry in entries]},
        )
        return data.get("socialLinks", [])

    # --- resume ---

    async def upload_resume(self, content: bytes, filename: str) -> dict:
        return await self.request(
            "POST", "/resume/upload", files={"resume": (filename, content, "application/pdf")}
        )

    async def resume_info(self) -> dict:
        return await self.request("GET", "/resume/info")

    async def update_resume_settings(self, allow_download: bool) -> dict:
        return await self.request("PUT", "/resume/settings", json={"allowResumeDownload": allow_download})

    async def delete_resume(self) -> None:
        await self.request("DELETE", "/resume")

    # --- templates and subscription ---

    async def list_templates(self, include_locked: bool = False) -> list[dict]:
        params = {"include_locked": "true"} if include_locked else None
        data = await self.request("GET", "/templates", params=params)
        return data.get("templates", [])

    async def apply_template(self, template_id: str, color_scheme: dict | None = None) -> dict:
        payload: dict[str, Any] = {"templateId": template_id}
        if color_scheme is not None:
            payload["colorScheme"] = color_scheme
        data = await self.request("POST", "/templates/apply", json=payload)
        return data["profile"]

    async def current_subscription(self) -> dict:
        return await self.request("GET", "/subscription/current")
