"""Dashboard gallery management, including image upload."""

from typing import Any
from uuid import UUID

from litestar import Controller, Request, Response, delete, get, post, put
from litestar.di import NamedDependency
from litestar.params import FromPath, FromQuery, MultipartBody
from litestar.status_codes import HTTP_201_CREATED
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.auth.identity import app_settings
from sparklink.controllers.helpers import media_store, require_profile, success, upload_field
from sparklink.db.services import gallery_service
from sparklink.lib.ordering import parse_entries


class GalleryItemUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    category: str | None = None
    tags: list[str] | str | None = None
    is_visible: bool | None = Field(default=None, alias="isVisible")


class GalleryReorderRequest(BaseModel):
    item_orders: list[dict[str, Any]] = Field(alias="itemOrders")


class GalleryController(Controller):
    path = "/gallery"

    @get("/")
    async def list_items(
        self,
        request: Request,
        db_session: NamedDependency[AsyncSession],
        category: FromQuery[str | None] = None,
        limit: FromQuery[int] = 50,
        offset: FromQuery[int] = 0,
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        listing = await gallery_service.list_items(
            db_session, profile.id, category=category, limit=limit, offset=offset
        )
        return success(listing.to_dict())

    @get("/{item_id:uuid}")
    async def get_item(
        self, request: Request, db_session: NamedDependency[AsyncSession], item_id: FromPath[UUID]
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        item = await gallery_service.get_item(db_session, profile.id, item_id)
        return success({"item": item.to_dict()})

    @post("/upload")
    async def upload(
        self,
        request: Request,
        db_session: NamedDependency[AsyncSession],
        data: MultipartBody[dict[str, Any]],
    ) -> Response:
        """Multipart form with an ``image`` file plus title/description/category/tags."""
        _, profile = await require_profile(request, db_session)

        upload = upload_field(data, "image", "Image file is required")
        content = await upload.read()

        item = await gallery_service.create_item(
            db_session,
            profile,
            media_store(request),
            data=content,
            content_type=upload.content_type,
            max_bytes=app_settings(request).media.max_upload_bytes,
            title=data.get("title") or "",
            description=data.get("description"),
            category=data.get("category"),
            tags=data.get("tags"),
        )
        return success({"item": item.to_dict()}, "Image uploaded successfully", status_code=HTTP_201_CREATED)

    @put("/{item_id:uuid}")
    async def update_item(
        self,
        request: Request,
        db_session: NamedDependency[AsyncSession],
        item_id: FromPath[UUID],
        data: GalleryItemUpdateRequest,
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        item = await gallery_service.update_item(
            db_session,
            profile.id,
            item_id,
            title=data.title,
            description=data.description,
            category=data.category,
            tags=data.tags,
            is_visible=data.is_visible,
        )
        return success({"item": item.to_dict()}, "Gallery item updated successfully")

    @delete("/{item_id:uuid}", status_code=200)
    async def delete_item(
        self, request: Request, db_session: NamedDependency[AsyncSession], item_id: FromPath[UUID]
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        await gallery_service.delete_item(db_session, profile.id, item_id, store=media_store(request))
        return success(message="Gallery item deleted successfully")

    @post("/reorder")
    async def reorder(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: GalleryReorderRequest
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        entries = parse_entries(data.item_orders)
        items = await gallery_service.reorder_items(db_session, profile.id, entries)
        return success({"items": [item.to_dict() for item in items]}, "Gallery reordered successfully")
