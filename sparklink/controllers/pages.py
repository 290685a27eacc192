"""Dashboard page management."""

from typing import Any
from uuid import UUID

from litestar import Controller, Request, Response, delete, get, post, put
from litestar.di import NamedDependency
from litestar.params import FromPath
from litestar.status_codes import HTTP_201_CREATED
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.auth.identity import PUBLIC_ROUTE
from sparklink.controllers.helpers import require_profile, success
from sparklink.db.services import page_service, profile_service, user_service
from sparklink.lib.exceptions import NotFoundError
from sparklink.lib.ordering import parse_entries


class PageCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    title: str
    slug: str
    content: dict[str, Any] | None = None
    is_published: bool = Field(default=False, alias="isPublished")
    is_password_protected: bool = Field(default=False, alias="isPasswordProtected")
    password: str | None = None


class PageUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    title: str | None = None
    slug: str | None = None
    content: dict[str, Any] | None = None
    is_published: bool | None = Field(default=None, alias="isPublished")
    is_password_protected: bool | None = Field(default=None, alias="isPasswordProtected")
    password: str | None = None


class PageReorderRequest(BaseModel):
    page_orders: list[dict[str, Any]] = Field(alias="pageOrders")


class PagePasswordRequest(BaseModel):
    username: str
    slug: str
    password: str


# Request field name -> update_page keyword
_UPDATE_FIELDS = {
    "type": "page_type",
    "title": "title",
    "slug": "slug",
    "content": "content",
    "is_published": "is_published",
    "is_password_protected": "is_password_protected",
    "password": "password",
}


class PagesController(Controller):
    path = "/pages"

    @get("/")
    async def list_pages(self, request: Request, db_session: NamedDependency[AsyncSession]) -> Response:
        _, profile = await require_profile(request, db_session)
        pages = await page_service.list_pages(db_session, profile.id)
        return success({"pages": [page.to_dict() for page in pages]})

    @get("/{page_id:uuid}")
    async def get_page(
        self, request: Request, db_session: NamedDependency[AsyncSession], page_id: FromPath[UUID]
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        page = await page_service.get_page(db_session, profile.id, page_id)
        return success({"page": page.to_dict()})

    @post("/")
    async def create_page(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: PageCreateRequest
    ) -> Response:
        user, profile = await require_profile(request, db_session)
        page = await page_service.create_page(
            db_session,
            profile,
            user.tier,
            page_type=data.type,
            title=data.title,
            slug=data.slug,
            content=data.content,
            is_published=data.is_published,
            is_password_protected=data.is_password_protected,
            password=data.password,
        )
        return success({"page": page.to_dict()}, "Page created successfully", status_code=HTTP_201_CREATED)

    @put("/{page_id:uuid}")
    async def update_page(
        self,
        request: Request,
        db_session: NamedDependency[AsyncSession],
        page_id: FromPath[UUID],
        data: PageUpdateRequest,
    ) -> Response:
        user, profile = await require_profile(request, db_session)
        provided = {
            _UPDATE_FIELDS[name]: getattr(data, name)
            for name in data.model_fields_set
            if name in _UPDATE_FIELDS and (getattr(data, name) is not None or name == "password")
        }
        page = await page_service.update_page(db_session, profile, user.tier, page_id, **provided)
        return success({"page": page.to_dict()}, "Page updated successfully")

    @delete("/{page_id:uuid}", status_code=200)
    async def delete_page(
        self, request: Request, db_session: NamedDependency[AsyncSession], page_id: FromPath[UUID]
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        await page_service.delete_page(db_session, profile.id, page_id)
        return success(message="Page deleted successfully")

    @post("/reorder")
    async def reorder_pages(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: PageReorderRequest
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        entries = parse_entries(data.page_orders)
        pages = await page_service.reorder_pages(db_session, profile.id, entries)
        return success({"pages": [page.to_dict() for page in pages]}, "Pages reordered successfully")

    @post("/verify-password", opt=PUBLIC_ROUTE)
    async def verify_password(
        self, db_session: NamedDependency[AsyncSession], data: PagePasswordRequest
    ) -> Response:
        user = await user_service.get_user_by_username(db_session, data.username)
        if user is None:
            raise NotFoundError("Page not found")
        profile = await profile_service.get_published_profile(db_session, user)
        valid = await page_service.verify_page_password(db_session, profile.id, data.slug, data.password)
        return success({"valid": valid, "slug": data.slug})
