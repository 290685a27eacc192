"""The caller's own portfolio profile, account details and social links."""

from typing import Any
from uuid import UUID

from litestar import Controller, Request, Response, delete, get, post, put
from litestar.di import NamedDependency
from litestar.params import FromPath, FromQuery, MultipartBody
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.auth.identity import PUBLIC_ROUTE, app_settings
from sparklink.controllers.helpers import media_store, require_profile, success, upload_field
from sparklink.db.models import Profile, User
from sparklink.db.services import profile_service, social_link_service, user_service
from sparklink.db.services.profile_service import BACKGROUND_IMAGE, PROFILE_PICTURE
from sparklink.lib.ordering import parse_entries


class ProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    username: str | None = None
    country: str | None = None
    phone: str | None = None
    bio: str | None = None
    tagline: str | None = None
    country_flag: str | None = Field(default=None, alias="countryFlag")


class PublishRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_published: bool = Field(alias="isPublished")


class SocialLinkIn(BaseModel):
    platform: str
    url: str


class SocialLinksRequest(BaseModel):
    links: list[SocialLinkIn]


class SocialLinkReorderRequest(BaseModel):
    link_orders: list[dict[str, Any]] = Field(alias="linkOrders")


def _profile_payload(user: User, profile: Profile) -> dict:
    return {
        "profile": profile.to_dict(),
        "user": user.to_dict(),
        "socialLinks": [link.to_dict() for link in profile.social_links],
        "resume": profile.resume_info(),
    }


class ProfileController(Controller):
    path = "/profile"

    @get("/")
    async def get_profile(self, request: Request, db_session: NamedDependency[AsyncSession]) -> Response:
        user, profile = await require_profile(request, db_session)
        await db_session.refresh(profile, attribute_names=["social_links"])
        return success(_profile_payload(user, profile))

    @put("/")
    async def update_profile(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: ProfileUpdateRequest
    ) -> Response:
        user, _ = await require_profile(request, db_session)
        user = await user_service.update_account(
            db_session,
            user,
            first_name=data.first_name,
            last_name=data.last_name,
            username=data.username,
            country=data.country,
            phone=data.phone,
        )
        profile = await profile_service.update_profile(
            db_session, user.id, tagline=data.tagline, bio=data.bio, country_flag=data.country_flag
        )
        await db_session.refresh(profile, attribute_names=["social_links"])
        return success(_profile_payload(user, profile), "Profile updated successfully")

    @put("/publish")
    async def publish(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: PublishRequest
    ) -> Response:
        user, _ = await require_profile(request, db_session)
        profile = await profile_service.set_published(db_session, user.id, data.is_published)
        message = "Portfolio published" if profile.is_published else "Portfolio unpublished"
        return success({"profile": profile.to_dict()}, message)

    @get("/check-username", opt=PUBLIC_ROUTE)
    async def check_username(
        self, db_session: NamedDependency[AsyncSession], username: FromQuery[str]
    ) -> Response:
        available = await user_service.is_username_available(db_session, username)
        return success({"username": username.strip().lower(), "available": available})

    @get("/social-links")
    async def list_social_links(self, request: Request, db_session: NamedDependency[AsyncSession]) -> Response:
        _, profile = await require_profile(request, db_session)
        links = await social_link_service.list_links(db_session, profile.id)
        return success({"socialLinks": [link.to_dict() for link in links]})

    @put("/social-links")
    async def replace_social_links(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: SocialLinksRequest
    ) -> Response:
        """Replace the whole set; list position becomes the display order."""
        user, profile = await require_profile(request, db_session)
        links = await social_link_service.replace_links(
            db_session, profile, user.tier, [link.model_dump() for link in data.links]
        )
        return success({"socialLinks": [link.to_dict() for link in links]}, "Social links updated successfully")

    @post("/social-links/reorder")
    async def reorder_social_links(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: SocialLinkReorderRequest
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        links = await social_link_service.reorder_links(db_session, profile.id, parse_entries(data.link_orders))
        return success({"socialLinks": [link.to_dict() for link in links]}, "Social links reordered successfully")

    @delete("/social-links/{link_id:uuid}", status_code=200)
    async def delete_social_link(
        self, request: Request, db_session: NamedDependency[AsyncSession], link_id: FromPath[UUID]
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        await social_link_service.delete_link(db_session, profile.id, link_id)
        return success(message="Social link deleted successfully")

    @post("/upload/profile-picture")
    async def upload_profile_picture(
        self,
        request: Request,
        db_session: NamedDependency[AsyncSession],
        data: MultipartBody[dict[str, Any]],
    ) -> Response:
        return await self._upload_image(request, db_session, data, PROFILE_PICTURE, "profilePicture")

    @post("/upload/background-image")
    async def upload_background_image(
        self,
        request: Request,
        db_session: NamedDependency[AsyncSession],
        data: MultipartBody[dict[str, Any]],
    ) -> Response:
        return await self._upload_image(request, db_session, data, BACKGROUND_IMAGE, "backgroundImage")

    async def _upload_image(
        self, request: Request, db_session: AsyncSession, data: dict[str, Any], kind: str, response_key: str
    ) -> Response:
        user, profile = await require_profile(request, db_session)
        upload = upload_field(data, "image", "Image file is required")
        url = await profile_service.set_profile_image(
            db_session,
            user,
            profile,
            media_store(request),
            kind,
            data=await upload.read(),
            content_type=upload.content_type,
            max_bytes=app_settings(request).media.max_upload_bytes,
        )
        return success({response_key: url}, "Image uploaded successfully")
