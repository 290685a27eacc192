"""Read-only endpoints for published portfolios."""

from typing import Annotated

from litestar import Controller, Response, get
from litestar.di import NamedDependency
from litestar.params import FromPath, HeaderParameter
from litestar.response import Redirect
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.auth.identity import PUBLIC_ROUTE
from sparklink.controllers.helpers import success
from sparklink.db.models import Profile, User
from sparklink.db.services import (
    gallery_service,
    page_service,
    profile_service,
    resume_service,
    social_link_service,
    user_service,
)
from sparklink.lib.exceptions import NotFoundError
from sparklink.lib.templates import get_template

PAGE_PASSWORD_HEADER = "X-Page-Password"


async def _published_profile(db_session: AsyncSession, username: str) -> tuple[User, Profile]:
    user = await user_service.get_user_by_username(db_session, username)
    if user is None or not user.is_active:
        raise NotFoundError("Portfolio not found")
    profile = await profile_service.get_published_profile(db_session, user)
    return user, profile


def _owner(user: User) -> dict:
    return {
        "username": user.username,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "country": user.country,
        "profilePicture": user.profile_picture_url,
    }


class PublicController(Controller):
    path = "/public"
    opt = PUBLIC_ROUTE

    @get("/{username:str}")
    async def portfolio(self, db_session: NamedDependency[AsyncSession], username: FromPath[str]) -> Response:
        user, profile = await _published_profile(db_session, username)
        pages = await page_service.list_pages(db_session, profile.id, published_only=True)
        gallery = await gallery_service.list_items(db_session, profile.id, visible_only=True)
        links = await social_link_service.list_links(db_session, profile.id)
        return success({
            "user": _owner(user),
            "profile": profile.to_dict(),
            "template": get_template(profile.template_id).to_dict(),
            "pages": [page.to_dict(include_content=False) for page in pages],
            "gallery": gallery.to_dict(),
            "socialLinks": [link.to_dict() for link in links],
            "resume": resume_service.public_resume_info(profile),
        })

    @get("/{username:str}/pages")
    async def pages(self, db_session: NamedDependency[AsyncSession], username: FromPath[str]) -> Response:
        _, profile = await _published_profile(db_session, username)
        pages = await page_service.list_pages(db_session, profile.id, published_only=True)
        return success({"pages": [page.to_dict(include_content=False) for page in pages]})

    @get("/{username:str}/pages/{slug:str}")
    async def page(
        self,
        db_session: NamedDependency[AsyncSession],
        username: FromPath[str],
        slug: FromPath[str],
        password: Annotated[str | None, HeaderParameter(name=PAGE_PASSWORD_HEADER)] = None,
    ) -> Response:
        """Protected pages return metadata only until the password header verifies."""
        _, profile = await _published_profile(db_session, username)
        page = await page_service.get_page_by_slug(db_session, profile.id, slug, published_only=True)
        if page is None:
            raise NotFoundError("Page not found")

        unlocked = page_service.check_page_password(page, password)
        return success({"page": page.to_dict(include_content=unlocked), "locked": not unlocked})

    @get("/{username:str}/resume")
    async def resume(self, db_session: NamedDependency[AsyncSession], username: FromPath[str]) -> Response:
        _, profile = await _published_profile(db_session, username)
        return success(resume_service.public_resume_info(profile))

    @get("/{username:str}/resume/download")
    async def download_resume(
        self, db_session: NamedDependency[AsyncSession], username: FromPath[str]
    ) -> Redirect:
        _, profile = await _published_profile(db_session, username)
        return Redirect(path=resume_service.download_url(profile))
