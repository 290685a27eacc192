"""Template catalogue and application."""

from litestar import Controller, Request, Response, get, post, put
from litestar.di import NamedDependency
from litestar.params import FromPath, FromQuery
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.auth.identity import PUBLIC_ROUTE
from sparklink.controllers.helpers import require_profile, require_user, success
from sparklink.db.services import profile_service
from sparklink.lib.templates import (
    DEFAULT_COLOR_SCHEMES,
    DEFAULT_TEMPLATES,
    get_template,
    list_templates,
)


class ApplyTemplateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    template_id: str = Field(alias="templateId")
    color_scheme: dict[str, str] | None = Field(default=None, alias="colorScheme")


class ColorSchemeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    color_scheme: dict[str, str] = Field(alias="colorScheme")


class TemplatesController(Controller):
    path = "/templates"

    @get("/")
    async def list_templates(
        self,
        request: Request,
        db_session: NamedDependency[AsyncSession],
        include_locked: FromQuery[bool] = False,
    ) -> Response:
        """Templates the caller's tier can apply; ``include_locked`` adds the rest with ``canAccess``."""
        user = await require_user(request, db_session)
        if include_locked:
            templates = [t.to_dict(user.tier) for t in DEFAULT_TEMPLATES if t.is_active]
        else:
            templates = [t.to_dict(user.tier) for t in list_templates(user.tier)]
        return success({
            "templates": templates,
            "colorSchemes": DEFAULT_COLOR_SCHEMES,
            "currentTier": str(user.tier),
        })

    @get("/{template_id:str}", opt=PUBLIC_ROUTE)
    async def get_template(self, template_id: FromPath[str]) -> Response:
        template = get_template(template_id)
        return success({"template": {**template.to_dict(), "requiredTier": str(template.tier)}})

    @post("/apply")
    async def apply_template(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: ApplyTemplateRequest
    ) -> Response:
        user = await require_user(request, db_session)
        profile = await profile_service.apply_template(
            db_session, user, data.template_id, color_scheme=data.color_scheme
        )
        return success({"profile": profile.to_dict()}, "Template applied successfully")

    @put("/colors")
    async def update_colors(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: ColorSchemeRequest
    ) -> Response:
        user, _ = await require_profile(request, db_session)
        profile = await profile_service.update_color_scheme(db_session, user.id, data.color_scheme)
        return success({"profile": profile.to_dict()}, "Color scheme updated successfully")
