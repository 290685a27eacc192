"""The caller's resume: upload, settings and removal."""

from typing import Any

from litestar import Controller, Request, Response, delete, get, post, put
from litestar.di import NamedDependency
from litestar.params import MultipartBody
from litestar.status_codes import HTTP_201_CREATED
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.auth.identity import app_settings
from sparklink.controllers.helpers import media_store, require_profile, success, upload_field
from sparklink.db.services import resume_service


class ResumeSettingsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    allow_resume_download: bool = Field(alias="allowResumeDownload")


class ResumeController(Controller):
    path = "/resume"

    @post("/upload")
    async def upload(
        self,
        request: Request,
        db_session: NamedDependency[AsyncSession],
        data: MultipartBody[dict[str, Any]],
    ) -> Response:
        """Multipart form with a ``resume`` PDF."""
        _, profile = await require_profile(request, db_session)
        upload = upload_field(data, "resume", "Resume file is required")
        profile = await resume_service.upload_resume(
            db_session,
            profile,
            media_store(request),
            data=await upload.read(),
            content_type=upload.content_type,
            file_name=upload.filename,
            max_bytes=app_settings(request).media.max_resume_bytes,
        )
        return success(
            {"resumeUrl": profile.resume_url, **profile.resume_info()},
            "Resume uploaded successfully",
            status_code=HTTP_201_CREATED,
        )

    @get("/info")
    async def info(self, request: Request, db_session: NamedDependency[AsyncSession]) -> Response:
        _, profile = await require_profile(request, db_session)
        return success({"resumeUrl": profile.resume_url, **profile.resume_info()})

    @put("/settings")
    async def settings(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: ResumeSettingsRequest
    ) -> Response:
        _, profile = await require_profile(request, db_session)
        profile = await resume_service.update_settings(db_session, profile, data.allow_resume_download)
        return success(profile.resume_info(), "Resume settings updated successfully")

    @delete("/", status_code=200)
    async def remove(self, request: Request, db_session: NamedDependency[AsyncSession]) -> Response:
        _, profile = await require_profile(request, db_session)
        await resume_service.delete_resume(db_session, profile, media_store(request))
        return success(message="Resume deleted successfully")
