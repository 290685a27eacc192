"""Shared helpers for the JSON API controllers."""

from typing import Any

from litestar import Request, Response
from litestar.datastructures import UploadFile
from litestar.status_codes import HTTP_200_OK
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.auth.identity import current_user_id
from sparklink.db.models import Profile, User
from sparklink.db.services import profile_service, user_service
from sparklink.lib.exceptions import AuthenticationError, ValidationError
from sparklink.lib.media import MediaStore


def success(data: Any = None, message: str | None = None, status_code: int = HTTP_200_OK) -> Response:
    """Wrap a payload in the success envelope."""
    content: dict[str, Any] = {"status": "SUCCESS"}
    if message:
        content["message"] = message
    content["data"] = data if data is not None else {}
    return Response(content=content, status_code=status_code, media_type="application/json")


async def require_user(request: Request, db_session: AsyncSession) -> User:
    """The authenticated user. The account may have been removed since the token was issued."""
    user = await user_service.get_user_by_id(db_session, current_user_id(request))
    if user is None or not user.is_active:
        raise AuthenticationError("Account not found")
    return user


async def require_profile(request: Request, db_session: AsyncSession) -> tuple[User, Profile]:
    user = await require_user(request, db_session)
    profile = await profile_service.get_or_create_profile(db_session, user.id)
    return user, profile


def media_store(request: Request) -> MediaStore:
    return request.app.state.media_store


def upload_field(data: dict[str, Any], name: str, missing_message: str) -> UploadFile:
    upload = data.get(name)
    if not isinstance(upload, UploadFile):
        raise ValidationError(missing_message)
    return upload
