"""Registration, login and the current account."""

import logging

from litestar import Controller, Request, Response, get, post
from litestar.di import NamedDependency
from litestar.status_codes import HTTP_201_CREATED
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.auth.identity import PUBLIC_ROUTE, token_backend
from sparklink.auth.tokens import create_access_token
from sparklink.controllers.helpers import require_user, success
from sparklink.db.models import User
from sparklink.db.services import profile_service, user_service

logger = logging.getLogger(__name__)


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    username: str
    password: str
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")


class LoginRequest(BaseModel):
    email: str
    password: str


def _session_payload(request: Request, user: User) -> dict:
    token = create_access_token(token_backend(request), user.id)
    return {"token": token, "user": user.to_dict()}


class AuthController(Controller):
    path = "/auth"

    @post("/register", opt=PUBLIC_ROUTE)
    async def register(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: RegisterRequest
    ) -> Response:
        user = await user_service.create_user(
            db_session,
            email=data.email,
            username=data.username,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
        )
        await profile_service.get_or_create_profile(db_session, user.id)
        return success(_session_payload(request, user), "Account created", status_code=HTTP_201_CREATED)

    @post("/login", opt=PUBLIC_ROUTE)
    async def login(
        self, request: Request, db_session: NamedDependency[AsyncSession], data: LoginRequest
    ) -> Response:
        user = await user_service.authenticate(db_session, data.email, data.password)
        logger.info("User %s logged in", user.id)
        return success(_session_payload(request, user), "Login successful")

    @get("/me")
    async def me(self, request: Request, db_session: NamedDependency[AsyncSession]) -> Response:
        user = await require_user(request, db_session)
        profile = await profile_service.get_or_create_profile(db_session, user.id)
        return success({"user": user.to_dict(), "profile": profile.to_dict()})
