"""JWT bearer authentication built on Litestar's ``JWTAuth`` backend.

The middleware decodes ``Authorization: Bearer <jwt>`` on every request
not excluded from auth, and stores the caller's user id as
``connection.user``. Tokens are HS256 JWTs whose ``sub`` is the user id and
whose extras carry ``type: "access"``.
"""

from datetime import timedelta
from uuid import UUID

from litestar.connection import ASGIConnection
from litestar.security.jwt import JWTAuth, Token

ACCESS_TOKEN_TYPE = "access"
TOKEN_ALGORITHM = "HS256"


async def retrieve_user_id(token: Token, connection: ASGIConnection) -> UUID | None:
    """Resolve a decoded token to a user id; None rejects the request."""
    if token.extras.get("type") != ACCESS_TOKEN_TYPE:
        return None
    try:
        return UUID(token.sub)
    except ValueError:
        return None


def create_jwt_auth(secret: str, token_ttl: int, exclude: list[str] | None = None) -> JWTAuth[UUID]:
    """Build the auth backend.

    Args:
        secret: Signing key (``SECRET_KEY``).
        token_ttl: Access token lifetime in seconds.
        exclude: Path patterns served without authentication.
    """
    return JWTAuth[UUID](
        token_secret=secret,
        retrieve_user_handler=retrieve_user_id,
        algorithm=TOKEN_ALGORITHM,
        default_token_expiration=timedelta(seconds=token_ttl),
        exclude=exclude,
    )


def create_access_token(jwt_auth: JWTAuth, user_id: UUID | str) -> str:
    return jwt_auth.create_token(identifier=str(user_id), token_extras={"type": ACCESS_TOKEN_TYPE})
