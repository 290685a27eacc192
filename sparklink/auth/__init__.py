from sparklink.auth.identity import PUBLIC_ROUTE, current_user_id
from sparklink.auth.tokens import create_access_token, create_jwt_auth

__all__ = ["PUBLIC_ROUTE", "current_user_id", "create_access_token", "create_jwt_auth"]
