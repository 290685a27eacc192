"""Account registration and credential checks."""

import logging
import re
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from sparklink.db.models import User
from sparklink.lib.exceptions import AuthenticationError, ValidationError
from sparklink.lib.tiers import SubscriptionTier, parse_tier

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-z0-9_-]{3,30}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8


def normalize_username(username: str | None) -> str:
    username = (username or "").strip().lower()
    if not USERNAME_PATTERN.match(username):
        raise ValidationError(
            "Username must be 3-30 characters of lowercase letters, numbers, '-' or '_'"
        )
    return username


async def get_user_by_id(db_session: AsyncSession, user_id: UUID) -> User | None:
    result = await db_session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db_session: AsyncSession, username: str) -> User | None:
    result = await db_session.execute(select(User).where(User.username == username.lower()))
    return result.scalar_one_or_none()


async def create_user(
    db_session: AsyncSession,
    email: str,
    username: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> User:
    """Register a new STARTER account.

    Raises:
        ValidationError: Malformed fields, or email/username already taken.
    """
    email = (email or "").strip().lower()

    if not EMAIL_PATTERN.match(email):
        raise ValidationError("A valid email address is required")
    username = normalize_username(username)
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    existing = await db_session.execute(
        select(User).where(or_(User.email == email, User.username == username))
    )
    taken = existing.scalar_one_or_none()
    if taken is not None:
        field = "email" if taken.email == email else "username"
        raise ValidationError(f"An account with this {field} already exists")

    user = User(
        email=email,
        username=username,
        first_name=first_name,
        last_name=last_name,
        password_hash=generate_password_hash(password),
        subscription=SubscriptionTier.STARTER.value,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)

    logger.info("Registered user %s (%s)", user.id, username)
    return user


async def authenticate(db_session: AsyncSession, email: str, password: str) -> User:
    """Return the user for valid credentials or raise AuthenticationError."""
    result = await db_session.execute(select(User).where(User.email == (email or "").strip().lower()))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active or not check_password_hash(user.password_hash, password or ""):
        raise AuthenticationError("Invalid email or password")
    return user


async def set_subscription(db_session: AsyncSession, user: User, tier: str | SubscriptionTier) -> User:
    """Change a user's tier. Existing content above the new limits is kept."""
    user.subscription = parse_tier(tier).value
    await db_session.commit()
    await db_session.refresh(user)
    logger.info("User %s moved to %s", user.id, user.subscription)
    return user


async def is_username_available(
    db_session: AsyncSession,
    username: str,
    exclude_user_id: UUID | None = None,
) -> bool:
    """False when another account holds ``username``. Malformed names are never available."""
    try:
        username = normalize_username(username)
    except ValidationError:
        return False
    query = select(User.id).where(User.username == username)
    if exclude_user_id is not None:
        query = query.where(User.id != exclude_user_id)
    result = await db_session.execute(query)
    return result.scalar_one_or_none() is None


async def update_account(
    db_session: AsyncSession,
    user: User,
    *,
    first_name: str | None = None,
    last_name: str | None = None,
    username: str | None = None,
    country: str | None = None,
    phone: str | None = None,
) -> User:
    """Edit the account fields shown on the portfolio. ``None`` leaves a field unchanged.

    Raises:
        ValidationError: Malformed username, or the username is already taken.
    """
    if username is not None:
        username = normalize_username(username)
        if username != user.username:
            if not await is_username_available(db_session, username, exclude_user_id=user.id):
                raise ValidationError("Username already taken")
            logger.info("User %s renamed %s -> %s", user.id, user.username, username)
            user.username = username

    for field, value in (
        ("first_name", first_name),
        ("last_name", last_name),
        ("country", country),
        ("phone", phone),
    ):
        if value is not None:
            setattr(user, field, value.strip() or None)

    await db_session.commit()
    await db_session.refresh(user)
    return user
