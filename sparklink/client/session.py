"""Authenticated dashboard session.

The session is an explicit object passed to the API client; nothing is kept
in module globals. When a ``storage_path`` is given, ``login`` persists the
token and user to that JSON file and ``hydrate`` restores them.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from sparklink.lib.tiers import SubscriptionTier, parse_tier

logger = logging.getLogger(__name__)


class SessionUser(BaseModel):
    """The logged-in account as returned by ``/auth/login`` and ``/auth/me``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    email: str
    username: str
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    subscription: str = SubscriptionTier.STARTER.value

    @property
    def tier(self) -> SubscriptionTier:
        return parse_tier(self.subscription)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class AuthSession:
    def __init__(
        self,
        storage_path: Path | None = None,
        on_teardown: Callable[[], None] | None = None,
    ) -> None:
        self._storage_path = storage_path
        self._on_teardown = on_teardown
        self.token: str | None = None
        self.user: SessionUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.user)

    @property
    def tier(self) -> SubscriptionTier:
        return self.user.tier if self.user else SubscriptionTier.STARTER

    def hydrate(self) -> bool:
        """Restore a persisted session. A missing or corrupt file leaves the session anonymous."""
        self.token = None
        self.user = None
        if self._storage_path is None or not self._storage_path.exists():
            return False

        try:
            stored = json.loads(self._storage_path.read_text())
            token = stored["token"]
            user = SessionUser.model_validate(stored["user"])
        except (OSError, ValueError, KeyError, TypeError, pydantic.ValidationError):
            logger.warning("Discarding unreadable session file %s", self._storage_path)
            self._remove_file()
            return False

        if not token:
            return False
        self.token = token
        self.user = user
        return True

    def login(self, token: str, user: SessionUser | dict) -> None:
        if isinstance(user, dict):
            user = SessionUser.model_validate(user)
        self.token = token
        self.user = user
        self._persist()

    def update_user(self, user: SessionUser | dict) -> None:
        """Replace the cached user (e.g. after a subscription change)."""
        if isinstance(user, dict):
            user = SessionUser.model_validate(user)
        self.user = user
        self._persist()

    def teardown(self) -> None:
        """Forget the session everywhere, then hand control to ``on_teardown``."""
        self.token = None
        self.user = None
        self._remove_file()
        if self._on_teardown is not None:
            self._on_teardown()

    def auth_headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _persist(self) -> None:
        if self._storage_path is None or self.user is None:
            return
        self._storage_path.parent.mkdir(parents=True, exist_ok=True)
        self._storage_path.write_text(json.dumps({"token": self.token, "user": self.user.to_dict()}))

    def _remove_file(self) -> None:
        if self._storage_path is not None:
            self._storage_path.unlink(missing_ok=True)
