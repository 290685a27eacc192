from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sparklink.db.base import Base
from sparklink.lib.tiers import SubscriptionTier, parse_tier

if TYPE_CHECKING:
    from sparklink.db.models.profile import Profile


class User(Base):
    """Account holder. The subscription tier drives every feature limit."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    profile_picture_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    profile_picture_key: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    subscription: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriptionTier.STARTER.value, server_default="STARTER"
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    profile: Mapped["Profile | None"] = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def tier(self) -> SubscriptionTier:
        return parse_tier(self.subscription)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "email": self.email,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "country": self.country,
            "phone": self.phone,
            "profilePicture": self.profile_picture_url,
            "subscription": str(self.tier),
        }
