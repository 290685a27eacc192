from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sparklink.db.base import Base

if TYPE_CHECKING:
    from sparklink.db.models.profile import Profile


class SocialLink(Base):
    """A link to one of the owner's social profiles, shown in ``order``."""

    __tablename__ = "social_links"

    profile_id: Mapped[UUID] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    profile: Mapped["Profile"] = relationship("Profile", back_populates="social_links")

    platform: Mapped[str] = mapped_column(String(30), nullable=False)
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "platform": self.platform,
            "url": self.url,
            "order": self.order,
        }
