from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sparklink.db.base import Base

if TYPE_CHECKING:
    from sparklink.db.models.profile import Profile


class PageType(str, Enum):
    HOME = "HOME"
    ABOUT = "ABOUT"
    PROJECTS = "PROJECTS"
    SERVICES = "SERVICES"
    CONTACT = "CONTACT"
    GALLERY = "GALLERY"
    BLOG = "BLOG"
    RESUME = "RESUME"
    TESTIMONIALS = "TESTIMONIALS"
    CUSTOM = "CUSTOM"


class Page(Base):
    """A portfolio page. ``order`` is dense and zero-based per profile."""

    __tablename__ = "pages"
    __table_args__ = (UniqueConstraint("profile_id", "slug", name="uq_pages_profile_slug"),)

    profile_id: Mapped[UUID] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    profile: Mapped["Profile"] = relationship("Profile", back_populates="pages")

    type: Mapped[str] = mapped_column(String(20), nullable=False, default=PageType.CUSTOM.value)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    # headline / subheading / sections
    content: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_password_protected: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)

    def to_dict(self, include_content: bool = True) -> dict:
        data = {
            "id": str(self.id),
            "type": self.type,
            "title": self.title,
            "slug": self.slug,
            "isPublished": self.is_published,
            "isPasswordProtected": self.is_password_protected,
            "order": self.order,
        }
        if include_content:
            data["content"] = self.content or {}
        return data
