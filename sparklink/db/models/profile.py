from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from advanced_alchemy.types import DateTimeUTC
from sqlalchemy import JSON, Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sparklink.db.base import Base
from sparklink.lib.templates import DEFAULT_TEMPLATE_ID

if TYPE_CHECKING:
    from sparklink.db.models.gallery_item import GalleryItem
    from sparklink.db.models.page import Page
    from sparklink.db.models.social_link import SocialLink
    from sparklink.db.models.user import User


class Profile(Base):
    """Public portfolio settings; owns the page, gallery and social link collections."""

    __tablename__ = "profiles"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    user: Mapped["User"] = relationship("User", back_populates="profile", lazy="selectin")

    tagline: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    country_flag: Mapped[str | None] = mapped_column(String(16), nullable=True)

    background_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    background_image_key: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    resume_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    resume_key: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    resume_file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    resume_uploaded_at: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True)
    allow_resume_download: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    template_id: Mapped[str] = mapped_column(String(50), nullable=False, default=DEFAULT_TEMPLATE_ID)
    color_scheme: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    show_powered_by: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    pages: Mapped[list["Page"]] = relationship(
        "Page", back_populates="profile", cascade="all, delete-orphan", order_by="Page.order"
    )
    gallery_items: Mapped[list["GalleryItem"]] = relationship(
        "GalleryItem", back_populates="profile", cascade="all, delete-orphan", order_by="GalleryItem.order"
    )
    social_links: Mapped[list["SocialLink"]] = relationship(
        "SocialLink", back_populates="profile", cascade="all, delete-orphan", order_by="SocialLink.order"
    )

    @property
    def has_resume(self) -> bool:
        return bool(self.resume_key)

    def resume_info(self) -> dict:
        return {
            "hasResume": self.has_resume,
            "resumeFileName": self.resume_file_name,
            "resumeUploadedAt": self.resume_uploaded_at.isoformat() if self.resume_uploaded_at else None,
            "allowResumeDownload": self.allow_resume_download,
        }

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "tagline": self.tagline,
            "bio": self.bio,
            "countryFlag": self.country_flag,
            "backgroundImage": self.background_image_url,
            "templateId": self.template_id,
            "colorScheme": self.color_scheme,
            "isPublished": self.is_published,
            "showPoweredBy": self.show_powered_by,
        }
