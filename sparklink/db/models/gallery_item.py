from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sparklink.db.base import Base

if TYPE_CHECKING:
    from sparklink.db.models.profile import Profile


class GalleryItem(Base):
    """An uploaded image with metadata. Ordered independently of pages."""

    __tablename__ = "gallery_items"

    profile_id: Mapped[UUID] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    profile: Mapped["Profile"] = relationship("Profile", back_populates="gallery_items")

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    storage_key: Mapped[str] = mapped_column(String(1024), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    is_visible: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "category": self.category,
            "tags": list(self.tags or []),
            "isVisible": self.is_visible,
            "order": self.order,
        }
