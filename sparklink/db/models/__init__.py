from sparklink.db.models.gallery_item import GalleryItem
from sparklink.db.models.page import Page, PageType
from sparklink.db.models.profile import Profile
from sparklink.db.models.social_link import SocialLink
from sparklink.db.models.user import User

__all__ = ["GalleryItem", "Page", "PageType", "Profile", "SocialLink", "User"]
