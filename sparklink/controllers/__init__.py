from sparklink.controllers.auth import AuthController
from sparklink.controllers.gallery import GalleryController
from sparklink.controllers.pages import PagesController
from sparklink.controllers.profile import ProfileController
from sparklink.controllers.public import PublicController
from sparklink.controllers.resume import ResumeController
from sparklink.controllers.subscription import SubscriptionController
from sparklink.controllers.templates import TemplatesController

ROUTE_HANDLERS = [
    AuthController,
    ProfileController,
    ResumeController,
    PagesController,
    GalleryController,
    TemplatesController,
    SubscriptionController,
    PublicController,
]

__all__ = [
    "ROUTE_HANDLERS",
    "AuthController",
    "GalleryController",
    "PagesController",
    "ProfileController",
    "PublicController",
    "ResumeController",
    "SubscriptionController",
    "TemplatesController",
]
