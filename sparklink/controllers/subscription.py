from litestar import Controller, Request, Response, get
from litestar.di import NamedDependency
from sqlalchemy.ext.asyncio import AsyncSession

from sparklink.auth.identity import PUBLIC_ROUTE
from sparklink.controllers.helpers import require_profile, success
from sparklink.db.models import Page, SocialLink
from sparklink.db.services import ordering_service
from sparklink.lib.tiers import SUBSCRIPTION_PLANS, can_create_page, tier_limits


class SubscriptionController(Controller):
    path = "/subscription"

    @get("/plans", opt=PUBLIC_ROUTE)
    async def plans(self) -> Response:
        return success({"plans": [plan.to_dict() for plan in SUBSCRIPTION_PLANS.values()]})

    @get("/current")
    async def current(self, request: Request, db_session: NamedDependency[AsyncSession]) -> Response:
        user, profile = await require_profile(request, db_session)
        page_count = await ordering_service.count_items(db_session, Page, profile.id)
        link_count = await ordering_service.count_items(db_session, SocialLink, profile.id)
        return success({
            "tier": str(user.tier),
            "plan": SUBSCRIPTION_PLANS[user.tier].to_dict(),
            "limits": tier_limits(user.tier).to_dict(),
            "usage": {
                "pages": page_count,
                "canCreatePage": can_create_page(user.tier, page_count),
                "socialLinks": link_count,
            },
        })
