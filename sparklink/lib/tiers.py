"""Subscription tiers, their limits, and the template access gate.

This table is the single source of truth for tier-gated features. The API
enforces it and the dashboard client consults it to disable controls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from sparklink.lib.exceptions import TierLimitError


class SubscriptionTier(str, Enum):
    STARTER = "STARTER"
    RISE = "RISE"
    BLAZE = "BLAZE"

    @property
    def rank(self) -> int:
        return _TIER_RANKS[self]

    @property
    def display_name(self) -> str:
        return self.value.title()

    def __str__(self) -> str:
        return self.value

    def __ge__(self, other):
        if not isinstance(other, SubscriptionTier):
            return NotImplemented
        return self.rank >= other.rank

    def __gt__(self, other):
        if not isinstance(other, SubscriptionTier):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other):
        if not isinstance(other, SubscriptionTier):
            return NotImplemented
        return self.rank <= other.rank

    def __lt__(self, other):
        if not isinstance(other, SubscriptionTier):
            return NotImplemented
        return self.rank < other.rank


_TIER_RANKS = {
    SubscriptionTier.STARTER: 0,
    SubscriptionTier.RISE: 1,
    SubscriptionTier.BLAZE: 2,
}

TIERS_ASCENDING: tuple[SubscriptionTier, ...] = (
    SubscriptionTier.STARTER,
    SubscriptionTier.RISE,
    SubscriptionTier.BLAZE,
)


def parse_tier(value: str | SubscriptionTier | None) -> SubscriptionTier:
    """Lenient conversion; anything unrecognised is treated as STARTER."""
    if isinstance(value, SubscriptionTier):
        return value
    if isinstance(value, str):
        try:
            return SubscriptionTier(value.strip().upper())
        except ValueError:
            pass
    return SubscriptionTier.STARTER


@dataclass(frozen=True)
class TierLimits:
    """Capabilities granted by a subscription tier."""

    max_pages: int | float
    password_protection: bool
    template_tiers: frozenset[SubscriptionTier]
    social_links: int | float = 5
    custom_domain: bool = False
    remove_branding: bool = False
    analytics: bool = False
    scheduled_publishing: bool = False
    verified_badge: bool = False

    def to_dict(self) -> dict:
        return {
            "maxPages": None if math.isinf(self.max_pages) else self.max_pages,
            "passwordProtection": self.password_protection,
            "templateTiers": sorted((str(t) for t in self.template_tiers), key=lambda t: SubscriptionTier(t).rank),
            "socialLinks": None if math.isinf(self.social_links) else self.social_links,
            "customDomain": self.custom_domain,
            "removeBranding": self.remove_branding,
            "analytics": self.analytics,
            "scheduledPublishing": self.scheduled_publishing,
            "verifiedBadge": self.verified_badge,
        }


TIER_LIMITS: dict[SubscriptionTier, TierLimits] = {
    SubscriptionTier.STARTER: TierLimits(
        max_pages=3,
        password_protection=False,
        template_tiers=frozenset({SubscriptionTier.STARTER}),
        social_links=5,
    ),
    SubscriptionTier.RISE: TierLimits(
        max_pages=10,
        password_protection=True,
        template_tiers=frozenset({SubscriptionTier.STARTER, SubscriptionTier.RISE}),
        social_links=10,
        remove_branding=True,
        analytics=True,
    ),
    SubscriptionTier.BLAZE: TierLimits(
        max_pages=math.inf,
        password_protection=True,
        template_tiers=frozenset(TIERS_ASCENDING),
        social_links=math.inf,
        custom_domain=True,
        remove_branding=True,
        analytics=True,
        scheduled_publishing=True,
        verified_badge=True,
    ),
}


def tier_limits(tier: str | SubscriptionTier | None) -> TierLimits:
    """Limits for ``tier``; total over all inputs."""
    return TIER_LIMITS[parse_tier(tier)]


def _lowest_tier_where(predicate) -> SubscriptionTier | None:
    for tier in TIERS_ASCENDING:
        if predicate(TIER_LIMITS[tier]):
            return tier
    return None


def can_create_page(tier: str | SubscriptionTier | None, current_count: int) -> bool:
    return current_count < tier_limits(tier).max_pages


def check_can_create_page(tier: str | SubscriptionTier | None, current_count: int) -> None:
    """Raise TierLimitError when another page would exceed the tier's limit."""
    if can_create_page(tier, current_count):
        return
    current = parse_tier(tier)
    limit = tier_limits(current).max_pages
    required = _lowest_tier_where(lambda limits: current_count < limits.max_pages)
    raise TierLimitError(
        f"Your {current.display_name} plan allows up to {limit} pages",
        required_tier=required,
        current_tier=current,
    )


def check_social_links(tier: str | SubscriptionTier | None, count: int) -> None:
    """Raise TierLimitError when ``count`` links exceed the tier's allowance."""
    limit = tier_limits(tier).social_links
    if count <= limit:
        return
    current = parse_tier(tier)
    raise TierLimitError(
        f"Your {current.display_name} plan allows up to {limit} social links",
        required_tier=_lowest_tier_where(lambda limits: count <= limits.social_links),
        current_tier=current,
    )


def check_password_protection(tier: str | SubscriptionTier | None, enabled: bool) -> None:
    """Raise TierLimitError when enabling password protection is not allowed."""
    if not enabled or tier_limits(tier).password_protection:
        return
    raise TierLimitError(
        "Password protection requires a RISE subscription or higher",
        required_tier=_lowest_tier_where(lambda limits: limits.password_protection),
        current_tier=parse_tier(tier),
    )


# --- Template gate ---


@dataclass(frozen=True)
class TemplateAccess:
    can_access: bool
    required_tier: SubscriptionTier
    message: str | None = None


def can_access(user_tier: str | SubscriptionTier | None, template_tier: str | SubscriptionTier | None) -> bool:
    """True when the user's tier ranks at or above the template's tier."""
    return parse_tier(user_tier).rank >= parse_tier(template_tier).rank


def check_template_access(
    user_tier: str | SubscriptionTier | None,
    template_tier: str | SubscriptionTier | None,
) -> TemplateAccess:
    """Access decision plus the explanation shown on locked templates."""
    required = parse_tier(template_tier)
    if can_access(user_tier, required):
        return TemplateAccess(can_access=True, required_tier=required)
    return TemplateAccess(
        can_access=False,
        required_tier=required,
        message=f"This template requires a {required} subscription or higher",
    )


def accessible_tiers(user_tier: str | SubscriptionTier | None) -> list[SubscriptionTier]:
    return [tier for tier in TIERS_ASCENDING if can_access(user_tier, tier)]


# --- Plan catalogue ---


@dataclass(frozen=True)
class SubscriptionPlan:
    tier: SubscriptionTier
    name: str
    monthly_price: int
    yearly_price: int
    features: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "tier": str(self.tier),
            "name": self.name,
            "monthlyPrice": self.monthly_price,
            "yearlyPrice": self.yearly_price,
            "features": list(self.features),
            "limits": tier_limits(self.tier).to_dict(),
        }


SUBSCRIPTION_PLANS: dict[SubscriptionTier, SubscriptionPlan] = {
    SubscriptionTier.STARTER: SubscriptionPlan(
        tier=SubscriptionTier.STARTER,
        name="Starter",
        monthly_price=0,
        yearly_price=0,
        features=[
            "Up to 3 portfolio pages",
            "SparkLink-branded URL",
            "3 professional templates",
            "Up to 5 social media links",
            "Mobile optimized, SEO-ready",
        ],
    ),
    SubscriptionTier.RISE: SubscriptionPlan(
        tier=SubscriptionTier.RISE,
        name="Rise",
        monthly_price=35,
        yearly_price=350,
        features=[
            "Up to 10 pages",
            "Standard templates",
            "Analytics dashboard",
            "Option to remove SparkLink branding",
            "Password-protect pages",
        ],
    ),
    SubscriptionTier.BLAZE: SubscriptionPlan(
        tier=SubscriptionTier.BLAZE,
        name="Blaze",
        monthly_price=70,
        yearly_price=700,
        features=[
            "Unlimited pages and access to all template designs",
            "White-label option",
            "Verified badge on your profile",
            "Schedule pages to go live at specific times",
            "Priority support",
        ],
    ),
}
