"""Portfolio template catalogue and color schemes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from sparklink.lib.exceptions import NotFoundError, ValidationError
from sparklink.lib.tiers import SubscriptionTier, accessible_tiers, check_template_access

_PREVIEW_BASE = "https://res.cloudinary.com/sparklink/image/upload/v1/templates"


@dataclass(frozen=True)
class TemplateDefinition:
    id: str
    name: str
    description: str
    category: str
    tier: SubscriptionTier
    features: dict[str, bool | str] = field(default_factory=dict)
    is_default: bool = False
    is_active: bool = True

    @property
    def preview_image(self) -> str:
        return f"{_PREVIEW_BASE}/{self.id}.jpg"

    def to_dict(self, user_tier: SubscriptionTier | None = None) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "previewImage": self.preview_image,
            "category": self.category,
            "tier": str(self.tier),
            "features": dict(self.features),
            "isDefault": self.is_default,
            "isActive": self.is_active,
        }
        if user_tier is not None:
            access = check_template_access(user_tier, self.tier)
            data["canAccess"] = access.can_access
            data["requiredTier"] = str(access.required_tier)
        return data


def _features(transitions, dark, fonts, navigation, footer) -> dict[str, bool | str]:
    return {
        "animatedTransitions": transitions,
        "darkMode": dark,
        "customFonts": fonts,
        "responsiveLayout": True,
        "pageNavigationStyle": navigation,
        "footerStyle": footer,
    }


DEFAULT_TEMPLATES: tuple[TemplateDefinition, ...] = (
    TemplateDefinition(
        id="minimal",
        name="Minimal",
        description="Clean and simple design with focus on content",
        category="professional",
        tier=SubscriptionTier.STARTER,
        features=_features(False, False, False, "simple", "basic"),
        is_default=True,
    ),
    TemplateDefinition(
        id="elegant",
        name="Elegant",
        description="Sophisticated design with serif typography",
        category="professional",
        tier=SubscriptionTier.STARTER,
        features=_features(False, False, True, "centered", "minimal"),
    ),
    TemplateDefinition(
        id="bold",
        name="Bold",
        description="High contrast design with strong typography",
        category="professional",
        tier=SubscriptionTier.STARTER,
        features=_features(False, True, False, "side", "standard"),
    ),
    TemplateDefinition(
        id="creative",
        name="Creative",
        description="Unique layout with artistic elements",
        category="creative",
        tier=SubscriptionTier.RISE,
        features=_features(True, True, True, "animated", "creative"),
    ),
    TemplateDefinition(
        id="corporate",
        name="Corporate",
        description="Professional design for business professionals",
        category="professional",
        tier=SubscriptionTier.RISE,
        features=_features(False, True, True, "dropdown", "corporate"),
    ),
    TemplateDefinition(
        id="portfolio",
        name="Portfolio",
        description="Visual-focused layout for showcasing work",
        category="creative",
        tier=SubscriptionTier.RISE,
        features=_features(True, True, True, "hamburger", "minimal"),
    ),
    TemplateDefinition(
        id="premium",
        name="Premium",
        description="Luxury design with premium animations",
        category="premium",
        tier=SubscriptionTier.BLAZE,
        features=_features(True, True, True, "custom", "premium"),
    ),
)

DEFAULT_TEMPLATE_ID = "minimal"

COLOR_KEYS = ("primary", "secondary", "background", "text", "accent")

DEFAULT_COLOR_SCHEMES: dict[str, dict[str, str]] = {
    "light": {
        "primary": "#3498db",
        "secondary": "#2ecc71",
        "background": "#ffffff",
        "text": "#333333",
        "accent": "#e74c3c",
    },
    "dark": {
        "primary": "#3498db",
        "secondary": "#2ecc71",
        "background": "#121212",
        "text": "#f5f5f5",
        "accent": "#e74c3c",
    },
}

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

_BY_ID = {template.id: template for template in DEFAULT_TEMPLATES}


def get_template(template_id: str) -> TemplateDefinition:
    try:
        return _BY_ID[template_id]
    except KeyError:
        raise NotFoundError("Template not found") from None


def list_templates(user_tier: SubscriptionTier | str | None) -> list[TemplateDefinition]:
    """Active templates the tier can use, cheapest tier first then by name."""
    tiers = set(accessible_tiers(user_tier))
    available = [t for t in DEFAULT_TEMPLATES if t.is_active and t.tier in tiers]
    return sorted(available, key=lambda t: (t.tier.rank, t.name))


def validate_color_scheme(scheme: dict | None) -> dict[str, str]:
    """Return a normalised scheme or raise ValidationError.

    Missing keys are filled from the light scheme; unknown keys are rejected.
    """
    if not isinstance(scheme, dict):
        raise ValidationError("Color scheme must be an object")

    unknown = sorted(set(scheme) - set(COLOR_KEYS))
    if unknown:
        raise ValidationError(f"Unknown color keys: {', '.join(unknown)}")

    result = dict(DEFAULT_COLOR_SCHEMES["light"])
    for key, value in scheme.items():
        if not isinstance(value, str) or not _HEX_COLOR.match(value):
            raise ValidationError(f"Invalid color for {key}: {value!r}")
        result[key] = value.lower()
    return result
