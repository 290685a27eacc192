"""Dashboard-side tier gating.

Mirrors the server's checks so disallowed actions are disabled before any
request is made. The server still enforces the same rules.
"""

from dataclasses import dataclass

from sparklink.lib.exceptions import TierLimitError
from sparklink.lib.templates import TemplateDefinition
from sparklink.lib.tiers import (
    SubscriptionTier,
    TemplateAccess,
    can_create_page,
    check_can_create_page,
    check_template_access,
    parse_tier,
    tier_limits,
)


@dataclass
class PageGate:
    tier: SubscriptionTier
    page_count: int

    def __post_init__(self) -> None:
        self.tier = parse_tier(self.tier)

    @property
    def can_create(self) -> bool:
        return can_create_page(self.tier, self.page_count)

    @property
    def create_block_reason(self) -> str | None:
        """Why the Create button is disabled, or None when it is enabled."""
        try:
            check_can_create_page(self.tier, self.page_count)
        except TierLimitError as exc:
            return exc.message
        return None

    @property
    def password_toggle_enabled(self) -> bool:
        return tier_limits(self.tier).password_protection

    def ensure_can_create(self) -> None:
        """Raise TierLimitError when a new page would exceed the tier."""
        check_can_create_page(self.tier, self.page_count)

    def template_state(self, template: TemplateDefinition) -> TemplateAccess:
        return check_template_access(self.tier, template.tier)

    def ensure_template(self, template: TemplateDefinition) -> None:
        access = self.template_state(template)
        if not access.can_access:
            raise TierLimitError(access.message, required_tier=access.required_tier, current_tier=self.tier)
