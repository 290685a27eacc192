"""Tests for subscription tiers, limits and the template gate."""

import math

import pytest

from sparklink.lib.exceptions import TierLimitError
from sparklink.lib.tiers import (
    SUBSCRIPTION_PLANS,
    TIERS_ASCENDING,
    SubscriptionTier,
    accessible_tiers,
    can_access,
    can_create_page,
    check_can_create_page,
    check_password_protection,
    check_template_access,
    parse_tier,
    tier_limits,
)


class TestTierLimits:
    def test_fixed_table(self):
        assert tier_limits("STARTER").max_pages == 3
        assert tier_limits("STARTER").password_protection is False
        assert tier_limits("RISE").max_pages == 10
        assert tier_limits("RISE").password_protection is True
        assert math.isinf(tier_limits("BLAZE").max_pages)
        assert tier_limits("BLAZE").password_protection is True

    def test_limits_never_decrease_with_tier(self):
        for lower, higher in zip(TIERS_ASCENDING, TIERS_ASCENDING[1:]):
            low, high = tier_limits(lower), tier_limits(higher)
            assert low.max_pages <= high.max_pages
            assert low.password_protection <= high.password_protection

    @pytest.mark.parametrize("value", ["PLATINUM", "", None, 42])
    def test_unknown_tier_falls_back_to_starter(self, value):
        assert parse_tier(value) is SubscriptionTier.STARTER
        assert tier_limits(value) == tier_limits(SubscriptionTier.STARTER)

    def test_parse_tier_is_case_insensitive(self):
        assert parse_tier(" rise ") is SubscriptionTier.RISE

    def test_to_dict_renders_unlimited_as_none(self):
        data = tier_limits("BLAZE").to_dict()
        assert data["maxPages"] is None
        assert data["templateTiers"] == ["STARTER", "RISE", "BLAZE"]


class TestPageCreation:
    def test_starter_blocked_at_three_pages(self):
        """A STARTER user with 3 pages cannot create a 4th."""
        assert can_create_page("STARTER", 2) is True
        assert can_create_page("STARTER", 3) is False

    def test_check_raises_with_required_tier(self):
        with pytest.raises(TierLimitError) as exc_info:
            check_can_create_page("STARTER", 3)

        exc = exc_info.value
        assert exc.status_code == 403
        assert exc.required_tier is SubscriptionTier.RISE
        assert exc.extra == {"requiredTier": "RISE", "currentTier": "STARTER"}

    def test_rise_over_limit_requires_blaze(self):
        with pytest.raises(TierLimitError) as exc_info:
            check_can_create_page("RISE", 10)
        assert exc_info.value.required_tier is SubscriptionTier.BLAZE

    def test_blaze_is_unlimited(self):
        assert can_create_page("BLAZE", 10_000) is True
        check_can_create_page("BLAZE", 10_000)


class TestPasswordProtection:
    def test_starter_cannot_enable(self):
        with pytest.raises(TierLimitError) as exc_info:
            check_password_protection("STARTER", True)
        assert exc_info.value.required_tier is SubscriptionTier.RISE

    def test_disabling_is_always_allowed(self):
        check_password_protection("STARTER", False)

    @pytest.mark.parametrize("tier", ["RISE", "BLAZE"])
    def test_paid_tiers_can_enable(self, tier):
        check_password_protection(tier, True)


class TestTemplateGate:
    def test_rise_user_and_blaze_template(self):
        assert can_access("RISE", "BLAZE") is False
        assert can_access("RISE", "STARTER") is True

    def test_access_matches_tier_rank_for_every_pair(self):
        for user in TIERS_ASCENDING:
            for template in TIERS_ASCENDING:
                assert can_access(user, template) == (user.rank >= template.rank)

    def test_locked_template_explains_required_tier(self):
        access = check_template_access("STARTER", "RISE")
        assert access.can_access is False
        assert access.required_tier is SubscriptionTier.RISE
        assert access.message == "This template requires a RISE subscription or higher"

    def test_open_template_has_no_message(self):
        access = check_template_access("BLAZE", "BLAZE")
        assert access.can_access is True
        assert access.message is None

    def test_accessible_tiers(self):
        assert accessible_tiers("STARTER") == [SubscriptionTier.STARTER]
        assert accessible_tiers("BLAZE") == list(TIERS_ASCENDING)


class TestPlans:
    def test_every_tier_has_a_plan(self):
        assert set(SUBSCRIPTION_PLANS) == set(TIERS_ASCENDING)

    def test_plan_to_dict_includes_limits(self):
        data = SUBSCRIPTION_PLANS[SubscriptionTier.RISE].to_dict()
        assert data["tier"] == "RISE"
        assert data["limits"]["maxPages"] == 10

    def test_tier_ordering_operators(self):
        assert SubscriptionTier.STARTER < SubscriptionTier.RISE < SubscriptionTier.BLAZE
        assert str(SubscriptionTier.BLAZE) == "BLAZE"
