"""Tests for the template catalogue and color schemes."""

import pytest

from sparklink.lib.exceptions import NotFoundError, ValidationError
from sparklink.lib.templates import (
    DEFAULT_COLOR_SCHEMES,
    DEFAULT_TEMPLATE_ID,
    DEFAULT_TEMPLATES,
    get_template,
    list_templates,
    validate_color_scheme,
)
from sparklink.lib.tiers import SubscriptionTier


class TestCatalogue:
    def test_default_template_is_starter(self):
        template = get_template(DEFAULT_TEMPLATE_ID)
        assert template.is_default is True
        assert template.tier is SubscriptionTier.STARTER

    def test_unknown_template(self):
        with pytest.raises(NotFoundError):
            get_template("does-not-exist")

    def test_ids_are_unique(self):
        ids = [t.id for t in DEFAULT_TEMPLATES]
        assert len(ids) == len(set(ids))

    def test_starter_only_sees_starter_templates(self):
        templates = list_templates("STARTER")
        assert templates
        assert all(t.tier is SubscriptionTier.STARTER for t in templates)

    def test_blaze_sees_everything_cheapest_first(self):
        templates = list_templates("BLAZE")
        assert len(templates) == len([t for t in DEFAULT_TEMPLATES if t.is_active])
        ranks = [t.tier.rank for t in templates]
        assert ranks == sorted(ranks)

    def test_to_dict_with_tier_adds_access_flags(self):
        premium = next(t for t in DEFAULT_TEMPLATES if t.tier is SubscriptionTier.BLAZE)
        data = premium.to_dict(SubscriptionTier.RISE)
        assert data["canAccess"] is False
        assert data["requiredTier"] == "BLAZE"

    def test_to_dict_without_tier(self):
        data = get_template("minimal").to_dict()
        assert "canAccess" not in data
        assert data["previewImage"].endswith("/minimal.jpg")


class TestColorScheme:
    def test_missing_keys_filled_from_light(self):
        scheme = validate_color_scheme({"primary": "#ABCDEF"})
        assert scheme["primary"] == "#abcdef"
        assert scheme["background"] == DEFAULT_COLOR_SCHEMES["light"]["background"]

    def test_short_hex_accepted(self):
        assert validate_color_scheme({"text": "#fff"})["text"] == "#fff"

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError, match="Unknown color keys"):
            validate_color_scheme({"border": "#000000"})

    @pytest.mark.parametrize("value", ["red", "#12345", "123456", 0])
    def test_invalid_value_rejected(self, value):
        with pytest.raises(ValidationError):
            validate_color_scheme({"primary": value})

    def test_non_dict_rejected(self):
        with pytest.raises(ValidationError):
            validate_color_scheme(["#000000"])
