"""Tests for social links and their tier cap."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from sparklink.db.models import SocialLink
from sparklink.db.services import social_link_service
from sparklink.lib.exceptions import NotFoundError, TierLimitError, ValidationError
from sparklink.lib.hooks import AFTER_SOCIAL_LINKS_SAVE
from sparklink.lib.tiers import SubscriptionTier, check_social_links


def _links(count):
    return [{"platform": "github", "url": f"https://github.com/user{i}"} for i in range(count)]


@pytest.fixture
def profile():
    return SimpleNamespace(id=uuid4())


class TestValidateLink:
    def test_normalises_platform(self):
        assert social_link_service.validate_link(" GitHub ", "https://github.com/ada") == (
            "github", "https://github.com/ada",
        )

    def test_unknown_platform(self):
        with pytest.raises(ValidationError, match="Unsupported"):
            social_link_service.validate_link("myspace", "https://myspace.com/ada")

    @pytest.mark.parametrize("url", ["", "github.com/ada", "ftp://example.com", "https://"])
    def test_url_must_be_http(self, url):
        with pytest.raises(ValidationError):
            social_link_service.validate_link("website", url)


class TestTierCap:
    def test_starter_allows_five(self):
        check_social_links("STARTER", 5)
        with pytest.raises(TierLimitError) as exc_info:
            check_social_links("STARTER", 6)
        assert exc_info.value.extra == {"requiredTier": "RISE", "currentTier": "STARTER"}

    def test_blaze_unlimited(self):
        check_social_links("BLAZE", 500)


class TestReplaceLinks:
    @pytest.mark.asyncio
    async def test_position_becomes_order(self, mock_db_session, profile):
        saved = []
        mock_db_session.add.side_effect = saved.append

        with patch.object(social_link_service, "list_links", AsyncMock(return_value=saved)), \
             patch.object(social_link_service.hooks, "do_action", AsyncMock()) as do_action:
            result = await social_link_service.replace_links(
                mock_db_session, profile, SubscriptionTier.STARTER,
                [{"platform": "twitter", "url": "https://x.com/ada"}, *_links(1)],
            )

        assert [(link.platform, link.order) for link in result] == [("twitter", 0), ("github", 1)]
        assert all(isinstance(link, SocialLink) for link in saved)
        mock_db_session.commit.assert_awaited_once()
        assert do_action.await_args.args[0] == AFTER_SOCIAL_LINKS_SAVE

    @pytest.mark.asyncio
    async def test_over_cap_writes_nothing(self, mock_db_session, profile):
        with pytest.raises(TierLimitError):
            await social_link_service.replace_links(mock_db_session, profile, SubscriptionTier.STARTER, _links(6))

        mock_db_session.execute.assert_not_called()
        mock_db_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_rise_allows_ten(self, mock_db_session, profile):
        with patch.object(social_link_service, "list_links", AsyncMock(return_value=[])), \
             patch.object(social_link_service.hooks, "do_action", AsyncMock()):
            await social_link_service.replace_links(mock_db_session, profile, SubscriptionTier.RISE, _links(10))

        assert mock_db_session.add.call_count == 10

    @pytest.mark.asyncio
    async def test_invalid_link_writes_nothing(self, mock_db_session, profile):
        with pytest.raises(ValidationError):
            await social_link_service.replace_links(
                mock_db_session, profile, SubscriptionTier.BLAZE, [{"platform": "github", "url": "nope"}],
            )
        mock_db_session.commit.assert_not_called()


class TestDeleteLink:
    @pytest.mark.asyncio
    async def test_closes_gap(self, mock_db_session, profile):
        link = SimpleNamespace(id=uuid4())
        close_gap = AsyncMock(return_value=1)
        with patch.object(social_link_service, "get_link", AsyncMock(return_value=link)), \
             patch.object(social_link_service.ordering_service, "close_gap", close_gap):
            await social_link_service.delete_link(mock_db_session, profile.id, link.id)

        mock_db_session.delete.assert_awaited_once_with(link)
        close_gap.assert_awaited_once_with(mock_db_session, SocialLink, profile.id)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_link(self, mock_db_session, profile):
        with pytest.raises(NotFoundError):
            await social_link_service.get_link(mock_db_session, profile.id, uuid4())
