"""Tests for the page service module."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from werkzeug.security import check_password_hash, generate_password_hash

from sparklink.db.models import Page
from sparklink.db.services import page_service
from sparklink.db.services.page_service import (
    _password_fields,
    check_page_password,
    create_page,
    delete_page,
    get_page,
    parse_page_type,
    update_page,
    validate_slug,
)
from sparklink.lib.exceptions import (
    NotFoundError,
    SlugConflictError,
    TierLimitError,
    ValidationError,
)
from sparklink.lib.tiers import SubscriptionTier

from tests.conftest import make_result


@pytest.fixture
def no_hooks():
    with patch.object(page_service.hooks, "do_action", AsyncMock()) as do_action:
        yield do_action


@pytest.fixture
def page_count():
    """Set the profile's current page count."""
    count_items = AsyncMock(return_value=0)
    with patch.object(page_service.ordering_service, "count_items", count_items):
        yield lambda count: setattr(count_items, "return_value", count)


def _page(**overrides):
    page = MagicMock(spec=Page)
    page.id = overrides.get("id", uuid4())
    page.slug = overrides.get("slug", "about")
    page.title = "About"
    page.order = overrides.get("order", 0)
    page.is_password_protected = overrides.get("is_password_protected", False)
    page.password_hash = overrides.get("password_hash")
    return page


class TestValidators:
    @pytest.mark.parametrize("slug", ["about", "my-work", "page-2"])
    def test_valid_slugs(self, slug):
        assert validate_slug(slug) == slug

    @pytest.mark.parametrize("slug", ["", "About", "my work", "-lead", "double--dash", "trail-"])
    def test_invalid_slugs(self, slug):
        with pytest.raises(ValidationError):
            validate_slug(slug)

    def test_page_type_case_insensitive(self):
        assert parse_page_type("about").value == "ABOUT"

    def test_unknown_page_type(self):
        with pytest.raises(ValidationError):
            parse_page_type("LANDING")


class TestPasswordFields:
    def test_unprotected_clears_hash(self):
        assert _password_fields(SubscriptionTier.RISE, False, None, "old") == {
            "is_password_protected": False,
            "password_hash": None,
        }

    def test_protected_hashes_new_password(self):
        fields = _password_fields(SubscriptionTier.RISE, True, "s3cret")
        assert check_password_hash(fields["password_hash"], "s3cret")

    def test_protected_keeps_existing_hash(self):
        fields = _password_fields(SubscriptionTier.BLAZE, True, None, "existing")
        assert fields["password_hash"] == "existing"

    def test_protected_without_any_password(self):
        with pytest.raises(ValidationError, match="password is required"):
            _password_fields(SubscriptionTier.RISE, True, None)

    def test_password_on_unprotected_page(self):
        with pytest.raises(ValidationError):
            _password_fields(SubscriptionTier.RISE, False, "s3cret")

    def test_starter_cannot_protect(self):
        with pytest.raises(TierLimitError):
            _password_fields(SubscriptionTier.STARTER, True, "s3cret")


class TestCreatePage:
    @pytest.mark.asyncio
    async def test_appends_at_end(self, mock_db_session, mock_profile, page_count, no_hooks):
        page_count(2)

        page = await create_page(
            mock_db_session,
            mock_profile,
            SubscriptionTier.STARTER,
            page_type="ABOUT",
            title=" About me ",
            slug="about",
        )

        assert page.order == 2
        assert page.title == "About me"
        assert page.profile_id == mock_profile.id
        mock_db_session.add.assert_called_once_with(page)
        mock_db_session.commit.assert_awaited_once()
        assert no_hooks.await_args.kwargs == {"is_new": True}

    @pytest.mark.asyncio
    async def test_starter_fourth_page_rejected(self, mock_db_session, mock_profile, page_count, no_hooks):
        page_count(3)

        with pytest.raises(TierLimitError) as exc_info:
            await create_page(
                mock_db_session,
                mock_profile,
                SubscriptionTier.STARTER,
                page_type="CUSTOM",
                title="Extra",
                slug="extra",
            )

        assert exc_info.value.extra["requiredTier"] == "RISE"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_slug_conflict(self, mock_db_session, mock_profile, page_count, no_hooks):
        page_count(0)
        mock_db_session.execute.return_value = make_result(scalar=uuid4())

        with pytest.raises(SlugConflictError):
            await create_page(
                mock_db_session,
                mock_profile,
                SubscriptionTier.RISE,
                page_type="HOME",
                title="Home",
                slug="home",
            )

    @pytest.mark.asyncio
    async def test_missing_title(self, mock_db_session, mock_profile):
        with pytest.raises(ValidationError):
            await create_page(
                mock_db_session,
                mock_profile,
                SubscriptionTier.RISE,
                page_type="HOME",
                title="   ",
                slug="home",
            )

    @pytest.mark.asyncio
    async def test_protected_page_stores_hash(self, mock_db_session, mock_profile, page_count, no_hooks):
        page_count(0)

        page = await create_page(
            mock_db_session,
            mock_profile,
            SubscriptionTier.RISE,
            page_type="PROJECTS",
            title="Client work",
            slug="client-work",
            is_password_protected=True,
            password="open-sesame",
        )

        assert page.is_password_protected is True
        assert check_password_hash(page.password_hash, "open-sesame")


class TestUpdatePage:
    @pytest.mark.asyncio
    async def test_never_touches_order(self, mock_db_session, mock_profile, no_hooks):
        page = _page(order=4)
        with patch.object(page_service, "get_page", AsyncMock(return_value=page)):
            await update_page(mock_db_session, mock_profile, SubscriptionTier.STARTER, page.id, title="New")

        assert page.order == 4
        assert page.title == "New"

    @pytest.mark.asyncio
    async def test_unset_fields_left_alone(self, mock_db_session, mock_profile, no_hooks):
        page = _page()
        page.is_published = True
        with patch.object(page_service, "get_page", AsyncMock(return_value=page)):
            await update_page(mock_db_session, mock_profile, SubscriptionTier.STARTER, page.id, title="New")

        assert page.is_published is True

    @pytest.mark.asyncio
    async def test_changing_slug_checks_conflicts(self, mock_db_session, mock_profile, no_hooks):
        page = _page(slug="old")
        mock_db_session.execute.return_value = make_result(scalar=uuid4())

        with patch.object(page_service, "get_page", AsyncMock(return_value=page)):
            with pytest.raises(SlugConflictError):
                await update_page(mock_db_session, mock_profile, SubscriptionTier.RISE, page.id, slug="taken")

    @pytest.mark.asyncio
    async def test_editing_protected_page_on_downgraded_tier(self, mock_db_session, mock_profile, no_hooks):
        """Title edits don't re-check protection the account can no longer enable."""
        page = _page(is_password_protected=True, password_hash="hash")
        with patch.object(page_service, "get_page", AsyncMock(return_value=page)):
            await update_page(
                mock_db_session, mock_profile, SubscriptionTier.STARTER, page.id,
                title="Renamed", is_password_protected=True,
            )

        assert page.password_hash == "hash"

    @pytest.mark.asyncio
    async def test_disabling_protection_clears_hash(self, mock_db_session, mock_profile, no_hooks):
        page = _page(is_password_protected=True, password_hash="hash")
        with patch.object(page_service, "get_page", AsyncMock(return_value=page)):
            await update_page(
                mock_db_session, mock_profile, SubscriptionTier.STARTER, page.id,
                is_password_protected=False,
            )

        assert page.is_password_protected is False
        assert page.password_hash is None


class TestGetAndDelete:
    @pytest.mark.asyncio
    async def test_get_page_not_found(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await get_page(mock_db_session, uuid4(), uuid4())

    @pytest.mark.asyncio
    async def test_delete_closes_gap_before_commit(self, mock_db_session, no_hooks):
        page = _page(order=1)
        calls = []
        mock_db_session.commit.side_effect = lambda: calls.append("commit")

        async def close_gap(*args):
            calls.append("close_gap")
            return 1

        with patch.object(page_service, "get_page", AsyncMock(return_value=page)), \
             patch.object(page_service.ordering_service, "close_gap", close_gap):
            await delete_page(mock_db_session, uuid4(), page.id)

        mock_db_session.delete.assert_awaited_once_with(page)
        assert calls == ["close_gap", "commit"]


class TestCheckPagePassword:
    def test_unprotected_page_is_open(self):
        assert check_page_password(SimpleNamespace(is_password_protected=False), None) is True

    def test_correct_password(self):
        page = SimpleNamespace(is_password_protected=True, password_hash=generate_password_hash("pw"))
        assert check_page_password(page, "pw") is True
        assert check_page_password(page, "nope") is False
        assert check_page_password(page, None) is False
