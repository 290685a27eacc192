"""Tests for the action hook registry."""

import pytest

from sparklink.lib.hooks import AFTER_COLLECTION_REORDER, HookRegistry, action, hooks


@pytest.fixture
def registry():
    return HookRegistry()


class TestHookRegistry:
    def test_add_action_registers_handler(self, registry):
        registry.add_action("test_action", lambda: None)
        assert registry.has_action("test_action")

    @pytest.mark.asyncio
    async def test_priority_ordering(self, registry):
        call_order = []
        registry.add_action("ordered", lambda: call_order.append("late"), priority=20)
        registry.add_action("ordered", lambda: call_order.append("early"), priority=5)

        await registry.do_action("ordered")

        assert call_order == ["early", "late"]

    @pytest.mark.asyncio
    async def test_async_and_sync_handlers_receive_arguments(self, registry):
        received = []

        def sync_handler(collection, profile_id, entries):
            received.append(("sync", collection))

        async def async_handler(collection, profile_id, entries):
            received.append(("async", collection))

        registry.add_action(AFTER_COLLECTION_REORDER, sync_handler)
        registry.add_action(AFTER_COLLECTION_REORDER, async_handler)

        await registry.do_action(AFTER_COLLECTION_REORDER, "pages", "p1", [])

        assert received == [("sync", "pages"), ("async", "pages")]

    def test_remove_action(self, registry):
        def handler():
            pass

        registry.add_action("x", handler)
        assert registry.remove_action("x", handler) is True
        assert registry.remove_action("x", handler) is False
        assert not registry.has_action("x")

    @pytest.mark.asyncio
    async def test_unregistered_hook_is_noop(self, registry):
        await registry.do_action("nothing_here", 1, 2)

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self, registry):
        def broken():
            raise RuntimeError("handler failed")

        registry.add_action("x", broken)
        with pytest.raises(RuntimeError):
            await registry.do_action("x")


def test_action_decorator_registers_globally(clean_hooks):
    @action("decorated_hook", priority=1)
    def handler():
        pass

    assert hooks.has_action("decorated_hook")
