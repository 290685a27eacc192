"""Async action hooks fired around content changes.

Handlers run in priority order (lower first) and may be sync or async::

    from sparklink.lib.hooks import action, AFTER_COLLECTION_REORDER

    @action(AFTER_COLLECTION_REORDER)
    async def log_reorder(collection, profile_id, entries):
        ...
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable

from sparklink.lib.observability import span


@dataclass(order=True)
class HookHandler:
    """A registered hook handler with priority."""

    priority: int
    callback: Callable = field(compare=False)

    async def call(self, *args: Any, **kwargs: Any) -> Any:
        result = self.callback(*args, **kwargs)
        if asyncio.iscoroutine(result):
            return await result
        return result


class HookRegistry:
    """Registry of named actions."""

    def __init__(self) -> None:
        self._actions: dict[str, list[HookHandler]] = defaultdict(list)

    def add_action(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int = 10,
    ) -> None:
        self._actions[hook_name].append(HookHandler(priority=priority, callback=callback))
        self._actions[hook_name].sort()

    def remove_action(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        """Remove an action callback. Returns True if it was registered."""
        handlers = self._actions.get(hook_name, [])
        for i, handler in enumerate(handlers):
            if handler.callback is callback:
                handlers.pop(i)
                return True
        return False

    def has_action(self, hook_name: str) -> bool:
        return bool(self._actions.get(hook_name))

    async def do_action(self, hook_name: str, *args: Any, **kwargs: Any) -> None:
        """Run every handler registered for ``hook_name``."""
        with span(f"hook.action:{hook_name}", hook_name=hook_name):
            for handler in list(self._actions.get(hook_name, [])):
                await handler.call(*args, **kwargs)

    def clear(self) -> None:
        self._actions.clear()


hooks = HookRegistry()


def action(hook_name: str, priority: int = 10) -> Callable[[Callable], Callable]:
    """Decorator registering a function on the global registry."""

    def decorator(func: Callable) -> Callable:
        hooks.add_action(hook_name, func, priority)
        return func

    return decorator


AFTER_PAGE_SAVE = "after_page_save"
AFTER_PAGE_DELETE = "after_page_delete"
AFTER_GALLERY_ITEM_SAVE = "after_gallery_item_save"
AFTER_GALLERY_ITEM_DELETE = "after_gallery_item_delete"
AFTER_COLLECTION_REORDER = "after_collection_reorder"
AFTER_TEMPLATE_APPLY = "after_template_apply"
AFTER_SOCIAL_LINKS_SAVE = "after_social_links_save"
AFTER_PROFILE_MEDIA_SAVE = "after_profile_media_save"
LOGFIRE_CONFIGURED = "logfire_configured"
