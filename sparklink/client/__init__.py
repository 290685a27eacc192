"""Async dashboard client for the SparkLink API."""

from sparklink.client.actions import DashboardActions
from sparklink.client.api import SparkLinkClient
from sparklink.client.gating import PageGate
from sparklink.client.notify import Notice, NoticeQueue, NoticeType, Notifier, error_message
from sparklink.client.reorder import (
    ListedItem,
    OrderedListState,
    ReorderInProgress,
    gallery_collection,
    pages_collection,
    social_links_collection,
)
from sparklink.client.session import AuthSession, SessionUser

__all__ = [
    "AuthSession",
    "DashboardActions",
    "ListedItem",
    "Notice",
    "NoticeQueue",
    "NoticeType",
    "Notifier",
    "OrderedListState",
    "PageGate",
    "ReorderInProgress",
    "SessionUser",
    "SparkLinkClient",
    "error_message",
    "gallery_collection",
    "pages_collection",
    "social_links_collection",
]
