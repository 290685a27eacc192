"""User-facing notices (toasts) for dashboard operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from sparklink.lib.exceptions import NetworkError, SparkLinkError


class NoticeType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class Notice:
    message: str
    type: NoticeType = NoticeType.INFO
    dismissible: bool = True


@runtime_checkable
class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class NoticeQueue:
    """In-memory notifier. ``drain`` returns and clears pending notices."""

    def __init__(self) -> None:
        self._notices: list[Notice] = []

    def add(self, message: str, notice_type: NoticeType = NoticeType.INFO, dismissible: bool = True) -> None:
        self._notices.append(Notice(message=message, type=notice_type, dismissible=dismissible))

    def success(self, message: str) -> None:
        self.add(message, NoticeType.SUCCESS)

    def error(self, message: str) -> None:
        self.add(message, NoticeType.ERROR)

    def warning(self, message: str) -> None:
        self.add(message, NoticeType.WARNING)

    def info(self, message: str) -> None:
        self.add(message, NoticeType.INFO)

    def peek(self) -> list[Notice]:
        return list(self._notices)

    def drain(self) -> list[Notice]:
        notices, self._notices = self._notices, []
        return notices

    def __len__(self) -> int:
        return len(self._notices)


def error_message(exc: BaseException, fallback: str) -> str:
    """Text to show for a failed operation.

    Server and validation messages are shown as-is; network failures and
    unexpected errors fall back to ``fallback``.
    """
    if isinstance(exc, NetworkError):
        return fallback
    if isinstance(exc, SparkLinkError) and exc.message:
        return exc.message
    return fallback
