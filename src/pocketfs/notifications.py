"""User-facing notices (the explorer's toasts)."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.WARNING: logging.WARNING,
    NoticeLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Notice:
    message: str
    level: NoticeLevel = NoticeLevel.INFO
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


class Notifier:
    """Keeps the most recent notices and forwards each one to listeners."""

    def __init__(self, max_history: int = 50):
        self.history: deque[Notice] = deque(maxlen=max_history)
        self._listeners: list[Callable[[Notice], None]] = []

    def subscribe(self, listener: Callable[[Notice], None]) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[Notice], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def last(self) -> Notice | None:
        return self.history[-1] if self.history else None

    def notify(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> Notice:
        notice = Notice(message=message, level=level)
        self.history.append(notice)
        logger.log(_LOG_LEVELS[level], "%s", message)
        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception as e:
                logger.error("Notice listener failed: %s", e)
        return notice

    def success(self, message: str) -> Notice:
        return self.notify(message, NoticeLevel.SUCCESS)

    def info(self, message: str) -> Notice:
        return self.notify(message, NoticeLevel.INFO)

    def warning(self, message: str) -> Notice:
        return self.notify(message, NoticeLevel.WARNING)

    def error(self, message: str) -> Notice:
        return self.notify(message, NoticeLevel.ERROR)
