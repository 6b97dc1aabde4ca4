"""In-memory notification center for dashboard sessions.

Notifications live only as long as the process; each browser session (keyed by
its auth token) gets its own center.
"""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS = 50
MAX_SESSIONS = 1000


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class NotificationAction:
    label: str
    page: str


@dataclass(frozen=True)
class Notification:
    id: str
    title: str
    message: str
    severity: Severity = Severity.INFO
    read: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    action: Optional[NotificationAction] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "severity": self.severity.value,
            "read": self.read,
            "created_at": self.created_at.isoformat(),
            "action": {"label": self.action.label, "page": self.action.page} if self.action else None,
        }


def _new_id() -> str:
    return uuid.uuid4().hex[:7]


def badge_label(unread: int) -> str:
    """Bell badge text: the count, capped at "9+"."""
    return "9+" if unread > 9 else str(unread)


class NotificationCenter:
    """Newest-first list of notifications with read tracking.

    Holds at most ``max_items``; adding past that drops the oldest.
    """

    def __init__(self, max_items: int = MAX_NOTIFICATIONS):
        self.max_items = max_items
        self._items: list[Notification] = []

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def add(
        self,
        title: str,
        message: str,
        severity: Severity = Severity.INFO,
        action: Optional[NotificationAction] = None,
    ) -> Notification:
        notification = Notification(
            id=_new_id(),
            title=title,
            message=message,
            severity=severity,
            action=action,
        )
        self._items.insert(0, notification)
        del self._items[self.max_items:]
        return notification

    def mark_as_read(self, notification_id: str) -> bool:
        for i, n in enumerate(self._items):
            if n.id == notification_id:
                self._items[i] = replace(n, read=True)
                return True
        return False

    def mark_all_as_read(self) -> int:
        changed = self.unread_count
        self._items = [replace(n, read=True) for n in self._items]
        return changed

    def remove(self, notification_id: str) -> bool:
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        return len(self._items) < before

    def clear(self) -> None:
        self._items = []

    def to_dict(self) -> dict:
        return {
            "notifications": [n.to_dict() for n in self._items],
            "unread_count": self.unread_count,
            "unread_badge": badge_label(self.unread_count),
        }


class NotificationRegistry:
    """One NotificationCenter per session token.

    Only adding a notification opens a center. Once ``max_sessions`` centers
    exist the least recently used one is dropped.
    """

    def __init__(self, max_sessions: int = MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._centers: OrderedDict[str, NotificationCenter] = OrderedDict()

    def get(self, token: str) -> Optional[NotificationCenter]:
        center = self._centers.get(token)
        if center is not None:
            self._centers.move_to_end(token)
        return center

    def for_session(self, token: str) -> NotificationCenter:
        center = self.get(token)
        if center is None:
            center = NotificationCenter()
            self._centers[token] = center
            while len(self._centers) > self.max_sessions:
                self._centers.popitem(last=False)
                logger.debug("Evicted least recently used notification center")
            logger.debug("Opened notification center (%d active)", len(self._centers))
        return center

    def discard(self, token: str) -> bool:
        return self._centers.pop(token, None) is not None

    def __len__(self) -> int:
        return len(self._centers)


registry = NotificationRegistry()
