from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from .feed import ChangeFeed
from .model import Notification, NotificationCounts
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

FILTERS = ("all", "unread", "read")


class NotificationService:
    """Use cases: the notifications page and the change feed that drives it."""

    def __init__(self, notifications: NotificationRepository, feed: Optional[ChangeFeed] = None):
        self._notifications = notifications
        self._feed = feed or ChangeFeed()

    @property
    def feed(self) -> ChangeFeed:
        return self._feed

    def _publish(self, user_id: int, event: str, notification_id: Optional[int] = None) -> None:
        self._feed.publish(
            user_id,
            {"table": "notifications", "event": event, "id": notification_id},
        )

    def list(self, user_id: int, filter: str = "all") -> Sequence[Notification]:
        if filter not in FILTERS:
            raise ValidationError(f"Unknown filter: {filter}")
        is_read = {"all": None, "unread": False, "read": True}[filter]
        return self._notifications.list_for_user(int(user_id), is_read=is_read)

    def counts(self, user_id: int) -> NotificationCounts:
        items = self._notifications.list_for_user(int(user_id))
        unread = sum(1 for n in items if not n.is_read)
        return NotificationCounts(total=len(items), unread=unread, read=len(items) - unread)

    def notify(
        self,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
    ) -> int:
        notification_id = self._notifications.create(
            user_id=int(user_id),
            title=require_non_empty(title, "Title"),
            message=require_non_empty(message, "Message"),
            type=type,
        )
        self._publish(user_id, "INSERT", notification_id)
        return notification_id

    def mark_read(self, user_id: int, notification_id: int) -> None:
        if not self._notifications.mark_read(int(user_id), int(notification_id)):
            raise NotFoundError("Notification not found")
        self._publish(user_id, "UPDATE", int(notification_id))

    def mark_all_read(self, user_id: int) -> int:
        changed = self._notifications.mark_all_read(int(user_id))
        if changed:
            self._publish(user_id, "UPDATE")
        return changed

    def delete(self, user_id: int, notification_id: int) -> None:
        if not self._notifications.delete(int(user_id), int(notification_id)):
            raise NotFoundError("Notification not found")
        self._publish(user_id, "DELETE", int(notification_id))
