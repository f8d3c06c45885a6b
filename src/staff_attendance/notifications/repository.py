from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def list_for_user(self, user_id: int, *, is_read: Optional[bool] = None) -> Sequence[Notification]:
        """Newest first; ``is_read=None`` returns every notification."""

        raise NotImplementedError

    def create(self, *, user_id: int, title: str, message: str, type: NotificationType) -> int:
        raise NotImplementedError

    def mark_read(self, user_id: int, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self, user_id: int) -> int:
        raise NotImplementedError

    def delete(self, user_id: int, notification_id: int) -> bool:
        raise NotImplementedError
