from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


def _to_notification(row: dict) -> Notification:
    return Notification(
        notification_id=int(row["notification_id"]),
        user_id=int(row["user_id"]),
        title=row["title"],
        message=row["message"],
        type=NotificationType(row["type"]),
        is_read=as_bool(row.get("is_read")),
        created_at=row.get("created_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int, *, is_read: Optional[bool] = None) -> Sequence[Notification]:
        sql = """
            SELECT notification_id, user_id, title, message, type, is_read, created_at
            FROM notifications
            WHERE user_id=%s
        """
        params: list = [int(user_id)]
        if is_read is not None:
            sql += " AND is_read=%s"
            params.append(1 if is_read else 0)
        sql += " ORDER BY created_at DESC, notification_id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_notification(r) for r in fetchall(cur)]

    def create(self, *, user_id: int, title: str, message: str, type: NotificationType) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO notifications(user_id, title, message, type) VALUES(%s,%s,%s,%s)",
                (int(user_id), title, message, type.value),
            )
            return int(cur.lastrowid)

    def mark_read(self, user_id: int, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s AND user_id=%s",
                (int(notification_id), int(user_id)),
            )
            return cur.rowcount > 0

    def mark_all_read(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE user_id=%s AND is_read=0", (int(user_id),))
            return int(cur.rowcount)

    def delete(self, user_id: int, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM notifications WHERE notification_id=%s AND user_id=%s",
                (int(notification_id), int(user_id)),
            )
            return cur.rowcount > 0
