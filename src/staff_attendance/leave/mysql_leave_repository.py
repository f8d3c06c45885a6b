from __future__ import annotations

from typing import Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import LeaveRequest
from .repository import LeaveRepository


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT request_id, user_id, start_date, end_date, leave_type, reason, status,
                       total_days, approved_by, approved_at, manager_notes, created_at
                FROM leave_requests
                WHERE user_id=%s
                ORDER BY start_date DESC
                """,
                (int(user_id),),
            )
            return [
                LeaveRequest(
                    request_id=int(r["request_id"]),
                    user_id=int(r["user_id"]),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    leave_type=LeaveType(r["leave_type"]),
                    reason=r["reason"],
                    total_days=int(r["total_days"]),
                    status=LeaveStatus(r["status"]),
                    approved_by=r.get("approved_by"),
                    approved_at=r.get("approved_at"),
                    manager_notes=r.get("manager_notes"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
