from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, user_id, work_date, check_in_time, check_out_time, status,
    location_lat, location_lng, qr_code, notes
"""

# whitelist for manager edits; values are bound, column names are not
_EDITABLE_COLUMNS = {"status", "notes", "check_in_time", "check_out_time"}


def _to_record(row: dict) -> AttendanceRecord:
    status = row.get("status")
    return AttendanceRecord(
        record_id=int(row["record_id"]),
        user_id=int(row["user_id"]),
        work_date=row["work_date"],
        check_in_time=row.get("check_in_time"),
        check_out_time=row.get("check_out_time"),
        status=AttendanceStatus(status) if status else None,
        location_lat=as_float(row.get("location_lat")),
        location_lng=as_float(row.get("location_lng")),
        qr_code=row.get("qr_code"),
        notes=row.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        completed_only: bool = False,
    ) -> Sequence[AttendanceRecord]:
        extra = "AND check_in_time IS NOT NULL AND check_out_time IS NOT NULL" if completed_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE work_date BETWEEN %s AND %s {extra}
                ORDER BY work_date ASC, check_in_time ASC
                """,
                (start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        qr_code: Optional[str] = None,
        location_lat: Optional[float] = None,
        location_lng: Optional[float] = None,
    ) -> AttendanceRecord:
        # Only supplied columns are written on conflict; an earlier check-out and
        # stored location survive a same-day re-check-in, which leaves the row
        # closed with check-in after check-out (counted as 0 hours).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, work_date, check_in_time, status, qr_code, location_lat, location_lng
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    check_in_time=VALUES(check_in_time),
                    status=VALUES(status),
                    qr_code=VALUES(qr_code),
                    location_lat=COALESCE(VALUES(location_lat), location_lat),
                    location_lng=COALESCE(VALUES(location_lng), location_lng)
                """,
                (int(user_id), work_date, check_in_time, status.value, qr_code, location_lat, location_lng),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            return _to_record(fetchone(cur))

    def stamp_checkout(self, *, record_id: int, check_out_time: datetime, qr_code: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, qr_code=COALESCE(%s, qr_code)
                WHERE record_id=%s
                """,
                (check_out_time, qr_code, int(record_id)),
            )
            return cur.rowcount > 0

    def update_field(self, *, record_id: int, field: str, value) -> bool:
        if field not in _EDITABLE_COLUMNS:
            raise ValueError(f"Column {field!r} is not editable")
        if isinstance(value, AttendanceStatus):
            value = value.value
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE attendance_records SET {field}=%s WHERE record_id=%s", (value, int(record_id)))
            cur.execute("SELECT 1 FROM attendance_records WHERE record_id=%s", (int(record_id),))
            return fetchone(cur) is not None

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE record_id=%s", (int(record_id),))
            return cur.rowcount > 0
