from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchone, normalize_mysql_time
from .model import QRAttendanceConfig, QRConfigUpdate
from .repository import QRConfigRepository


class MySQLQRConfigRepository(QRConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_config(self) -> Optional[QRAttendanceConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT config_id, organization_name, qr_code_prefix, work_start_time, work_end_time,
                       late_threshold_minutes, location_validation_enabled, allowed_latitude,
                       allowed_longitude, geofence_radius_meters, access_pin_hash
                FROM qr_attendance_config
                ORDER BY config_id ASC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return QRAttendanceConfig(
                config_id=int(r["config_id"]),
                organization_name=r["organization_name"],
                qr_code_prefix=r["qr_code_prefix"],
                work_start_time=normalize_mysql_time(r.get("work_start_time")),
                work_end_time=normalize_mysql_time(r.get("work_end_time")),
                late_threshold_minutes=int(r["late_threshold_minutes"]),
                location_validation_enabled=as_bool(r.get("location_validation_enabled")),
                allowed_latitude=as_float(r.get("allowed_latitude")),
                allowed_longitude=as_float(r.get("allowed_longitude")),
                geofence_radius_meters=int(r["geofence_radius_meters"]),
                access_pin_hash=r.get("access_pin_hash"),
            )

    def update_config(self, config_id: int, update: QRConfigUpdate) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE qr_attendance_config
                SET organization_name=%s, qr_code_prefix=%s, work_start_time=%s, work_end_time=%s,
                    late_threshold_minutes=%s, location_validation_enabled=%s,
                    allowed_latitude=%s, allowed_longitude=%s, geofence_radius_meters=%s
                WHERE config_id=%s
                """,
                (
                    update.organization_name,
                    update.qr_code_prefix,
                    update.work_start_time,
                    update.work_end_time,
                    update.late_threshold_minutes,
                    1 if update.location_validation_enabled else 0,
                    update.allowed_latitude,
                    update.allowed_longitude,
                    update.geofence_radius_meters,
                    int(config_id),
                ),
            )
            # rowcount is 0 when nothing changed, so check existence instead
            cur.execute("SELECT 1 AS ok FROM qr_attendance_config WHERE config_id=%s", (int(config_id),))
            return fetchone(cur) is not None

    def update_location(self, config_id: int, *, latitude: float, longitude: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE qr_attendance_config SET allowed_latitude=%s, allowed_longitude=%s WHERE config_id=%s",
                (latitude, longitude, int(config_id)),
            )
            cur.execute("SELECT 1 AS ok FROM qr_attendance_config WHERE config_id=%s", (int(config_id),))
            return fetchone(cur) is not None
