from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import parse_clock
from ..common.validators import optional_text, require_float_in_range
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, NotificationType, ScanAction
from ..core.exceptions import InvalidQRCodeError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..qr.service import QRCodeService
from .model import AttendanceRecord, ScanResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("status", "notes", "check_in_time", "check_out_time")


class AttendanceService:
    """Use cases: QR check-in/check-out and the attendance history."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        qr_codes: QRCodeService,
        notifications: Optional[NotificationService] = None,
    ):
        self._attendance = attendance
        self._qr_codes = qr_codes
        self._notifications = notifications

    def process_qr_scan(
        self,
        user_id: int,
        code: str,
        *,
        now: Optional[datetime] = None,
        latitude=None,
        longitude=None,
    ) -> ScanResult:
        """Validate a scanned code, then check the user in or out for today.

        An open record (checked in, not checked out) is closed; anything else
        is upserted on (user_id, today) with a new check-in time, keeping any
        earlier check-out. Nothing is written when the code is rejected.
        """

        now = now or datetime.now()
        today = now.date()

        code = (code or "").strip()
        if not code:
            raise ValidationError("Please enter a QR code")

        if not self._qr_codes.validate_code(code, today):
            raise InvalidQRCodeError("Invalid or expired QR code")

        lat, lng = self._parse_location(latitude, longitude)

        existing = self._attendance.get_for_user_and_date(int(user_id), today)
        if existing and existing.is_open:
            if not self._attendance.stamp_checkout(record_id=existing.record_id, check_out_time=now, qr_code=code):
                raise NotFoundError("Attendance record not found")
            record = self._attendance.get_for_user_and_date(int(user_id), today) or existing
            result = ScanResult(action=ScanAction.CHECK_OUT, record=record)
        else:
            record = self._attendance.upsert_checkin(
                user_id=int(user_id),
                work_date=today,
                check_in_time=now,
                status=AttendanceStatus.PRESENT,
                qr_code=code,
                location_lat=lat,
                location_lng=lng,
            )
            result = ScanResult(action=ScanAction.CHECK_IN, record=record)

        logger.info("User %s %s at %s", user_id, result.action.value, now.isoformat(timespec="seconds"))
        self._notify(int(user_id), result, now)
        return result

    @staticmethod
    def _parse_location(latitude, longitude):
        if latitude in (None, "") or longitude in (None, ""):
            return None, None
        return (
            require_float_in_range(latitude, "Latitude", -90, 90),
            require_float_in_range(longitude, "Longitude", -180, 180),
        )

    def _notify(self, user_id: int, result: ScanResult, now: datetime) -> None:
        if not self._notifications:
            return
        if result.action == ScanAction.CHECK_OUT:
            title, verb = "Checked out", "checked out"
        else:
            title, verb = "Checked in", "checked in"
        try:
            self._notifications.notify(user_id, title, f"You {verb} at {now:%H:%M}.", NotificationType.SUCCESS)
        except Exception:
            # the attendance write already succeeded
            logger.exception("Failed to create %s notification for user %s", result.action.value, user_id)

    def get_today_record(self, user_id: int, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(int(user_id), today)

    def get_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(int(user_id), int(limit))

    def list_team(self, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Everyone's records in the range, newest day first."""
        records = self._attendance.list_between(start_date=start_date, end_date=end_date)
        return sorted(records, key=lambda r: (r.work_date, r.check_in_time or datetime.min), reverse=True)

    def update_record_field(self, record_id: int, field: str, value: str) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise NotFoundError("Attendance record not found")

        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Field {field!r} cannot be edited")

        parsed = self._parse_field_value(record, field, value)
        if not self._attendance.update_field(record_id=record.record_id, field=field, value=parsed):
            raise NotFoundError("Attendance record not found")
        return self._attendance.get_by_id(record.record_id) or record

    @staticmethod
    def _parse_field_value(record: AttendanceRecord, field: str, value: str):
        raw = (value or "").strip()

        if field == "status":
            try:
                return AttendanceStatus(raw)
            except ValueError:
                raise ValidationError(f"Unknown status: {raw}")

        if field == "notes":
            return optional_text(raw)

        try:
            clock = parse_clock(raw)
        except ValueError:
            raise ValidationError("Times must use HH:MM")
        if clock is None:
            return None

        stamp = datetime.combine(record.work_date, clock)
        if field == "check_out_time" and record.check_in_time and stamp <= record.check_in_time:
            raise ValidationError("Check-out must be after check-in")
        if field == "check_in_time" and record.check_out_time and stamp >= record.check_out_time:
            raise ValidationError("Check-in must be before check-out")
        return stamp

    def delete_record(self, record_id: int) -> None:
        if not self._attendance.delete(int(record_id)):
            raise NotFoundError("Attendance record not found")
