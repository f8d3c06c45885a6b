from __future__ import annotations

from .base import PayrollCalculator
from ...attendance.model import AttendanceRecord


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: whole hours of (out - in), not below 0."""

    def worked_hours(self, record: AttendanceRecord) -> int:
        if not record.check_in_time or not record.check_out_time:
            return 0
        seconds = (record.check_out_time - record.check_in_time).total_seconds()
        if seconds <= 0:
            return 0
        return int(seconds // 3600)
