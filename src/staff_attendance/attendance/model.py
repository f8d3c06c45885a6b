from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, ScanAction


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (user, work_date)."""

    record_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    qr_code: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        """Checked in but not yet checked out."""
        return self.check_in_time is not None and self.check_out_time is None

    @property
    def has_location(self) -> bool:
        return self.location_lat is not None and self.location_lng is not None


@dataclass(frozen=True)
class ScanResult:
    action: ScanAction
    record: AttendanceRecord

    @property
    def message(self) -> str:
        if self.action == ScanAction.CHECK_OUT:
            return "Successfully checked out!"
        return "Successfully checked in!"
