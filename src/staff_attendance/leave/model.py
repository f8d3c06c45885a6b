from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: str
    total_days: int
    status: LeaveStatus = LeaveStatus.PENDING
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    manager_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def type_label(self) -> str:
        return self.leave_type.value.capitalize()
